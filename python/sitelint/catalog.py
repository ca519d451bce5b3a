# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Static rule catalog for the site linter.

Rules are declared once, in evaluation order, and shared read-only by every
checker thread. Messages are templates with ``{name}`` placeholders that are
filled from the specific violation instance.
"""
from __future__ import annotations

import string
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping


class Severity:
    ERROR = "error"
    WARNING = "warning"


class Category:
    PAGE_STRUCTURE = "page-structure"
    STYLE_TOKEN = "style-token"
    COMPONENT_PATTERN = "component-pattern"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Rule:
    code: str
    category: str
    message: str
    severity: str = Severity.ERROR

    @property
    def placeholders(self) -> tuple[str, ...]:
        names = []
        for _, field_name, _, _ in string.Formatter().parse(self.message):
            if field_name and field_name not in names:
                names.append(field_name)
        return tuple(names)

    def render(self, **values: Any) -> str:
        return render_message(self, **values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "category": self.category,
            "severity": self.severity,
            "message": self.message,
        }


_P = Category.PAGE_STRUCTURE
_S = Category.STYLE_TOKEN
_C = Category.COMPONENT_PATTERN
_I = Category.INTERNAL

RULES: tuple[Rule, ...] = (
    Rule("E001", _P, "Missing lang attribute on <html>"),
    Rule("E002", _P, "Missing skip link"),
    Rule("E003", _P, "Missing skip link target (#main-content)"),
    Rule("E004", _P, "Missing required landmark: {landmark}"),
    Rule("E005", _P, "Missing BrandBar component"),
    Rule("E006", _P, "Missing BrandFooter component"),
    Rule("E007", _P, "Missing required footer link: {link}"),
    Rule("E008", _P, "Missing accessibility help link"),
    Rule("E009", _P, "Multiple h1 elements found"),
    Rule("E010", _P, "Missing h1 element"),
    Rule("E011", _P, "Heading level skipped: h{from} to h{to}"),
    Rule("E012", _P, "Duplicate ID: {id}"),
    Rule("E013", _P, "Empty link text"),
    Rule("E014", _P, "Image missing alt attribute"),
    Rule("E015", _P, "Table missing headers"),
    Rule("E016", _P, "Media embed missing transcript/captions metadata"),
    Rule("E017", _P, "Form control missing label"),
    Rule("E018", _P, "Interactive element missing accessible name"),
    Rule("S001", _S, "Non-token color value detected: {value}"),
    Rule("S002", _S, "Focus outline removed without replacement"),
    Rule("S003", _S, "Gold/white contrast violation"),
    Rule("C001", _C, "Clickable div detected - use button or link"),
    Rule("C002", _C, "Nested interactive elements"),
    Rule("C003", _C, "Invalid ARIA attribute: {attr}"),
    Rule("C004", _C, "Missing required ARIA attribute: {attr}", Severity.WARNING),
    Rule("F001", _I, "Unable to read or parse document: {reason}"),
    Rule("F002", _I, "Rule {rule} failed: {reason}"),
)

RULES_BY_CODE: Mapping[str, Rule] = MappingProxyType({rule.code: rule for rule in RULES})

# Substrings of the footer link destinations every page must carry.
REQUIRED_FOOTER_LINKS: tuple[str, ...] = (
    "uiowa.edu/privacy",
    "opsmanual.uiowa.edu/community-policies/nondiscrimination-statement",
    "accessibility.uiowa.edu",
)

# Landmark name -> (tag, role) pairs that satisfy it.
LANDMARKS: tuple[tuple[str, str, str], ...] = (
    ("header/banner", "header", "banner"),
    ("main", "main", "main"),
    ("footer/contentinfo", "footer", "contentinfo"),
)

MAIN_CONTENT_ID = "main-content"

VALID_ROLES: frozenset[str] = frozenset(
    {
        "alert", "alertdialog", "application", "article", "banner", "button",
        "cell", "checkbox", "columnheader", "combobox", "complementary",
        "contentinfo", "definition", "dialog", "directory", "document",
        "feed", "figure", "form", "grid", "gridcell", "group", "heading",
        "img", "link", "list", "listbox", "listitem", "log", "main",
        "marquee", "math", "menu", "menubar", "menuitem", "menuitemcheckbox",
        "menuitemradio", "navigation", "none", "note", "option", "presentation",
        "progressbar", "radio", "radiogroup", "region", "row", "rowgroup",
        "rowheader", "scrollbar", "search", "searchbox", "separator", "slider",
        "spinbutton", "status", "switch", "tab", "table", "tablist", "tabpanel",
        "term", "textbox", "timer", "toolbar", "tooltip", "tree", "treegrid",
        "treeitem",
    }
)


def get_rule(code: str) -> Rule:
    try:
        return RULES_BY_CODE[code]
    except KeyError:
        raise KeyError(f"Unknown rule code {code!r}") from None


def render_message(rule: Rule | str, /, **values: Any) -> str:
    """Fill the rule's message template with ``values``.

    Every placeholder must be supplied; extra values are ignored.
    """
    if isinstance(rule, str):
        rule = get_rule(rule)
    missing = [name for name in rule.placeholders if name not in values]
    if missing:
        raise KeyError(f"Rule {rule.code} message needs values for: {', '.join(missing)}")
    return rule.message.format_map({name: values[name] for name in rule.placeholders})
