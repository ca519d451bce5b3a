# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Per-document rule evaluation.

Each rule is a function ``(document, file_path) -> list[Finding]`` that only
reads the document. :func:`check` runs them in catalog order and concatenates
their findings.
"""
from __future__ import annotations

import re
from typing import Callable

from .catalog import (
    LANDMARKS,
    MAIN_CONTENT_ID,
    REQUIRED_FOOTER_LINKS,
    RULES,
    VALID_ROLES,
)
from .document import (
    Document,
    Element,
    all_of,
    any_of,
    attr_contains,
    attr_equals,
    find_in,
    has_ancestor,
    has_attr,
    has_class,
    tag,
    text_contains,
)
from .types import Finding

RuleCheck = Callable[[Document, str], list[Finding]]

_HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
_INTERACTIVE_TAGS = ("a", "button")
_CLICKABLE_CONTAINER_TAGS = ("div", "span", "p", "li", "section", "article", "td")
_UNLABELED_INPUT_TYPES = {"hidden", "submit", "button"}
_DECORATIVE_ROLES = {"presentation", "none"}
_CAPTION_TRACK_KINDS = {"captions", "subtitles"}
_VISUALLY_HIDDEN_CLASSES = ("visually-hidden", "sr-only")
_RE_OUTLINE_SUPPRESSED = re.compile(r"outline(?:-width)?\s*:\s*(?:none|0)(?![\w.%])", re.IGNORECASE)
_RE_FOCUS_REPLACEMENT = re.compile(r":focus-visible|box-shadow", re.IGNORECASE)


def _nonempty(el: Element, name: str) -> bool:
    return bool((el.get(name) or "").strip())


def _role(el: Element) -> str:
    return (el.get("role") or "").strip().lower()


# --- page structure ---------------------------------------------------------


def check_lang(doc: Document, path: str) -> list[Finding]:
    root = doc.root()
    if root is not None and _nonempty(root, "lang"):
        return []
    return [Finding.from_rule("E001", path, line=root.line if root is not None else None)]


def check_skip_link(doc: Document, path: str) -> list[Finding]:
    target = f"#{MAIN_CONTENT_ID}"
    skip = doc.select(
        all_of(
            tag("a"),
            attr_equals("href", target),
            any_of(has_class("skip-link"), text_contains("Skip")),
        )
    )
    return [] if skip else [Finding.from_rule("E002", path)]


def check_skip_target(doc: Document, path: str) -> list[Finding]:
    return [] if doc.select(attr_equals("id", MAIN_CONTENT_ID)) else [Finding.from_rule("E003", path)]


def check_landmarks(doc: Document, path: str) -> list[Finding]:
    out = []
    for landmark, landmark_tag, role in LANDMARKS:
        if not doc.select(any_of(tag(landmark_tag), attr_equals("role", role))):
            out.append(Finding.from_rule("E004", path, landmark=landmark))
    return out


def check_brand_bar(doc: Document, path: str) -> list[Finding]:
    return [] if doc.select(has_class("brand-bar")) else [Finding.from_rule("E005", path)]


def check_brand_footer(doc: Document, path: str) -> list[Finding]:
    return [] if doc.select(has_class("brand-footer")) else [Finding.from_rule("E006", path)]


def check_footer_links(doc: Document, path: str) -> list[Finding]:
    in_footer = any_of(tag("footer"), has_class("brand-footer"))
    hrefs = [
        el.get("href") or ""
        for el in doc.select(tag("a"))
        if has_ancestor(el, in_footer)
    ]
    return [
        Finding.from_rule("E007", path, link=required)
        for required in REQUIRED_FOOTER_LINKS
        if not any(required in href for href in hrefs)
    ]


def check_accessibility_help_link(doc: Document, path: str) -> list[Finding]:
    help_link = doc.select(
        all_of(
            tag("a"),
            any_of(
                attr_contains("href", "accessibility-help"),
                text_contains("Report an accessibility issue"),
            ),
        )
    )
    return [] if help_link else [Finding.from_rule("E008", path)]


def check_multiple_h1(doc: Document, path: str) -> list[Finding]:
    h1s = doc.select(tag("h1"))
    return [Finding.from_rule("E009", path, line=h1s[1].line)] if len(h1s) > 1 else []


def check_missing_h1(doc: Document, path: str) -> list[Finding]:
    return [] if doc.select(tag("h1")) else [Finding.from_rule("E010", path)]


def check_heading_order(doc: Document, path: str) -> list[Finding]:
    """Compare each heading with the one right before it in document order.

    Going deeper by more than one level is a skip; going back up is always fine.
    """
    out = []
    last_level = 0
    for heading in doc.select(tag(*_HEADING_TAGS)):
        level = int(heading.tag[1])
        if last_level > 0 and level > last_level + 1:
            out.append(Finding.from_rule("E011", path, line=heading.line, **{"from": last_level, "to": level}))
        last_level = level
    return out


def check_duplicate_ids(doc: Document, path: str) -> list[Finding]:
    out = []
    seen: set[str] = set()
    for el in doc.select(has_attr("id")):
        node_id = el.get("id") or ""
        if node_id in seen:
            out.append(Finding.from_rule("E012", path, line=el.line, id=node_id))
        seen.add(node_id)
    return out


# --- content ----------------------------------------------------------------


def _link_has_name(link: Element) -> bool:
    if link.text() or _nonempty(link, "aria-label") or _nonempty(link, "aria-labelledby"):
        return True
    if find_in(link, all_of(tag("img"), has_attr("alt"))):
        return True
    return bool(find_in(link, has_class(*_VISUALLY_HIDDEN_CLASSES)))


def check_link_names(doc: Document, path: str) -> list[Finding]:
    return [
        Finding.from_rule("E013", path, line=link.line)
        for link in doc.select(tag("a"))
        if not _link_has_name(link)
    ]


def check_image_alt(doc: Document, path: str) -> list[Finding]:
    out = []
    for img in doc.select(tag("img")):
        if img.has("alt"):
            continue
        if _role(img) in _DECORATIVE_ROLES or (img.get("aria-hidden") or "").strip().lower() == "true":
            continue
        out.append(Finding.from_rule("E014", path, line=img.line))
    return out


def check_table_headers(doc: Document, path: str) -> list[Finding]:
    return [
        Finding.from_rule("E015", path, line=table.line)
        for table in doc.select(tag("table"))
        if _role(table) not in _DECORATIVE_ROLES and not find_in(table, tag("th"))
    ]


def _media_has_text_alternative(media: Element) -> bool:
    if media.has("data-transcript") or media.has("data-captions") or _nonempty(media, "aria-describedby"):
        return True
    tracks = find_in(media, tag("track"))
    return any((t.get("kind") or "").strip().lower() in _CAPTION_TRACK_KINDS for t in tracks)


def check_media_alternatives(doc: Document, path: str) -> list[Finding]:
    return [
        Finding.from_rule("E016", path, line=media.line)
        for media in doc.select(tag("audio", "video"))
        if not _media_has_text_alternative(media)
    ]


def check_form_labels(doc: Document, path: str) -> list[Finding]:
    label_targets = {
        (label.get("for") or "") for label in doc.select(all_of(tag("label"), has_attr("for")))
    }
    out = []
    for control in doc.select(tag("input", "select", "textarea")):
        if (control.get("type") or "").strip().lower() in _UNLABELED_INPUT_TYPES:
            continue
        control_id = control.get("id") or ""
        if control_id and control_id in label_targets:
            continue
        if _nonempty(control, "aria-label") or _nonempty(control, "aria-labelledby"):
            continue
        if has_ancestor(control, tag("label")):
            continue
        out.append(Finding.from_rule("E017", path, line=control.line))
    return out


def check_button_names(doc: Document, path: str) -> list[Finding]:
    return [
        Finding.from_rule("E018", path, line=button.line)
        for button in doc.select(lambda el: el.tag == "button" or _role(el) == "button")
        if not (button.text() or _nonempty(button, "aria-label") or _nonempty(button, "aria-labelledby"))
    ]


# --- style tokens -----------------------------------------------------------


def check_color_tokens(doc: Document, path: str) -> list[Finding]:
    # Needs the compiled stylesheet and the token table; not visible in markup.
    return []


def check_focus_outline(doc: Document, path: str) -> list[Finding]:
    sources: list[tuple[Element, str]] = [(el, el.text()) for el in doc.select(tag("style"))]
    sources.extend((el, el.get("style") or "") for el in doc.select(has_attr("style")))
    offenders = [el for el, css in sources if _RE_OUTLINE_SUPPRESSED.search(css)]
    if not offenders:
        return []
    if any(_RE_FOCUS_REPLACEMENT.search(css) for _, css in sources):
        return []
    return [Finding.from_rule("S002", path, line=offenders[0].line)]


def check_contrast(doc: Document, path: str) -> list[Finding]:
    # Contrast needs computed colors; there is no rendering step here.
    return []


# --- component patterns -----------------------------------------------------


def check_clickable_containers(doc: Document, path: str) -> list[Finding]:
    return [
        Finding.from_rule("C001", path, line=el.line)
        for el in doc.select(all_of(tag(*_CLICKABLE_CONTAINER_TAGS), has_attr("onclick")))
    ]


def check_nested_interactive(doc: Document, path: str) -> list[Finding]:
    interactive = tag(*_INTERACTIVE_TAGS)
    return [
        Finding.from_rule("C002", path, line=el.line)
        for el in doc.select(interactive)
        if has_ancestor(el, interactive)
    ]


def check_roles(doc: Document, path: str) -> list[Finding]:
    out = []
    for el in doc.select(has_attr("role")):
        value = el.get("role") or ""
        tokens = value.split()
        if tokens and all(t in VALID_ROLES for t in tokens):
            continue
        out.append(Finding.from_rule("C003", path, line=el.line, attr=f'role="{value}"'))
    return out


def check_expanded_controls(doc: Document, path: str) -> list[Finding]:
    return [
        Finding.from_rule(
            "C004", path, line=el.line, attr="aria-controls on element with aria-expanded"
        )
        for el in doc.select(has_attr("aria-expanded"))
        if not _nonempty(el, "aria-controls")
    ]


RULE_CHECKS: dict[str, RuleCheck] = {
    "E001": check_lang,
    "E002": check_skip_link,
    "E003": check_skip_target,
    "E004": check_landmarks,
    "E005": check_brand_bar,
    "E006": check_brand_footer,
    "E007": check_footer_links,
    "E008": check_accessibility_help_link,
    "E009": check_multiple_h1,
    "E010": check_missing_h1,
    "E011": check_heading_order,
    "E012": check_duplicate_ids,
    "E013": check_link_names,
    "E014": check_image_alt,
    "E015": check_table_headers,
    "E016": check_media_alternatives,
    "E017": check_form_labels,
    "E018": check_button_names,
    "S001": check_color_tokens,
    "S002": check_focus_outline,
    "S003": check_contrast,
    "C001": check_clickable_containers,
    "C002": check_nested_interactive,
    "C003": check_roles,
    "C004": check_expanded_controls,
}


def check(document: Document, file_path: str, *, checks: dict[str, RuleCheck] | None = None) -> list[Finding]:
    """Run every catalog rule against one parsed document.

    A rule that raises is reported as an ``F002`` finding and the remaining
    rules still run.
    """
    table = RULE_CHECKS if checks is None else checks
    findings: list[Finding] = []
    for rule in RULES:
        fn = table.get(rule.code)
        if fn is None:
            continue
        try:
            findings.extend(fn(document, file_path))
        except Exception as exc:
            findings.append(
                Finding.from_rule("F002", file_path, rule=rule.code, reason=f"{type(exc).__name__}: {exc}")
            )
    return findings
