from __future__ import annotations

import pytest

from sitelint.catalog import (
    RULES,
    RULES_BY_CODE,
    Category,
    Severity,
    get_rule,
    render_message,
)
from sitelint.types import Finding


def test_rule_codes_are_unique_and_ordered() -> None:
    codes = [rule.code for rule in RULES]
    assert len(codes) == len(set(codes))
    assert codes[:3] == ["E001", "E002", "E003"]
    assert codes.index("E018") < codes.index("S001") < codes.index("C001")


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        RULES_BY_CODE["X999"] = RULES[0]  # type: ignore[index]
    with pytest.raises(AttributeError):
        RULES[0].message = "changed"  # type: ignore[misc]


def test_only_expanded_state_rule_is_a_warning() -> None:
    warnings = [rule.code for rule in RULES if rule.severity == Severity.WARNING]
    assert warnings == ["C004"]


def test_categories() -> None:
    assert get_rule("E011").category == Category.PAGE_STRUCTURE
    assert get_rule("S002").category == Category.STYLE_TOKEN
    assert get_rule("C002").category == Category.COMPONENT_PATTERN
    assert get_rule("F001").category == Category.INTERNAL


def test_render_message_substitutes_placeholders() -> None:
    assert render_message("E004", landmark="main") == "Missing required landmark: main"
    assert render_message("E011", **{"from": 2, "to": 4}) == "Heading level skipped: h2 to h4"
    assert get_rule("E012").render(id="foo") == "Duplicate ID: foo"
    assert render_message("E013") == "Empty link text"


def test_render_message_requires_every_placeholder() -> None:
    with pytest.raises(KeyError):
        render_message("E012")


def test_placeholders_are_discovered_from_template() -> None:
    assert get_rule("E011").placeholders == ("from", "to")
    assert get_rule("E001").placeholders == ()


def test_unknown_rule_raises() -> None:
    with pytest.raises(KeyError):
        get_rule("E999")


def test_rule_placeholder_does_not_clash_with_arguments() -> None:
    assert render_message("F002", rule="E005", reason="x") == "Rule E005 failed: x"
    finding = Finding.from_rule("F002", "p.html", rule="*", reason="y")
    assert finding.message == "Rule * failed: y"
    assert finding.file_path == "p.html"
