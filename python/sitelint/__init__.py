# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Accessibility and structure linter for the generated site.

Parses rendered HTML pages and evaluates the fixed rule catalog in
:mod:`sitelint.catalog`; any error-severity finding fails the build.
"""
from .catalog import RULES, Rule, Severity, get_rule, render_message
from .checker import check
from .document import DocumentParseError, parse_html
from .report import render, render_json, render_text
from .runner import DiscoveryError, discover_files, lint_file, lint_files, run_lint
from .types import Finding, LintResult

__version__ = "0.1.0"

SPDX_LICENSE_EXPRESSION = "AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial"

__all__ = [
    "DiscoveryError",
    "DocumentParseError",
    "Finding",
    "LintResult",
    "RULES",
    "Rule",
    "Severity",
    "check",
    "discover_files",
    "get_rule",
    "lint_file",
    "lint_files",
    "parse_html",
    "render",
    "render_json",
    "render_message",
    "render_text",
    "run_lint",
]
