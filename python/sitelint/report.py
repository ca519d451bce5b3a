# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
from __future__ import annotations

import json
from itertools import groupby

from .types import Finding, LintResult

REPORT_SCHEMA = "sitelint.report.v1"
SUCCESS_MESSAGE = "[ok] All lint checks passed"


def _line(finding: Finding) -> str:
    label = "[error]" if finding.is_error else "[warn]"
    where = f":{finding.line}" if finding.line else ""
    return f"  {label} {finding.rule_code}{where} {finding.message}"


def render_text(result: LintResult) -> str:
    """Group findings by file path; inside a file keep errors, then warnings, as stored."""
    if result.is_empty():
        return SUCCESS_MESSAGE + "\n"
    ordered = sorted([*result.errors, *result.warnings], key=lambda f: f.file_path)
    lines: list[str] = []
    for file_path, group in groupby(ordered, key=lambda f: f.file_path):
        lines.append("")
        lines.append(file_path)
        lines.extend(_line(f) for f in group)
    lines.append("")
    lines.append(f"{result.error_count} error(s), {result.warning_count} warning(s)")
    return "\n".join(lines) + "\n"


def render_json(result: LintResult) -> str:
    payload = {"schema": REPORT_SCHEMA, **result.to_dict()}
    return json.dumps(payload, ensure_ascii=True, indent=2) + "\n"


REPORT_FORMATS = {
    "text": render_text,
    "json": render_json,
}


def render(result: LintResult, fmt: str = "text") -> str:
    try:
        renderer = REPORT_FORMATS[fmt]
    except KeyError:
        raise ValueError(f"Unsupported report format {fmt!r} (expected {', '.join(REPORT_FORMATS)})") from None
    return renderer(result)
