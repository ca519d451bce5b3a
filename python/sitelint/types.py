# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .catalog import Severity, get_rule, render_message


@dataclass(frozen=True)
class Finding:
    file_path: str
    rule_code: str
    message: str
    severity: str
    line: int | None = None

    @classmethod
    def from_rule(cls, code: str, file_path: str, /, *, line: int | None = None, **values: Any) -> "Finding":
        rule = get_rule(code)
        return cls(
            file_path=file_path,
            rule_code=rule.code,
            message=render_message(rule, **values),
            severity=rule.severity,
            line=line,
        )

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file_path,
            "code": self.rule_code,
            "message": self.message,
            "line": self.line,
            "severity": self.severity,
        }


@dataclass
class LintResult:
    """Findings of one run, split by severity in submission order."""

    errors: list[Finding] = field(default_factory=list)
    warnings: list[Finding] = field(default_factory=list)
    file_count: int = 0

    def add(self, finding: Finding) -> None:
        if finding.is_error:
            self.errors.append(finding)
        else:
            self.warnings.append(finding)

    def extend(self, findings: Iterable[Finding]) -> None:
        for finding in findings:
            self.add(finding)

    def add_file(self, findings: Iterable[Finding]) -> None:
        self.file_count += 1
        self.extend(findings)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def ok(self) -> bool:
        return not self.has_errors()

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def is_empty(self) -> bool:
        return not self.errors and not self.warnings

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "file_count": self.file_count,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "errors": [f.to_dict() for f in self.errors],
            "warnings": [f.to_dict() for f in self.warnings],
        }
