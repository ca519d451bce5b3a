# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from .report import REPORT_FORMATS
from .runner import DEFAULT_PATTERN, DEFAULT_ROOT

CONFIG_FILENAME = "sitelint.toml"

# Default configuration structure
DEFAULT_CONFIG = {
    "lint": {
        "root": DEFAULT_ROOT,
        "pattern": DEFAULT_PATTERN,
        "exclude": [],
        "jobs": 1,
        "format": "text",
    }
}


class ConfigError(ValueError):
    pass


class LintConfig:
    def __init__(self, data: Dict[str, Any], path: Optional[Path] = None):
        self.data = data
        self.path = path
        self.root_dir = path.parent if path else Path.cwd()
        self._validate()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "LintConfig":
        """Load configuration from sitelint.toml.

        With no explicit path a missing file means built-in defaults; an
        explicit path that does not exist is an error.
        """
        if path is None:
            path = Path.cwd() / CONFIG_FILENAME
            if not path.exists():
                return cls.defaults()
        elif not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e

        return cls(data, Path(path))

    @classmethod
    def defaults(cls) -> "LintConfig":
        return cls({}, None)

    @property
    def lint(self) -> Dict[str, Any]:
        return self.data.get("lint", {})

    def _get(self, key: str) -> Any:
        return self.lint.get(key, DEFAULT_CONFIG["lint"][key])

    def _validate(self) -> None:
        if not isinstance(self.lint, dict):
            raise ConfigError("[lint] must be a table")
        unknown = sorted(set(self.lint) - set(DEFAULT_CONFIG["lint"]))
        if unknown:
            raise ConfigError(f"Unknown [lint] key(s): {', '.join(unknown)}")
        if not isinstance(self._get("jobs"), int) or self._get("jobs") < 1:
            raise ConfigError("[lint] jobs must be a positive integer")
        if self._get("format") not in REPORT_FORMATS:
            raise ConfigError(f"[lint] format must be one of: {', '.join(sorted(REPORT_FORMATS))}")
        exclude = self._get("exclude")
        if isinstance(exclude, str):
            exclude = [exclude]
        if not isinstance(exclude, list) or not all(isinstance(x, str) for x in exclude):
            raise ConfigError("[lint] exclude must be a list of glob patterns")

    def resolve_path(self, relative_path: str) -> Path:
        return self.root_dir / relative_path

    # Helpers for common fields
    def get_root(self) -> Path:
        return self.resolve_path(str(self._get("root")))

    def get_pattern(self) -> str:
        return str(self._get("pattern"))

    def get_exclude(self) -> List[str]:
        exclude = self._get("exclude")
        return [exclude] if isinstance(exclude, str) else list(exclude)

    def get_jobs(self) -> int:
        return int(self._get("jobs"))

    def get_format(self) -> str:
        return str(self._get("format"))
