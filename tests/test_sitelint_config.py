from __future__ import annotations

from pathlib import Path

import pytest

from sitelint.config import ConfigError, LintConfig


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_default_config_uses_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = LintConfig.load()
    assert config.get_root() == tmp_path / "_site"
    assert config.get_pattern() == "**/*.html"
    assert config.get_exclude() == []
    assert config.get_jobs() == 1
    assert config.get_format() == "text"


def test_explicit_missing_config_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        LintConfig.load(tmp_path / "nope.toml")


def test_values_resolve_relative_to_config_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "proj" / "sitelint.toml",
        '[lint]\nroot = "build"\npattern = "*.html"\nexclude = "drafts/*"\njobs = 4\nformat = "json"\n',
    )
    config = LintConfig.load(path)
    assert config.get_root() == tmp_path / "proj" / "build"
    assert config.get_pattern() == "*.html"
    assert config.get_exclude() == ["drafts/*"]
    assert config.get_jobs() == 4
    assert config.get_format() == "json"


@pytest.mark.parametrize(
    "body",
    [
        "[lint]\njobs = 0\n",
        '[lint]\nformat = "xml"\n',
        "[lint]\nexclude = [1]\n",
        "[lint]\nrooot = 'typo'\n",
        "lint = 3\n",
        "[lint\n",
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, body: str) -> None:
    path = _write(tmp_path / "sitelint.toml", body)
    with pytest.raises(ConfigError):
        LintConfig.load(path)
