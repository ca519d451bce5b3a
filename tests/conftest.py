from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
PYTHON_SRC = ROOT / "python"

if str(PYTHON_SRC) not in sys.path:
    sys.path.insert(0, str(PYTHON_SRC))
else:
    sys.path.remove(str(PYTHON_SRC))
    sys.path.insert(0, str(PYTHON_SRC))


def _prefer_local_sitelint_package() -> None:
    loaded = sys.modules.get("sitelint")
    if loaded is None:
        return
    mod_file = getattr(loaded, "__file__", "") or ""
    if str(PYTHON_SRC / "sitelint") in mod_file:
        return
    for name in list(sys.modules):
        if name == "sitelint" or name.startswith("sitelint."):
            sys.modules.pop(name, None)


_prefer_local_sitelint_package()


BRAND_BAR = (
    '<header class="brand-bar"><a href="https://www.uiowa.edu" class="brand-bar__logo">'
    '<svg aria-hidden="true" focusable="false"></svg>'
    '<span class="visually-hidden">University of Iowa homepage</span></a></header>'
)

BRAND_FOOTER = (
    '<footer class="brand-footer"><nav class="brand-footer__links" aria-label="Required links"><ul>'
    '<li><a href="https://uiowa.edu/privacy">Privacy Notice</a></li>'
    '<li><a href="https://opsmanual.uiowa.edu/community-policies/nondiscrimination-statement">'
    "Nondiscrimination Statement</a></li>"
    '<li><a href="https://accessibility.uiowa.edu/">Accessibility</a></li>'
    '<li><a href="/accessibility-help/">Report an accessibility issue</a></li>'
    "</ul></nav></footer>"
)


def build_page(
    body: str = "<h1>Welcome</h1><p>Content</p>",
    *,
    lang: str | None = "en",
    skip_link: str = '<a class="skip-link" href="#main-content">Skip to main content</a>',
    brand_bar: str = BRAND_BAR,
    main_open: str = '<main id="main-content">',
    brand_footer: str = BRAND_FOOTER,
    head: str = "<title>Test page</title>",
) -> str:
    """A page that passes every rule unless a part is overridden."""
    lang_attr = f' lang="{lang}"' if lang is not None else ""
    main_close = "</main>" if main_open else ""
    return (
        f"<!DOCTYPE html>\n<html{lang_attr}>\n<head>{head}</head>\n<body>\n"
        f"{skip_link}\n{brand_bar}\n{main_open}\n{body}\n{main_close}\n{brand_footer}\n"
        "</body>\n</html>\n"
    )


@pytest.fixture
def page():
    return build_page


@pytest.fixture
def write_page(tmp_path: Path):
    def _write(rel: str, html: str) -> Path:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        return path

    return _write
