from __future__ import annotations

from pathlib import Path

import pytest

from sitelint import runner
from sitelint.document import DocumentParseError
from sitelint.runner import DiscoveryError, discover_files, lint_file, lint_files, run_lint


def test_discovery_requires_existing_root(tmp_path: Path) -> None:
    with pytest.raises(DiscoveryError, match="not found"):
        discover_files(tmp_path / "_site")


def test_discovery_rejects_file_root(write_page, tmp_path: Path) -> None:
    write_page("_site", "<html></html>")
    with pytest.raises(DiscoveryError, match="not a directory"):
        discover_files(tmp_path / "_site")


def test_discovery_with_no_pages_is_an_error(tmp_path: Path) -> None:
    (tmp_path / "_site").mkdir()
    (tmp_path / "_site" / "style.css").write_text("", encoding="utf-8")
    with pytest.raises(DiscoveryError, match="No HTML files found"):
        discover_files(tmp_path / "_site")


def test_discovery_is_sorted_and_honors_exclude(write_page, tmp_path: Path) -> None:
    write_page("_site/b/index.html", "")
    write_page("_site/a.html", "")
    write_page("_site/drafts/x.html", "")
    files = discover_files(tmp_path / "_site", exclude=["drafts/*"])
    assert [p.relative_to(tmp_path / "_site").as_posix() for p in files] == ["a.html", "b/index.html"]


def test_undecodable_file_becomes_parse_finding(tmp_path: Path) -> None:
    path = tmp_path / "bad.html"
    path.write_bytes(b"<html lang='en'>\xff\xfe\xfa</html>")
    findings = lint_file(path, "bad.html")
    assert [f.rule_code for f in findings] == ["F001"]
    assert findings[0].severity == "error"
    assert findings[0].message.startswith("Unable to read or parse document: UnicodeDecodeError")


def test_paths_are_shown_relative_to_cwd(write_page, tmp_path: Path, monkeypatch, page) -> None:
    path = write_page("_site/index.html", page(lang=None))
    monkeypatch.chdir(tmp_path)
    [(shown, findings)] = lint_files([path])
    assert shown == "_site/index.html"
    assert findings[0].file_path == "_site/index.html"


@pytest.mark.parametrize("jobs", [1, 4])
def test_results_keep_input_order(write_page, page, jobs: int) -> None:
    paths = [
        write_page(f"_site/p{i}.html", page(lang=None) if i % 2 else page())
        for i in range(8)
    ]
    results = lint_files(paths, jobs=jobs)
    assert [Path(shown).name for shown, _ in results] == [f"p{i}.html" for i in range(8)]
    assert [len(findings) for _, findings in results] == [0, 1] * 4


@pytest.mark.parametrize("jobs", [1, 3])
def test_crash_in_one_file_does_not_stop_the_batch(write_page, page, monkeypatch, jobs: int) -> None:
    paths = [write_page(f"_site/p{i}.html", page()) for i in range(3)]
    real = runner.lint_file

    def flaky(path, shown=None):
        if Path(path).name == "p1.html":
            raise MemoryError("boom")
        return real(path, shown)

    monkeypatch.setattr(runner, "lint_file", flaky)
    results = lint_files(paths, jobs=jobs)
    assert [len(f) for _, f in results] == [0, 1, 0]
    crash = results[1][1][0]
    assert crash.rule_code == "F002"
    assert crash.message == "Rule * failed: MemoryError: boom"


def test_progress_callback_receives_one_line_per_file(write_page, page) -> None:
    paths = [write_page(f"_site/p{i}.html", page()) for i in range(2)]
    seen: list[str] = []
    lint_files(paths, progress=seen.append)
    assert len(seen) == 2
    assert all("0 finding(s)" in line for line in seen)


def test_run_lint_aggregates_all_files(write_page, page, tmp_path: Path) -> None:
    write_page("_site/index.html", page())
    write_page("_site/about/index.html", page("<h1>A</h1><h1>B</h1>"))
    write_page("_site/menu.html", page('<h1>M</h1><button aria-expanded="false">Menu</button>'))
    result = run_lint(tmp_path / "_site", jobs=2)
    assert result.file_count == 3
    assert [f.rule_code for f in result.errors] == ["E009"]
    assert [f.rule_code for f in result.warnings] == ["C004"]
    assert result.has_errors()


def test_run_lint_fails_before_checking_when_nothing_found(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "_site").mkdir()
    called = []
    monkeypatch.setattr(runner, "lint_files", lambda *a, **k: called.append(1) or [])
    with pytest.raises(DiscoveryError):
        run_lint(tmp_path / "_site")
    assert called == []


def test_unparseable_document_becomes_parse_finding(write_page, page, monkeypatch) -> None:
    path = write_page("_site/index.html", page())

    def broken(html):
        raise DocumentParseError("tree builder gave up")

    monkeypatch.setattr(runner, "parse_html", broken)
    findings = lint_file(path, "_site/index.html")
    assert [(f.rule_code, f.message) for f in findings] == [
        ("F001", "Unable to read or parse document: tree builder gave up")
    ]
