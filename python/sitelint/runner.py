# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""File discovery and the parse -> check -> aggregate batch."""
from __future__ import annotations

import fnmatch
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, Sequence

from .checker import check
from .document import DocumentParseError, parse_html
from .types import Finding, LintResult

DEFAULT_ROOT = "_site"
DEFAULT_PATTERN = "**/*.html"


class DiscoveryError(RuntimeError):
    pass


def _display_path(path: Path) -> str:
    try:
        return path.resolve().relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def _excluded(rel: str, exclude: Sequence[str]) -> bool:
    return any(fnmatch.fnmatch(rel, pat) for pat in exclude)


def discover_files(
    root: str | Path = DEFAULT_ROOT,
    pattern: str = DEFAULT_PATTERN,
    *,
    exclude: Sequence[str] = (),
) -> list[Path]:
    """Return the sorted HTML files under ``root``.

    Finding nothing is an error: a site that did not build must not lint clean.
    """
    base = Path(root)
    if not base.exists():
        raise DiscoveryError(f"Site root not found: {base}. Build the site first.")
    if not base.is_dir():
        raise DiscoveryError(f"Site root is not a directory: {base}")
    try:
        files = sorted(
            p
            for p in base.glob(pattern)
            if p.is_file() and not _excluded(p.relative_to(base).as_posix(), exclude)
        )
    except OSError as exc:
        raise DiscoveryError(f"Cannot read site root {base}: {exc}") from exc
    if not files:
        raise DiscoveryError(f"No HTML files found in {base}/ matching {pattern!r}. Build the site first.")
    return files


def lint_file(path: str | Path, display_path: str | None = None) -> list[Finding]:
    """Parse and check one file; read and parse failures become ``F001``."""
    p = Path(path)
    shown = display_path or _display_path(p)
    try:
        html = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return [Finding.from_rule("F001", shown, reason=f"{type(exc).__name__}: {exc}")]
    try:
        document = parse_html(html)
    except DocumentParseError as exc:
        return [Finding.from_rule("F001", shown, reason=str(exc))]
    return check(document, shown)


def _crashed(shown: str, exc: BaseException) -> list[Finding]:
    return [Finding.from_rule("F002", shown, rule="*", reason=f"{type(exc).__name__}: {exc}")]


def lint_files(
    paths: Iterable[str | Path],
    *,
    jobs: int = 1,
    progress: Callable[[str], None] | None = None,
) -> list[tuple[str, list[Finding]]]:
    """Lint ``paths`` and return ``(display_path, findings)`` in input order.

    With ``jobs > 1`` files are checked on a thread pool. Each worker returns
    its own list; nothing is shared until the ordered merge at the end.
    """
    selected = [(Path(p), _display_path(Path(p))) for p in paths]

    def _one(path: Path, shown: str) -> list[Finding]:
        started = time.perf_counter()
        findings = lint_file(path, shown)
        if progress is not None:
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            progress(f"{shown}: {len(findings)} finding(s) in {elapsed_ms:.1f} ms")
        return findings

    results: list[tuple[str, list[Finding]]] = []
    if jobs <= 1 or len(selected) <= 1:
        for path, shown in selected:
            try:
                findings = _one(path, shown)
            except Exception as exc:  # noqa: BLE001
                findings = _crashed(shown, exc)
            results.append((shown, findings))
        return results

    by_index: dict[int, list[Finding]] = {}
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        fut_to_index = {
            pool.submit(_one, path, shown): index for index, (path, shown) in enumerate(selected)
        }
        for fut in as_completed(fut_to_index):
            index = fut_to_index[fut]
            try:
                by_index[index] = fut.result()
            except Exception as exc:  # noqa: BLE001
                by_index[index] = _crashed(selected[index][1], exc)
    return [(shown, by_index[index]) for index, (_, shown) in enumerate(selected)]


def aggregate(per_file: Iterable[tuple[str, list[Finding]]]) -> LintResult:
    result = LintResult()
    for _, findings in per_file:
        result.add_file(findings)
    return result


def run_lint(
    root: str | Path = DEFAULT_ROOT,
    pattern: str = DEFAULT_PATTERN,
    *,
    exclude: Sequence[str] = (),
    jobs: int = 1,
    progress: Callable[[str], None] | None = None,
) -> LintResult:
    """Discover, check and aggregate. Raises :class:`DiscoveryError` before any checking."""
    files = discover_files(root, pattern, exclude=exclude)
    return aggregate(lint_files(files, jobs=jobs, progress=progress))
