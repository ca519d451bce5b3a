# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import argparse
import importlib.metadata as metadata
import json
import sys
from pathlib import Path

import sitelint
from sitelint.catalog import RULES
from sitelint.config import ConfigError, LintConfig
from sitelint.report import REPORT_FORMATS, render
from sitelint.runner import DiscoveryError, aggregate, discover_files, lint_files


LOG_LEVELS = ["error", "warn", "info", "debug"]

EXIT_OK = 0
EXIT_LINT_ERRORS = 1
EXIT_DISCOVERY = 2
EXIT_CLI_ERROR = 3


def _get_version():
    """Return installed sitelint version, with the package version as fallback."""
    try:
        return metadata.version("sitelint")
    except metadata.PackageNotFoundError:
        return sitelint.__version__


def _log(args, level, message):
    """Write a bracket-prefixed status line to stderr when ``level`` is enabled."""
    wanted = getattr(args, "log_level", "info") or "info"
    if LOG_LEVELS.index(level) > LOG_LEVELS.index(wanted):
        return
    sys.stderr.write(f"[{level}] {message}\n")


def _json_dumps(payload, indent=None):
    """JSON serialize payload using CLI defaults."""
    return json.dumps(payload, ensure_ascii=True, indent=indent, default=str)


def _emit_error(args, code, message):
    if getattr(args, "json", False):
        err = {
            "schema": "sitelint.error.v1",
            "ok": False,
            "code": code,
            "message": message,
        }
        sys.stdout.write(_json_dumps(err) + "\n")
    else:
        sys.stderr.write(f"[error] {message}\n")


def _apply_global_flags(args):
    """Apply global CLI flags to process environment and parsed args."""
    if getattr(args, "json", False):
        args.format = "json"


def _resolve_settings(args):
    """Merge sitelint.toml values with explicit CLI flags (flags win)."""
    config = LintConfig.load(Path(args.config) if args.config else None)
    fmt = getattr(args, "format", None) or config.get_format()
    if fmt not in REPORT_FORMATS:
        raise ConfigError(f"unknown format: {fmt} (expected {', '.join(sorted(REPORT_FORMATS))})")
    jobs = args.jobs if getattr(args, "jobs", None) is not None else config.get_jobs()
    if jobs < 1:
        raise ConfigError("--jobs must be at least 1")
    return {
        "root": Path(args.root) if getattr(args, "root", None) else config.get_root(),
        "pattern": getattr(args, "pattern", None) or config.get_pattern(),
        "exclude": config.get_exclude() + list(getattr(args, "exclude", None) or []),
        "jobs": jobs,
        "format": fmt,
    }


def _run_check(args, settings):
    """Run one lint pass and return the process exit code."""
    _log(args, "info", "Running site lint rules...")
    try:
        files = discover_files(settings["root"], settings["pattern"], exclude=settings["exclude"])
    except DiscoveryError as exc:
        _emit_error(args, "DISCOVERY_FAILED", str(exc))
        return EXIT_DISCOVERY

    _log(args, "info", f"Checking {len(files)} HTML file(s)...")
    per_file = lint_files(
        files,
        jobs=settings["jobs"],
        progress=lambda message: _log(args, "debug", message),
    )
    result = aggregate(per_file)
    sys.stdout.write(render(result, settings["format"]))
    return EXIT_LINT_ERRORS if result.has_errors() else EXIT_OK


def cmd_check(args):
    """CLI handler for `sitelint check`."""
    return _run_check(args, _resolve_settings(args))


def cmd_rules(args):
    """CLI handler for listing the rule catalog."""
    if args.json:
        payload = {"schema": "sitelint.rules.v1", "rules": [rule.to_dict() for rule in RULES]}
        sys.stdout.write(_json_dumps(payload) + "\n")
        return EXIT_OK
    for rule in RULES:
        sys.stdout.write(f"{rule.code}  {rule.severity:<7}  {rule.category:<17}  {rule.message}\n")
    return EXIT_OK


def cmd_watch(args):
    """CLI handler for `sitelint watch`."""
    from sitelint.watcher import watch

    settings = _resolve_settings(args)
    root = Path(settings["root"])
    if not root.is_dir():
        _emit_error(args, "DISCOVERY_FAILED", f"Site root not found: {root}. Build the site first.")
        return EXIT_DISCOVERY
    watch(root, lambda: _run_check(args, settings))
    return EXIT_OK


def _add_lint_flags(p):
    """Register discovery/report flags shared by check and watch."""
    p.add_argument("--root", help="Site root to scan (default: _site)")
    p.add_argument("--pattern", help="Glob relative to the root (default: **/*.html)")
    p.add_argument("--exclude", action="append", help="Glob (relative to the root) to skip; repeatable")
    p.add_argument("--jobs", type=int, help="Worker threads used to check files")
    p.add_argument("--format", choices=sorted(REPORT_FORMATS))


def _build_parser():
    """Construct and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(prog="sitelint")
    parser.add_argument("--config")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="info")
    parser.add_argument("--version", action="version", version="sitelint " + _get_version())
    parser.add_argument("--json", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Lint rendered HTML pages and fail on errors")
    _add_lint_flags(p_check)
    p_check.set_defaults(func=cmd_check)

    p_rules = sub.add_parser("rules", help="List the rule catalog")
    p_rules.set_defaults(func=cmd_rules)

    p_watch = sub.add_parser("watch", help="Re-run the lint whenever pages under the root change")
    _add_lint_flags(p_watch)
    p_watch.set_defaults(func=cmd_watch)

    return parser


def main(argv=None):
    """Execute CLI command dispatch and standardized error handling."""
    argv = list(sys.argv[1:] if argv is None else argv)
    force_json = "--json" in argv
    argv = [a for a in argv if a != "--json"]
    parser = _build_parser()
    args = parser.parse_args(argv)
    if force_json:
        args.json = True
    _apply_global_flags(args)
    try:
        return args.func(args)
    except ConfigError as exc:
        _emit_error(args, "CONFIG_ERROR", str(exc))
        return EXIT_CLI_ERROR
    except Exception as exc:
        _emit_error(args, "CLI_ERROR", str(exc))
        return EXIT_CLI_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
