"""CLI entry-point for changelog_lint.

Usage:
    python -m changelog_lint [PATH]
    python -m changelog_lint check [PATH] [--json] [--strict] [--require-issue-refs] [--require-unreleased]
                                     [--require-version-order]
    python -m changelog_lint releases [PATH] [--json]
    python -m changelog_lint notes VERSION [PATH] [--output FILE]
    python -m changelog_lint validate <report.json>

Every subcommand accepts ``--config FILE`` (default ``.changelog-lint.yml``)
and ``--verbose``.  PATH defaults to the configured changelog.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from enum import IntEnum
from pathlib import Path

from changelog_lint import __version__
from changelog_lint.api import check_text, read_changelog, release_notes
from changelog_lint.contracts.load import validate_file
from changelog_lint.core.changelog import load_changelog
from changelog_lint.core.config import LintConfig, load_config
from changelog_lint.core.errors import ChangelogError, ConfigError
from changelog_lint.utils.json_norm import stable_json_dumps

logger = logging.getLogger("changelog_lint")

_KNOWN_COMMANDS = {"check", "releases", "notes", "validate"}


class ExitCode(IntEnum):
    """Exit status shared by every subcommand.

    Code  Meaning
    ----  -------
      0   Success: changelog is valid
      1   Violation: grammar errors, missing release, strict-mode warnings
      2   Error: usage error, missing file, bad configuration
    """

    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: .changelog-lint.yml if present).",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging on stderr.",
    )


def _add_path(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=None,
        help="Changelog file (default: the configured changelog, CHANGELOG.md).",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="changelog-lint",
        description="Validate and inspect Keep-a-Changelog style changelogs.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    sub = p.add_subparsers(dest="command")

    # ── check ────────────────────────────────────────────────────────
    check_p = sub.add_parser("check", help="Validate a changelog.")
    _add_path(check_p)
    _add_common(check_p)
    check_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the full report JSON to stdout.",
    )
    check_p.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Treat warnings as violations.",
    )
    check_p.add_argument(
        "--require-issue-refs",
        dest="require_issue_refs",
        action="store_true",
        default=None,
        help="Warn about items without a trailing '#ABC-123' reference.",
    )
    check_p.add_argument(
        "--require-unreleased",
        dest="require_unreleased",
        action="store_true",
        default=None,
        help="Warn when the changelog has no 'Unreleased' release.",
    )
    check_p.add_argument(
        "--require-version-order",
        dest="require_version_order",
        action="store_true",
        default=None,
        help="Warn when releases are not listed newest first.",
    )

    # ── releases ─────────────────────────────────────────────────────
    rel_p = sub.add_parser("releases", help="List releases with version, date and spans.")
    _add_path(rel_p)
    _add_common(rel_p)
    rel_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print releases as JSON to stdout.",
    )

    # ── notes ────────────────────────────────────────────────────────
    notes_p = sub.add_parser("notes", help="Print the text of one release.")
    notes_p.add_argument("release", help="Version (e.g. 1.2.3, v1.2.3 or 1.2) or 'Unreleased'.")
    _add_path(notes_p)
    _add_common(notes_p)
    notes_p.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the notes to this file instead of stdout.",
    )

    # ── validate ─────────────────────────────────────────────────────
    val_p = sub.add_parser("validate", help="Validate a JSON report against the bundled schema.")
    val_p.add_argument("instance", type=Path, help="Path to the JSON report to validate.")
    _add_common(val_p)

    return p


def _resolve(args: argparse.Namespace) -> LintConfig:
    config = load_config(args.config)
    overrides = {
        name: getattr(args, name)
        for name in ("strict", "require_issue_refs", "require_unreleased", "require_version_order")
        if getattr(args, name, None) is not None
    }
    if getattr(args, "path", None) is not None:
        overrides["changelog"] = args.path
    return replace(config, **overrides)


def _print_human(report: dict) -> None:
    path = report.get("path") or "<changelog>"
    if report["ok"]:
        s = report["summary"]
        latest = s["latest_version"] or "none"
        print(
            f"OK: {path}: {s['releases']} release(s), {s['items']} item(s), latest {latest}",
            file=sys.stderr,
        )
    else:
        print(f"FAIL: {path}: {len(report['errors'])} error(s)", file=sys.stderr)
        for e in report["errors"]:
            print(f"  {e}", file=sys.stderr)
    for w in report["warnings"]:
        print(f"  warning: {w}", file=sys.stderr)


def _handle_check(args: argparse.Namespace, config: LintConfig) -> int:
    report = check_text(read_changelog(config.changelog), config=config, path=config.changelog)
    if args.json_out:
        sys.stdout.write(stable_json_dumps(report))
    else:
        _print_human(report)
    if not report["ok"]:
        return ExitCode.VIOLATION
    if config.strict and report["warnings"]:
        return ExitCode.VIOLATION
    return ExitCode.SUCCESS


def _handle_releases(args: argparse.Namespace, config: LintConfig) -> int:
    changelog = load_changelog(read_changelog(config.changelog))
    if args.json_out:
        sys.stdout.write(stable_json_dumps([r.to_dict() for r in changelog.releases]))
        return ExitCode.SUCCESS
    for release in changelog.releases:
        if release.meta is None:
            label = "Unreleased"
        else:
            label = f"{release.meta.version} ({release.meta.date.isoformat()})"
        sections = ", ".join(n.value for n in release.sections) or "-"
        print(f"{label}\t{release.start}-{release.end}\t{sections}")
    return ExitCode.SUCCESS


def _handle_notes(args: argparse.Namespace, config: LintConfig) -> int:
    changelog = load_changelog(read_changelog(config.changelog))
    try:
        notes = release_notes(changelog, args.release)
    except LookupError as e:
        print(f"FAIL: {e}", file=sys.stderr)
        return ExitCode.VIOLATION
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8", newline="") as fh:
            fh.write(notes)
        print(f"wrote release notes to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(notes)
    return ExitCode.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    import jsonschema

    try:
        validate_file(args.instance, "changelog_report.schema.json")
    except jsonschema.exceptions.ValidationError as e:
        print(f"FAIL: {e.message}", file=sys.stderr)
        return ExitCode.VIOLATION
    except (OSError, json.JSONDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    except ValueError as e:
        # wrong schema_version
        print(f"FAIL: {e}", file=sys.stderr)
        return ExitCode.VIOLATION
    print("OK")
    return ExitCode.SUCCESS


def main(argv: list[str] | None = None) -> int:
    """Entry-point: returns an exit code (0 = ok, 1 = violation, 2 = error)."""
    effective_argv = list(argv) if argv is not None else sys.argv[1:]

    # `changelog-lint` and `changelog-lint CHANGELOG.md` default to `check`.
    first_positional = next((a for a in effective_argv if not a.startswith("-")), None)
    if first_positional not in _KNOWN_COMMANDS and not {"-h", "--help", "--version"} & set(
        effective_argv
    ):
        effective_argv = ["check", *effective_argv]

    args = _build_parser().parse_args(effective_argv)
    _configure_logging(getattr(args, "verbose", False))

    if args.command == "validate":
        return _handle_validate(args)

    try:
        config = _resolve(args)
        logger.debug("using config %s", config)
        if args.command == "releases":
            return _handle_releases(args, config)
        if args.command == "notes":
            return _handle_notes(args, config)
        return _handle_check(args, config)
    except ChangelogError as e:
        print(f"FAIL: {config.changelog}: {len(e.errors)} error(s)", file=sys.stderr)
        for err in e.errors:
            print(f"  {err}", file=sys.stderr)
        return ExitCode.VIOLATION
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    except FileNotFoundError as e:
        print(f"error: changelog not found: {e.filename}", file=sys.stderr)
        return ExitCode.ERROR
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR


if __name__ == "__main__":
    raise SystemExit(main())
