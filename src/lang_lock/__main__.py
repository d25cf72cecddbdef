"""CLI entry-point for lang_lock.

Usage:
    python -m lang_lock export-locked [--base-path DIR] [--config FILE] [--dry-run]
                                      [--format php|json] [--lock-vendor] [--json]
    python -m lang_lock generate-source [--base-path DIR] [--config FILE]
                                        [--vendor PKG ...] [--source LOCALE]
                                        [--dry-run] [--force] [--json]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lang_lock import __version__
from lang_lock.api import export_locked as _api_export_locked
from lang_lock.api import generate_source as _api_generate_source
from lang_lock.errors import LangLockError
from lang_lock.model import OutputFormat
from lang_lock.model.report import ExportStatus
from lang_lock.reports.console import (
    make_console,
    render_export_report,
    render_generate_report,
)
from lang_lock.utils.exit_codes import ExitCode
from lang_lock.utils.json_norm import stable_json_dump


def _add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--base-path",
        dest="base_path",
        type=Path,
        default=Path("."),
        help="Project root holding config/ and the translation directory (default: .).",
    )
    p.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Translator config file (default: config/ai-translator.php).",
    )
    p.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=False,
        help="Show what would change without writing anything.",
    )
    p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the machine-readable report to stdout.",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log every scanned file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lang-lock",
        description="Protect locked translation keys and generate missing source locales.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    sub = p.add_subparsers(dest="command")

    # ── export-locked ───────────────────────────────────────────────
    export_p = sub.add_parser(
        "export-locked",
        help="Export @locked markers from translation files to config.",
    )
    _add_common_options(export_p)
    export_p.add_argument(
        "--format",
        dest="fmt",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.PHP.value,
        help="php: patch the config file; json: write locked-translations.json.",
    )
    export_p.add_argument(
        "--lock-vendor",
        dest="lock_vendor",
        action="store_true",
        default=False,
        help="Lock all vendor package translations.",
    )

    # ── generate-source ─────────────────────────────────────────────
    gen_p = sub.add_parser(
        "generate-source",
        help="Generate source language files from translation keys.",
    )
    _add_common_options(gen_p)
    gen_p.add_argument(
        "--vendor",
        dest="packages",
        action="append",
        default=[],
        metavar="PKG",
        help="Only process this vendor package (repeatable).",
    )
    gen_p.add_argument(
        "--source",
        dest="source_locale",
        default="en",
        help="Source locale to generate (default: en).",
    )
    gen_p.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite existing source files.",
    )
    return p


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _handle_export_locked(args: argparse.Namespace) -> int:
    console = make_console()
    console.print("Scanning translation files for @locked markers...")
    report, report_dict = _api_export_locked(
        args.base_path.resolve(),
        config_path=args.config_path,
        fmt=args.fmt,
        dry_run=args.dry_run,
        lock_vendor=args.lock_vendor,
    )
    render_export_report(report, console)
    if args.json_out:
        stable_json_dump(report_dict, sys.stdout)
    if report.status is ExportStatus.ANCHOR_NOT_FOUND:
        return ExitCode.VIOLATION
    return ExitCode.SUCCESS


def _handle_generate_source(args: argparse.Namespace) -> int:
    console = make_console()
    console.print("Scanning vendor packages for missing source locale...")
    report, report_dict = _api_generate_source(
        args.base_path.resolve(),
        config_path=args.config_path,
        source_locale=args.source_locale,
        packages=args.packages or None,
        dry_run=args.dry_run,
        force=args.force,
    )
    render_generate_report(report, console)
    if args.json_out:
        stable_json_dump(report_dict, sys.stdout)
    return ExitCode.SUCCESS


_HANDLERS = {
    "export-locked": _handle_export_locked,
    "generate-source": _handle_generate_source,
}


def main(argv: list[str] | None = None) -> int:
    """Entry-point.  Returns an exit code (0 = ok, 1 = not placed, 2 = error)."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    handler = _HANDLERS.get(args.command)
    if handler is None:
        parser.print_usage(sys.stderr)
        print("error: please choose a command: export-locked or generate-source.", file=sys.stderr)
        return ExitCode.ERROR

    _configure_logging(args.verbose)
    try:
        return handler(args)
    except LangLockError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    except OSError as e:
        where = f"{e.filename}: " if e.filename else ""
        print(f"error: {where}{e.strerror or e}", file=sys.stderr)
        return ExitCode.ERROR


if __name__ == "__main__":
    raise SystemExit(main())
