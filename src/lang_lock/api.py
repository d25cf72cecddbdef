"""
lang_lock.api
=============

Programmatic entrypoints for using lang_lock without the CLI.

Goals:
  - No argparse / console dependencies
  - Returns both the report object and a JSON-friendly dict

Usage::

    from lang_lock.api import export_locked, generate_source

    report, report_dict = export_locked(".", fmt="json", lock_vendor=True)
    report, report_dict = generate_source(".", packages=["mailcoach"], dry_run=True)
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from lang_lock.core.config import load_config
from lang_lock.core.runner import run_export, run_generate
from lang_lock.model import OutputFormat
from lang_lock.model.report import ExportReport, GenerateReport


def _to_path(p: str | Path) -> Path:
    return p if isinstance(p, Path) else Path(p)


# ── export_locked ───────────────────────────────────────────────────


def export_locked(
    base_path: str | Path,
    *,
    config_path: str | Path | None = None,
    fmt: str | OutputFormat = OutputFormat.PHP,
    dry_run: bool = False,
    lock_vendor: bool = False,
) -> tuple[ExportReport, dict]:
    """Merge ``@locked`` markers (and optionally vendor keys) into ``locked_keys``.

    Parameters
    ----------
    base_path:
        Project root holding ``config/`` and the translation source directory.
    config_path:
        Config file to read and patch.  Relative paths resolve against
        *base_path*.  Default: ``config/ai-translator.php``.
    fmt:
        ``"php"`` patches the config file; ``"json"`` writes
        ``locked-translations.json`` under *base_path*.
    dry_run:
        Report what would change without writing anything.
    lock_vendor:
        Lock every key of every ``vendor/{package}`` translation file.

    Raises
    ------
    MissingDirectoryError
        The source directory does not exist.
    ConfigNotFoundError
        ``fmt="php"`` and the config file does not exist.
    """
    config = load_config(
        _to_path(base_path),
        _to_path(config_path) if config_path is not None else None,
    )
    report = run_export(
        config,
        fmt=OutputFormat(fmt),
        dry_run=dry_run,
        lock_vendor=lock_vendor,
    )
    return report, report.to_dict()


# ── generate_source ─────────────────────────────────────────────────


def generate_source(
    base_path: str | Path,
    *,
    config_path: str | Path | None = None,
    source_locale: str = "en",
    packages: Iterable[str] | None = None,
    dry_run: bool = False,
    force: bool = False,
) -> tuple[GenerateReport, dict]:
    """Create source-locale files for vendor packages keyed by their own text.

    Each package without a ``{source_locale}`` directory (or every package
    when *force* is set) gets one file per reference-locale file, in which
    every value equals its key.

    Raises ``MissingDirectoryError`` if ``{source_dir}/vendor`` does not exist.
    """
    config = load_config(
        _to_path(base_path),
        _to_path(config_path) if config_path is not None else None,
    )
    report = run_generate(
        config,
        source_locale=source_locale,
        packages=list(packages) if packages else None,
        dry_run=dry_run,
        force=force,
    )
    return report, report.to_dict()
