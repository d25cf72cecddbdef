"""Layout discovery — locale, vendor package and translation-file paths.

Expected layout::

    {source_dir}/{locale}/*.php
    {source_dir}/vendor/{package}/{locale}/*.php

Backup directories are never scanned.  Every listing is sorted so runs are
deterministic.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from lang_lock.errors import MissingDirectoryError

BACKUP_DIR_NAMES = frozenset({"backup", ".backup", "_backup"})
VENDOR_DIR_NAME = "vendor"
TRANSLATION_EXT = ".php"


def require_dir(path: Path, what: str = "Source directory") -> Path:
    """Return *path*, or raise ``MissingDirectoryError`` if it is not a directory."""
    if not path.is_dir():
        raise MissingDirectoryError(path, what)
    return path


def _subdirs(parent: Path) -> list[Path]:
    return sorted(
        p for p in parent.iterdir() if p.is_dir() and p.name not in BACKUP_DIR_NAMES
    )


def iter_locale_dirs(source_dir: Path) -> list[Path]:
    """Direct locale directories (``vendor`` and backups excluded)."""
    return [p for p in _subdirs(source_dir) if p.name != VENDOR_DIR_NAME]


def iter_vendor_packages(
    vendor_dir: Path,
    packages: Iterable[str] | None = None,
) -> list[Path]:
    """Package directories under ``vendor/``, optionally filtered by name."""
    wanted = set(packages or ())
    return [p for p in _subdirs(vendor_dir) if not wanted or p.name in wanted]


def iter_package_locales(package_dir: Path) -> list[Path]:
    return _subdirs(package_dir)


def iter_translation_files(locale_dir: Path) -> list[Path]:
    return sorted(
        p for p in locale_dir.glob(f"*{TRANSLATION_EXT}") if p.is_file()
    )
