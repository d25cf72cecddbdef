"""Runner — orchestrates scanning, merging and writing for both pipelines.

Each pipeline scans the whole tree before anything is written.  Problems with
a single file are logged, recorded in the report and skipped; a missing root
directory or a failed write of the consolidated artifact propagates.
"""

from __future__ import annotations

import logging
from pathlib import Path

import jsonschema

from lang_lock.contracts.load import validate_instance
from lang_lock.core.config import TranslatorConfig
from lang_lock.core.config_patch import PatchOutcome, patch_locked_keys
from lang_lock.core.discover import (
    iter_locale_dirs,
    iter_package_locales,
    iter_translation_files,
    iter_vendor_packages,
    require_dir,
)
from lang_lock.errors import ConfigNotFoundError, InvalidRegistryError, MalformedTreeError
from lang_lock.model import OutputFormat
from lang_lock.model.discovery import Discovery, dedupe_discoveries
from lang_lock.model.registry import LockedKeyRegistry, merge_registry
from lang_lock.model.report import (
    ExportReport,
    ExportStatus,
    FileStatus,
    GeneratedFile,
    GenerateReport,
    PackageReport,
    PackageStatus,
    SkippedFile,
)
from lang_lock.php.export import export_php_array, render_php_file
from lang_lock.php.loader import load_php_file
from lang_lock.scanner.annotations import scan_translation_file
from lang_lock.scanner.vendor import lock_vendor_tree
from lang_lock.tree import synthesize_source_tree
from lang_lock.utils.json_norm import stable_json_dumps

_logger = logging.getLogger(__name__)

SOURCE_FILE_HEADER = (
    "Auto-generated source file.",
    "Keys are used as values (English source text).",
    "Generated by: lang-lock generate-source",
)


def _os_reason(exc: OSError) -> str:
    return str(exc.strerror or exc)


# ── discovery collection ────────────────────────────────────────────


def collect_discoveries(
    source_dir: Path,
    *,
    lock_vendor: bool = False,
    skipped: list[SkippedFile] | None = None,
) -> list[Discovery]:
    """Scan every locale (and optionally vendor) file under *source_dir*.

    Malformed files are appended to *skipped* and left out.
    """
    require_dir(source_dir)
    skipped = skipped if skipped is not None else []
    found: list[Discovery] = []

    for locale_dir in iter_locale_dirs(source_dir):
        locale = locale_dir.name
        for path in iter_translation_files(locale_dir):
            _logger.debug("Scanning %s for @locked markers", path)
            try:
                found.extend(scan_translation_file(path, locale))
            except MalformedTreeError as exc:
                _logger.warning("Skipping %s: %s", path, exc.reason)
                skipped.append(SkippedFile(path.as_posix(), exc.reason))
            except OSError as exc:
                _logger.warning("Skipping %s: %s", path, _os_reason(exc))
                skipped.append(SkippedFile(path.as_posix(), _os_reason(exc)))

    vendor_dir = source_dir / "vendor"
    if lock_vendor and vendor_dir.is_dir():
        found.extend(_collect_vendor(vendor_dir, skipped))

    return dedupe_discoveries(found)


def _collect_vendor(vendor_dir: Path, skipped: list[SkippedFile]) -> list[Discovery]:
    found: list[Discovery] = []
    for package_dir in iter_vendor_packages(vendor_dir):
        for locale_dir in iter_package_locales(package_dir):
            for path in iter_translation_files(locale_dir):
                _logger.debug("Locking vendor file %s", path)
                try:
                    tree = load_php_file(path)
                    if not isinstance(tree, dict):
                        raise MalformedTreeError("not a translation array", path)
                    discoveries = lock_vendor_tree(
                        tree,
                        package_dir.name,
                        path.stem,
                        locale_dir.name,
                        path=path.as_posix(),
                    )
                except MalformedTreeError as exc:
                    _logger.warning("Skipping vendor file %s: %s", path, exc.reason)
                    skipped.append(SkippedFile(path.as_posix(), exc.reason))
                    continue
                except OSError as exc:
                    _logger.warning("Skipping vendor file %s: %s", path, _os_reason(exc))
                    skipped.append(SkippedFile(path.as_posix(), _os_reason(exc)))
                    continue
                found.extend(discoveries)
    return found


# ── export pipeline ─────────────────────────────────────────────────


def write_json_registry(registry: LockedKeyRegistry, path: Path) -> Path:
    """Write *registry* as a standalone pretty-printed JSON file."""
    value = registry.to_value()
    try:
        validate_instance(value, "locked_keys.schema.json")
    except jsonschema.ValidationError as exc:
        raise InvalidRegistryError(path, exc.message) from exc
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(stable_json_dumps(value, indent=4), encoding="utf-8")
    return path


def write_config_registry(registry: LockedKeyRegistry, config_path: Path) -> PatchOutcome:
    """Patch ``locked_keys`` into the PHP config.  The file is only written on success."""
    if not config_path.is_file():
        raise ConfigNotFoundError(config_path)
    text = config_path.read_text(encoding="utf-8")
    try:
        result = patch_locked_keys(text, export_php_array(registry.to_value(), indent=1))
    except MalformedTreeError as exc:
        raise exc.with_path(config_path) from exc
    if result.applied:
        config_path.write_text(result.text, encoding="utf-8")
    else:
        _logger.warning("No insertion point for locked_keys in %s", config_path)
    return result.outcome


def run_export(
    config: TranslatorConfig,
    *,
    fmt: OutputFormat = OutputFormat.PHP,
    dry_run: bool = False,
    lock_vendor: bool = False,
) -> ExportReport:
    """Scan, merge into the configured registry and persist the result."""
    report = ExportReport(
        status=ExportStatus.NO_DISCOVERIES,
        source_dir=config.source_dir,
        lock_vendor=lock_vendor,
        existing_count=len(config.locked_keys),
    )
    discoveries = collect_discoveries(
        config.source_dir, lock_vendor=lock_vendor, skipped=report.skipped
    )
    if not discoveries:
        return report

    vendor_keys = {d.key for d in discoveries if d.is_vendor}
    marker_keys = {d.key for d in discoveries if not d.is_vendor}
    report.vendor_key_count = len(vendor_keys)
    report.marker_key_count = len(marker_keys)

    report.merge = merge_registry(config.locked_keys, discoveries)
    if not report.merge.has_changes:
        report.status = ExportStatus.UP_TO_DATE
        return report
    if dry_run:
        report.status = ExportStatus.DRY_RUN
        return report

    if fmt is OutputFormat.JSON:
        report.output_path = write_json_registry(report.merge.registry, config.json_output_path)
        report.status = ExportStatus.WRITTEN
        return report

    report.patch_outcome = write_config_registry(report.merge.registry, config.config_path)
    if report.patch_outcome is PatchOutcome.ANCHOR_NOT_FOUND:
        report.status = ExportStatus.ANCHOR_NOT_FOUND
    else:
        report.output_path = config.config_path
        report.status = ExportStatus.WRITTEN
    return report


# ── generate-source pipeline ────────────────────────────────────────


def generate_source_file(reference: Path, target: Path, *, dry_run: bool = False) -> GeneratedFile:
    """Synthesize *target* from *reference*.  Failures are returned, not raised."""
    try:
        tree = load_php_file(reference)
        if not isinstance(tree, dict):
            raise MalformedTreeError("Invalid translation file format", reference)
        source_tree = synthesize_source_tree(tree)
    except MalformedTreeError as exc:
        _logger.warning("Cannot generate %s from %s: %s", target, reference, exc.reason)
        return GeneratedFile(reference.name, target, FileStatus.FAILED, error=exc.reason)
    except OSError as exc:
        _logger.warning("Cannot read %s: %s", reference, _os_reason(exc))
        return GeneratedFile(reference.name, target, FileStatus.FAILED, error=_os_reason(exc))

    if dry_run:
        return GeneratedFile(reference.name, target, FileStatus.PLANNED, len(source_tree))

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_php_file(source_tree, SOURCE_FILE_HEADER), encoding="utf-8")
    except OSError as exc:
        _logger.warning("Cannot write %s: %s", target, exc)
        return GeneratedFile(reference.name, target, FileStatus.FAILED, error=f"{target}: {_os_reason(exc)}")
    return GeneratedFile(reference.name, target, FileStatus.GENERATED, len(source_tree))


def _pick_reference_locale(package_dir: Path, source_locale: str) -> Path | None:
    for locale_dir in iter_package_locales(package_dir):
        if locale_dir.name != source_locale:
            return locale_dir
    return None


def run_generate(
    config: TranslatorConfig,
    *,
    source_locale: str = "en",
    packages: list[str] | None = None,
    dry_run: bool = False,
    force: bool = False,
) -> GenerateReport:
    """Create ``{package}/{source_locale}`` files for vendor packages that lack them."""
    vendor_dir = require_dir(config.vendor_dir, "Vendor directory")
    report = GenerateReport(source_locale=source_locale, vendor_dir=vendor_dir, dry_run=dry_run)

    for package_dir in iter_vendor_packages(vendor_dir, packages):
        package = package_dir.name
        source_dir = package_dir / source_locale

        if source_dir.is_dir() and not force:
            report.packages.append(PackageReport(package, PackageStatus.SOURCE_EXISTS))
            continue

        reference_dir = _pick_reference_locale(package_dir, source_locale)
        if reference_dir is None:
            _logger.warning("%s: no locale directories found", package_dir)
            report.packages.append(PackageReport(package, PackageStatus.NO_LOCALES))
            continue

        pkg_report = PackageReport(package, PackageStatus.PROCESSED, reference_dir.name)
        report.packages.append(pkg_report)

        files = iter_translation_files(reference_dir)
        if not files:
            _logger.warning("%s: no PHP files found", reference_dir)
            pkg_report.status = PackageStatus.NO_FILES
            continue

        for reference in files:
            pkg_report.files.append(
                generate_source_file(reference, source_dir / reference.name, dry_run=dry_run)
            )

    return report
