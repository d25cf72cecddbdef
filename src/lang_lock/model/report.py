"""Run reports returned by the export and generate pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from lang_lock.core.config_patch import PatchOutcome
from .registry import DeltaEntry, MergeResult


class ExportStatus(str, Enum):
    NO_DISCOVERIES = "no_discoveries"
    UP_TO_DATE = "up_to_date"
    DRY_RUN = "dry_run"
    WRITTEN = "written"
    ANCHOR_NOT_FOUND = "anchor_not_found"


class PackageStatus(str, Enum):
    PROCESSED = "processed"
    SOURCE_EXISTS = "source_exists"
    NO_LOCALES = "no_locales"
    NO_FILES = "no_files"


class FileStatus(str, Enum):
    GENERATED = "generated"
    PLANNED = "planned"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SkippedFile:
    """A file left out of a batch, with the reason."""

    path: str
    reason: str

    def to_dict(self) -> dict:
        return {"path": self.path, "reason": self.reason}


@dataclass(slots=True)
class ExportReport:
    status: ExportStatus
    source_dir: Path
    lock_vendor: bool = False
    existing_count: int = 0
    marker_key_count: int = 0
    vendor_key_count: int = 0
    merge: MergeResult | None = None
    output_path: Path | None = None
    patch_outcome: PatchOutcome | None = None
    skipped: list[SkippedFile] = field(default_factory=list)

    @property
    def delta(self) -> list[DeltaEntry]:
        return self.merge.delta if self.merge is not None else []

    @property
    def total_count(self) -> int:
        return len(self.merge.registry) if self.merge is not None else self.existing_count

    def to_dict(self) -> dict:
        d: dict = {
            "status": self.status.value,
            "source_dir": self.source_dir.as_posix(),
            "lock_vendor": self.lock_vendor,
            "counts": {
                "existing": self.existing_count,
                "markers": self.marker_key_count,
                "vendor": self.vendor_key_count,
                "new": len(self.merge.delta_by_key()) if self.merge is not None else 0,
                "total": self.total_count,
            },
            "new_keys": [entry.to_dict() for entry in self.delta],
            "skipped": [s.to_dict() for s in self.skipped],
        }
        if self.output_path is not None:
            d["output_path"] = self.output_path.as_posix()
        if self.patch_outcome is not None:
            d["patch_outcome"] = self.patch_outcome.value
        return d


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    name: str
    target: Path
    status: FileStatus
    key_count: int = 0
    error: str = ""

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "target": self.target.as_posix(),
            "status": self.status.value,
            "key_count": self.key_count,
        }
        if self.error:
            d["error"] = self.error
        return d


@dataclass(slots=True)
class PackageReport:
    package: str
    status: PackageStatus
    reference_locale: str = ""
    files: list[GeneratedFile] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "status": self.status.value,
            "reference_locale": self.reference_locale,
            "files": [f.to_dict() for f in self.files],
        }


@dataclass(slots=True)
class GenerateReport:
    source_locale: str
    vendor_dir: Path
    dry_run: bool = False
    packages: list[PackageReport] = field(default_factory=list)

    @property
    def generated_count(self) -> int:
        ok = {FileStatus.GENERATED, FileStatus.PLANNED}
        return sum(1 for p in self.packages for f in p.files if f.status in ok)

    @property
    def failed_count(self) -> int:
        return sum(1 for p in self.packages for f in p.files if f.status is FileStatus.FAILED)

    def to_dict(self) -> dict:
        return {
            "source_locale": self.source_locale,
            "vendor_dir": self.vendor_dir.as_posix(),
            "dry_run": self.dry_run,
            "generated": self.generated_count,
            "failed": self.failed_count,
            "packages": [p.to_dict() for p in self.packages],
        }
