"""Integration tests for the export-locked pipeline (via lang_lock.api)."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from lang_lock.api import export_locked
from lang_lock.contracts.load import validate_instance
from lang_lock.core.config import SOURCE_DIRECTORY_ENV, load_config
from lang_lock.core.config_patch import PatchOutcome
from lang_lock.errors import ConfigNotFoundError, MissingDirectoryError
from lang_lock.model.report import ExportStatus

CONFIG = textwrap.dedent("""\
    <?php

    return [
        'source_directory' => 'lang',

        // 'skip_locales' => [],
        // 'skip_files' => [],
    ];
""")

EN_NAV = textwrap.dedent("""\
    <?php

    return [
        'home' => 'Home', // @locked
        'about' => 'About',
    ];
""")

FR_NAV = textwrap.dedent("""\
    <?php

    // @locked nav.home
    return [
        'home' => 'Accueil',
        'about' => 'À propos',
    ];
""")

DE_VENDOR = textwrap.dedent("""\
    <?php

    return [
        'save' => 'Speichern',
        'errors' => [
            'required' => 'Pflicht',
        ],
    ];
""")


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(SOURCE_DIRECTORY_ENV, raising=False)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    _write(tmp_path / "config" / "ai-translator.php", CONFIG)
    _write(tmp_path / "lang" / "en" / "nav.php", EN_NAV)
    _write(tmp_path / "lang" / "fr" / "nav.php", FR_NAV)
    _write(tmp_path / "lang" / "vendor" / "mailcoach" / "de" / "ui.php", DE_VENDOR)
    return tmp_path


def _config_text(base: Path) -> str:
    return (base / "config" / "ai-translator.php").read_text(encoding="utf-8")


# ════════════════════════════════════════════════════════════════════
# JSON output
# ════════════════════════════════════════════════════════════════════


class TestJsonExport:
    def test_writes_validated_registry(self, project: Path):
        report, d = export_locked(project, fmt="json")
        out = project / "locked-translations.json"

        assert report.status is ExportStatus.WRITTEN
        assert report.output_path == out
        assert report.patch_outcome is None
        validate_instance(json.loads(out.read_text(encoding="utf-8")), "locked_keys.schema.json")
        assert json.loads(out.read_text(encoding="utf-8")) == {"nav.home": ["en", "fr"]}
        assert out.read_text(encoding="utf-8").startswith('{\n    "nav.home"')
        assert _config_text(project) == CONFIG

        assert d["status"] == "written"
        assert d["counts"] == {"existing": 0, "markers": 1, "vendor": 0, "new": 1, "total": 1}
        assert [e["locale"] for e in d["new_keys"]] == ["en", "fr"]

    def test_includes_existing_registry(self, project: Path):
        _write(
            project / "config" / "ai-translator.php",
            "<?php return ['locked_keys' => ['auth.failed' => 'ko']];",
        )
        export_locked(project, fmt="json")
        data = json.loads((project / "locked-translations.json").read_text(encoding="utf-8"))
        assert data == {"auth.failed": "ko", "nav.home": ["en", "fr"]}


# ════════════════════════════════════════════════════════════════════
# PHP config output
# ════════════════════════════════════════════════════════════════════


class TestPhpExport:
    def test_patches_config(self, project: Path):
        report, d = export_locked(project)
        assert report.status is ExportStatus.WRITTEN
        assert report.patch_outcome is PatchOutcome.INSERTED
        assert d["patch_outcome"] == "inserted"

        text = _config_text(project)
        assert "    'locked_keys' => [\n        'nav.home' => ['en', 'fr'],\n    ]," in text
        assert load_config(project).locked_keys.to_value() == {"nav.home": ["en", "fr"]}

    def test_second_run_is_up_to_date(self, project: Path):
        export_locked(project)
        before = _config_text(project)
        report, d = export_locked(project)
        assert report.status is ExportStatus.UP_TO_DATE
        assert report.delta == []
        assert d["counts"]["existing"] == 1
        assert _config_text(project) == before

    def test_new_locale_replaces_existing_entry(self, project: Path):
        export_locked(project)
        _write(
            project / "lang" / "ko" / "nav.php",
            "<?php return [\n    'home' => '홈', // @locked\n];\n",
        )
        report, _ = export_locked(project)
        assert report.patch_outcome is PatchOutcome.REPLACED
        text = _config_text(project)
        assert text.count("'locked_keys' =>") == 1
        assert load_config(project).locked_keys.to_value() == {"nav.home": ["en", "fr", "ko"]}

    def test_dry_run_writes_nothing(self, project: Path):
        report, d = export_locked(project, dry_run=True)
        assert report.status is ExportStatus.DRY_RUN
        assert d["counts"]["new"] == 1
        assert _config_text(project) == CONFIG
        assert not (project / "locked-translations.json").exists()

    def test_anchor_not_found(self, project: Path):
        bare = "<?php\n\nreturn [\n    'source_directory' => 'lang',\n];\n"
        _write(project / "config" / "ai-translator.php", bare)
        report, d = export_locked(project)
        assert report.status is ExportStatus.ANCHOR_NOT_FOUND
        assert report.output_path is None
        assert d["status"] == "anchor_not_found"
        assert _config_text(project) == bare

    def test_missing_config_file(self, project: Path):
        (project / "config" / "ai-translator.php").unlink()
        with pytest.raises(ConfigNotFoundError):
            export_locked(project)

    def test_custom_config_path(self, project: Path):
        _write(project / "etc" / "translator.php", CONFIG)
        report, _ = export_locked(project, config_path="etc/translator.php")
        assert report.output_path == project / "etc" / "translator.php"
        assert _config_text(project) == CONFIG


# ════════════════════════════════════════════════════════════════════
# Vendor locking and edge cases
# ════════════════════════════════════════════════════════════════════


class TestVendorAndEdges:
    def test_lock_vendor(self, project: Path):
        report, d = export_locked(project, fmt="json", lock_vendor=True)
        data = json.loads((project / "locked-translations.json").read_text(encoding="utf-8"))
        assert data == {
            "nav.home": ["en", "fr"],
            "vendor/mailcoach/ui.save": "de",
            "vendor/mailcoach/ui.errors.required": "de",
        }
        assert d["counts"]["vendor"] == 2
        assert d["counts"]["markers"] == 1

    def test_vendor_ignored_without_flag(self, project: Path):
        (project / "lang" / "en" / "nav.php").write_text(
            "<?php return ['home' => 'Home'];", encoding="utf-8"
        )
        (project / "lang" / "fr" / "nav.php").unlink()
        report, _ = export_locked(project, fmt="json")
        assert report.status is ExportStatus.NO_DISCOVERIES
        assert not (project / "locked-translations.json").exists()

    def test_malformed_files_are_skipped(self, project: Path):
        _write(project / "lang" / "en" / "broken.php", "<?php return ['a' => 'oops];\n")
        _write(project / "lang" / "vendor" / "mailcoach" / "de" / "bad.php", "<?php return 'text';\n")
        report, d = export_locked(project, fmt="json", lock_vendor=True)
        assert report.status is ExportStatus.WRITTEN
        skipped = sorted(Path(s["path"]).name for s in d["skipped"])
        assert skipped == ["bad.php", "broken.php"]
        assert "vendor/mailcoach/ui.save" in report.merge.registry

    def test_backup_directories_not_scanned(self, project: Path):
        _write(
            project / "lang" / "backup" / "nav.php",
            "<?php return ['old' => 'Old', // @locked\n];\n",
        )
        _, d = export_locked(project, fmt="json")
        assert [e["key"] for e in d["new_keys"]] == ["nav.home", "nav.home"]

    def test_missing_source_directory(self, tmp_path: Path):
        with pytest.raises(MissingDirectoryError, match="Source directory not found"):
            export_locked(tmp_path)

    def test_source_directory_from_env(self, project: Path, monkeypatch: pytest.MonkeyPatch):
        (project / "lang").rename(project / "translations")
        monkeypatch.setenv(SOURCE_DIRECTORY_ENV, "translations")
        report, _ = export_locked(project, fmt="json")
        assert report.source_dir == project / "translations"
        assert report.status is ExportStatus.WRITTEN

    def test_non_utf8_file_is_skipped(self, project: Path):
        (project / "lang" / "en" / "b.php").write_bytes(b"<?php return ['a' => '\xff\xfe'];\n")
        (project / "lang" / "vendor" / "mailcoach" / "de" / "c.php").write_bytes(b"\xff\xfe")
        report, d = export_locked(project, fmt="json", dry_run=True, lock_vendor=True)
        assert report.status is ExportStatus.DRY_RUN
        skipped = {Path(s["path"]).name: s["reason"] for s in d["skipped"]}
        assert set(skipped) == {"b.php", "c.php"}
        assert "UTF-8" in skipped["b.php"]
        assert "nav.home" in report.merge.registry

    def test_unreadable_file_is_skipped(self, project: Path, monkeypatch: pytest.MonkeyPatch):
        blocked = project / "lang" / "en" / "nav.php"
        real_read_text = Path.read_text

        def read_text(self, *args, **kwargs):
            if self == blocked:
                raise PermissionError(13, "Permission denied", str(self))
            return real_read_text(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", read_text)
        report, d = export_locked(project, fmt="json", dry_run=True)
        assert [s["reason"] for s in d["skipped"]] == ["Permission denied"]
        assert report.merge.registry.to_value() == {"nav.home": "fr"}
