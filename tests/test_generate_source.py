"""Integration tests for the generate-source pipeline (via lang_lock.api)."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from lang_lock.api import generate_source
from lang_lock.core.config import SOURCE_DIRECTORY_ENV
from lang_lock.core.runner import SOURCE_FILE_HEADER, generate_source_file
from lang_lock.errors import MissingDirectoryError
from lang_lock.model.report import FileStatus, PackageStatus
from lang_lock.php.loader import load_php_file

DE_UI = textwrap.dedent("""\
    <?php

    return [
        'Save' => 'Speichern',
        'Errors' => [
            'This field is required' => 'Dieses Feld ist erforderlich',
        ],
    ];
""")

DE_MAIL = "<?php return ['Send' => 'Senden'];\n"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(SOURCE_DIRECTORY_ENV, raising=False)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    vendor = tmp_path / "lang" / "vendor"
    _write(vendor / "mailcoach" / "de" / "ui.php", DE_UI)
    _write(vendor / "mailcoach" / "de" / "mail.php", DE_MAIL)
    _write(vendor / "mailcoach" / "fr" / "ui.php", "<?php return ['Save' => 'Enregistrer'];\n")
    _write(vendor / "filament" / "en" / "actions.php", "<?php return ['Edit' => 'Edit'];\n")
    _write(vendor / "filament" / "ko" / "actions.php", "<?php return ['Edit' => '편집'];\n")
    return tmp_path


def _pkg(report, name: str):
    return next(p for p in report.packages if p.package == name)


class TestGenerateSource:
    def test_creates_missing_source_locale(self, project: Path):
        report, d = generate_source(project)
        target = project / "lang" / "vendor" / "mailcoach" / "en" / "ui.php"

        mailcoach = _pkg(report, "mailcoach")
        assert mailcoach.status is PackageStatus.PROCESSED
        assert mailcoach.reference_locale == "de"
        assert [(f.name, f.status, f.key_count) for f in mailcoach.files] == [
            ("mail.php", FileStatus.GENERATED, 1),
            ("ui.php", FileStatus.GENERATED, 2),
        ]
        assert load_php_file(target) == {
            "Save": "Save",
            "Errors": {"This field is required": "This field is required"},
        }
        text = target.read_text(encoding="utf-8")
        assert text.startswith("<?php\n\n/**\n")
        for line in SOURCE_FILE_HEADER:
            assert line in text

        assert _pkg(report, "filament").status is PackageStatus.SOURCE_EXISTS
        assert d["generated"] == 2
        assert d["failed"] == 0

    def test_existing_source_left_alone(self, project: Path):
        existing = project / "lang" / "vendor" / "filament" / "en" / "actions.php"
        before = existing.read_text(encoding="utf-8")
        generate_source(project)
        assert existing.read_text(encoding="utf-8") == before

    def test_force_regenerates_from_other_locale(self, project: Path):
        report, _ = generate_source(project, force=True)
        filament = _pkg(report, "filament")
        assert filament.status is PackageStatus.PROCESSED
        assert filament.reference_locale == "ko"
        target = project / "lang" / "vendor" / "filament" / "en" / "actions.php"
        assert load_php_file(target) == {"Edit": "Edit"}

    def test_force_without_other_locale(self, project: Path):
        _write(project / "lang" / "vendor" / "solo" / "en" / "x.php", "<?php return ['A' => 'A'];\n")
        report, _ = generate_source(project, packages=["solo"], force=True)
        assert _pkg(report, "solo").status is PackageStatus.NO_LOCALES

    def test_package_filter(self, project: Path):
        report, _ = generate_source(project, packages=["filament"])
        assert [p.package for p in report.packages] == ["filament"]
        assert not (project / "lang" / "vendor" / "mailcoach" / "en").exists()

    def test_custom_source_locale(self, project: Path):
        report, _ = generate_source(project, source_locale="fr")
        assert _pkg(report, "mailcoach").status is PackageStatus.SOURCE_EXISTS
        filament = _pkg(report, "filament")
        assert filament.reference_locale == "en"
        assert (project / "lang" / "vendor" / "filament" / "fr" / "actions.php").is_file()

    def test_dry_run_writes_nothing(self, project: Path):
        report, d = generate_source(project, dry_run=True)
        assert not (project / "lang" / "vendor" / "mailcoach" / "en").exists()
        assert {f.status for f in _pkg(report, "mailcoach").files} == {FileStatus.PLANNED}
        assert d["dry_run"] is True
        assert d["generated"] == 2

    def test_malformed_file_does_not_abort_package(self, project: Path):
        _write(
            project / "lang" / "vendor" / "mailcoach" / "de" / "days.php",
            "<?php return ['Days' => ['Mo', 'Di']];\n",
        )
        report, d = generate_source(project)
        files = {f.name: f for f in _pkg(report, "mailcoach").files}
        assert files["days.php"].status is FileStatus.FAILED
        assert "holds a list" in files["days.php"].error
        assert files["ui.php"].status is FileStatus.GENERATED
        assert not (project / "lang" / "vendor" / "mailcoach" / "en" / "days.php").exists()
        assert d["failed"] == 1
        assert d["generated"] == 2

    def test_non_utf8_reference_does_not_abort_package(self, project: Path):
        (project / "lang" / "vendor" / "mailcoach" / "de" / "bad.php").write_bytes(b"\xff\xfe")
        report, d = generate_source(project, packages=["mailcoach"])
        files = {f.name: f for f in _pkg(report, "mailcoach").files}
        assert files["bad.php"].status is FileStatus.FAILED
        assert "UTF-8" in files["bad.php"].error
        assert files["ui.php"].status is FileStatus.GENERATED
        assert d["failed"] == 1
        assert d["generated"] == 2

    def test_empty_reference_locale(self, project: Path):
        (project / "lang" / "vendor" / "empty" / "de").mkdir(parents=True)
        report, _ = generate_source(project, packages=["empty"])
        pkg = _pkg(report, "empty")
        assert pkg.status is PackageStatus.NO_FILES
        assert pkg.reference_locale == "de"

    def test_missing_vendor_directory(self, tmp_path: Path):
        (tmp_path / "lang").mkdir()
        with pytest.raises(MissingDirectoryError, match="Vendor directory not found"):
            generate_source(tmp_path)


class TestGenerateSourceFile:
    def test_non_array_reference(self, tmp_path: Path):
        ref = _write(tmp_path / "de" / "x.php", "<?php return 'nope';\n")
        result = generate_source_file(ref, tmp_path / "en" / "x.php")
        assert result.status is FileStatus.FAILED
        assert result.error == "Invalid translation file format"
        assert not (tmp_path / "en").exists()

    def test_unwritable_target(self, tmp_path: Path):
        ref = _write(tmp_path / "de" / "x.php", "<?php return ['A' => 'B'];\n")
        _write(tmp_path / "en", "a file where a directory should be")
        result = generate_source_file(ref, tmp_path / "en" / "x.php")
        assert result.status is FileStatus.FAILED
        assert result.error

    def test_unreadable_reference(self, tmp_path: Path):
        ref = tmp_path / "de" / "x.php"
        ref.mkdir(parents=True)
        result = generate_source_file(ref, tmp_path / "en" / "x.php")
        assert result.status is FileStatus.FAILED
        assert result.error
        assert not (tmp_path / "en").exists()
