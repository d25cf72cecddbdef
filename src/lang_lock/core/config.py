"""Translator configuration — read from ``config/ai-translator.php``.

Only two keys matter here: ``source_directory`` (relative to the project
base path, default ``lang``) and ``locked_keys`` (the persisted registry).
``LANG_LOCK_SOURCE_DIRECTORY`` overrides the configured source directory.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import jsonschema

from lang_lock.contracts.load import validate_instance
from lang_lock.errors import InvalidRegistryError, MalformedTreeError
from lang_lock.model.registry import LockedKeyRegistry
from lang_lock.php.loader import load_php_file

_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "ai-translator.php"
DEFAULT_SOURCE_DIRECTORY = "lang"
JSON_OUTPUT_NAME = "locked-translations.json"
SOURCE_DIRECTORY_ENV = "LANG_LOCK_SOURCE_DIRECTORY"


@dataclass(frozen=True)
class TranslatorConfig:
    """Immutable project configuration."""

    base_path: Path
    config_path: Path
    source_directory: str = DEFAULT_SOURCE_DIRECTORY
    locked_keys: LockedKeyRegistry = field(default_factory=LockedKeyRegistry)

    @property
    def source_dir(self) -> Path:
        return self.base_path / self.source_directory

    @property
    def vendor_dir(self) -> Path:
        return self.source_dir / "vendor"

    @property
    def json_output_path(self) -> Path:
        return self.base_path / JSON_OUTPUT_NAME


def load_config(base_path: Path, config_path: Path | None = None) -> TranslatorConfig:
    """Read the translator config under *base_path*.

    A missing config file yields the defaults.  A config file that cannot be
    parsed raises ``MalformedTreeError``; a ``locked_keys`` value of the
    wrong shape raises ``InvalidRegistryError``.
    """
    base_path = Path(base_path)
    if config_path is None:
        config_path = base_path / DEFAULT_CONFIG_PATH
    elif not config_path.is_absolute():
        config_path = base_path / config_path

    raw: dict = {}
    if config_path.is_file():
        data = load_php_file(config_path, strict=False)
        if not isinstance(data, dict):
            raise MalformedTreeError("config file does not return an array", config_path)
        raw = data
    else:
        _logger.debug("No config file at %s, using defaults", config_path)

    source_directory = os.environ.get(SOURCE_DIRECTORY_ENV) or raw.get("source_directory")
    if not isinstance(source_directory, str) or not source_directory:
        source_directory = DEFAULT_SOURCE_DIRECTORY

    locked_raw = raw.get("locked_keys") or {}
    try:
        validate_instance(locked_raw, "locked_keys.schema.json")
    except jsonschema.ValidationError as exc:
        raise InvalidRegistryError(config_path, exc.message) from exc

    return TranslatorConfig(
        base_path=base_path,
        config_path=config_path,
        source_directory=source_directory,
        locked_keys=LockedKeyRegistry.from_value(locked_raw),
    )
