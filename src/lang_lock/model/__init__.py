"""Enums shared across the scanners, the registry and the pipelines."""

from __future__ import annotations

from enum import Enum


class LocaleShape(str, Enum):
    """How a locale set is persisted: a scalar string or a list."""

    SINGLE = "single"
    MANY = "many"


class DiscoveryOrigin(str, Enum):
    """Which rule produced a discovery."""

    INLINE_MARKER = "inline_marker"
    POINTER_MARKER = "pointer_marker"
    VENDOR = "vendor"


class DeltaKind(str, Enum):
    """What a merge did for one (key, locale) pair."""

    NEW_KEY = "new_key"
    ADDED_LOCALE = "added_locale"


class OutputFormat(str, Enum):
    """Where the merged registry is persisted."""

    PHP = "php"
    JSON = "json"
