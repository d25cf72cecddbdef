"""Shared utilities for lang_lock."""

from lang_lock.utils.exit_codes import ExitCode
from lang_lock.utils.json_norm import stable_json_dump, stable_json_dumps

__all__ = [
    "ExitCode",
    "stable_json_dump",
    "stable_json_dumps",
]
