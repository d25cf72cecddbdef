"""Canonical JSON serialization — single dump path for all CLI artifacts.

Guarantees:
  - Key order preserved by default (registries are insertion ordered);
    ``sort_keys=True`` for order-insensitive reports
  - Unicode kept as-is (``ensure_ascii=False``)
  - Trailing newline at EOF
  - ``Path`` objects → POSIX strings
  - Enums → their values, dataclasses → dicts
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Any, Mapping


def _to_builtin(obj: Any) -> Any:
    """Convert common non-JSON types into JSON-safe builtins."""
    if isinstance(obj, Enum):
        return _to_builtin(obj.value)
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Path):
        return obj.as_posix()
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_builtin(asdict(obj))
    if isinstance(obj, Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    # Fall back to string (keeps CLI resilient)
    return str(obj)


def stable_json_dumps(
    obj: Any,
    *,
    sort_keys: bool = False,
    indent: int | None = 2,
) -> str:
    """Serialize *obj* to pretty-printed JSON with a trailing newline."""
    s = json.dumps(
        _to_builtin(obj),
        indent=indent,
        sort_keys=sort_keys,
        ensure_ascii=False,
    )
    return s + "\n"


def stable_json_dump(
    obj: Any,
    fp: IO[str],
    *,
    sort_keys: bool = False,
    indent: int | None = 2,
) -> None:
    fp.write(stable_json_dumps(obj, sort_keys=sort_keys, indent=indent))
