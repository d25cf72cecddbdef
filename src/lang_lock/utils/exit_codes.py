"""Centralized exit-code contract for all CLI commands.

Code  Meaning
----  -------
  0   Success — nothing to do, dry run, or artifacts written
  1   Violation — the registry could not be placed (config anchor not found)
  2   Error — usage error, missing directory or config, write failure
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
