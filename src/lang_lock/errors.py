"""Exception hierarchy shared by the scanners, loaders and pipelines.

Fatal errors (``MissingDirectoryError``, ``ConfigNotFoundError``,
``InvalidRegistryError``) abort a run.  ``MalformedTreeError`` is local to a
single file: pipelines record it and continue with the rest of the batch.
"""

from __future__ import annotations

from pathlib import Path


class LangLockError(Exception):
    """Base class for every error raised by lang_lock."""


class MissingDirectoryError(LangLockError, FileNotFoundError):
    """A required source or vendor root does not exist."""

    def __init__(self, path: Path, what: str = "Source directory") -> None:
        self.path = path
        super().__init__(f"{what} not found: {path}")


class ConfigNotFoundError(LangLockError, FileNotFoundError):
    """The configuration file to patch does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Config file not found: {path}")


class InvalidRegistryError(LangLockError, ValueError):
    """The persisted ``locked_keys`` registry has an unexpected shape."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f"{path}: " if path is not None else ""
        super().__init__(f"{where}invalid locked_keys registry ({reason})")


class MalformedTreeError(LangLockError, ValueError):
    """A translation file does not evaluate to a nested key/value mapping."""

    def __init__(self, reason: str, path: Path | str | None = None) -> None:
        self.path = path
        self.reason = reason
        where = f"{path}: " if path is not None else ""
        super().__init__(f"{where}{reason}")

    def with_path(self, path: Path | str) -> "MalformedTreeError":
        """Return a copy of this error attributed to *path*."""
        return type(self)(self.reason, path)


class PhpSyntaxError(MalformedTreeError):
    """The PHP source could not be tokenized or parsed."""

    def __init__(
        self,
        reason: str,
        path: Path | str | None = None,
        *,
        line: int | None = None,
    ) -> None:
        self.line = line
        located = f"{reason} (line {line})" if line is not None else reason
        super().__init__(located, path)
        self.reason = reason

    def with_path(self, path: Path | str) -> "PhpSyntaxError":
        return PhpSyntaxError(self.reason, path, line=self.line)
