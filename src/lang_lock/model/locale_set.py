"""LocaleSet — the ordered set of locales a key is locked for."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from . import LocaleShape


@dataclass(frozen=True, slots=True)
class LocaleSet:
    """Non-empty, duplicate-free, ordered set of locale tags.

    A set with one member has the ``SINGLE`` shape and persists as a scalar
    string; two or more members have the ``MANY`` shape and persist as a
    list.  The shape is derived from the member count, so every operation
    that returns a new set is already normalized.
    """

    locales: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.locales:
            raise ValueError("a locale set needs at least one locale")
        if len(set(self.locales)) != len(self.locales):
            raise ValueError(f"duplicate locale in {self.locales!r}")

    @classmethod
    def single(cls, locale: str) -> "LocaleSet":
        return cls((locale,))

    @classmethod
    def from_value(cls, value: str | Sequence[str]) -> "LocaleSet":
        """Build from a persisted value (scalar string or list of strings)."""
        if isinstance(value, str):
            return cls.single(value)
        return cls(tuple(dict.fromkeys(value)))

    @property
    def shape(self) -> LocaleShape:
        return LocaleShape.SINGLE if len(self.locales) == 1 else LocaleShape.MANY

    def with_locale(self, locale: str) -> "LocaleSet":
        """Return this set with *locale* appended (``self`` if already present)."""
        if locale in self.locales:
            return self
        return LocaleSet(self.locales + (locale,))

    def to_value(self) -> str | list[str]:
        if self.shape is LocaleShape.SINGLE:
            return self.locales[0]
        return list(self.locales)

    def __contains__(self, locale: object) -> bool:
        return locale in self.locales

    def __iter__(self) -> Iterator[str]:
        return iter(self.locales)

    def __len__(self) -> int:
        return len(self.locales)

    def __str__(self) -> str:
        return ", ".join(self.locales)
