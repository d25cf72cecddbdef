"""Locked-key registry — maps dotted keys to the locales they are locked for.

Supports:

*  **Loading** — build from the persisted ``locked_keys`` value, whose
   entries are a locale string or a list of locale strings.
*  **Merging** — fold freshly scanned discoveries into a prior registry,
   keeping every existing association and reporting only what was added.
*  **Serialising** — back to the scalar-or-list shape for PHP and JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from . import DeltaKind
from .discovery import Discovery
from .locale_set import LocaleSet


@dataclass(frozen=True, slots=True)
class DeltaEntry:
    """One addition made by a merge."""

    key: str
    locale: str
    kind: DeltaKind

    def to_dict(self) -> dict:
        return {"key": self.key, "locale": self.locale, "kind": self.kind.value}


class LockedKeyRegistry:
    """Insertion-ordered mapping of dotted key → :class:`LocaleSet`."""

    def __init__(self, entries: Mapping[str, LocaleSet] | None = None) -> None:
        self._entries: dict[str, LocaleSet] = dict(entries or {})

    @classmethod
    def from_value(cls, raw: Mapping[str, Any] | None) -> "LockedKeyRegistry":
        """Build from a persisted mapping.

        The caller is expected to have validated *raw* (see
        ``contracts/load.py``); a ``ValueError`` here means it was not.
        """
        entries: dict[str, LocaleSet] = {}
        for key, value in (raw or {}).items():
            entries[str(key)] = LocaleSet.from_value(value)
        return cls(entries)

    # ── mapping protocol ────────────────────────────────────────────

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __getitem__(self, key: str) -> LocaleSet:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LockedKeyRegistry):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    def __repr__(self) -> str:
        return f"LockedKeyRegistry({self.to_value()!r})"

    def get(self, key: str) -> LocaleSet | None:
        return self._entries.get(key)

    def items(self) -> Iterable[tuple[str, LocaleSet]]:
        return self._entries.items()

    def copy(self) -> "LockedKeyRegistry":
        return LockedKeyRegistry(self._entries)

    # ── mutation ────────────────────────────────────────────────────

    def add(self, key: str, locale: str) -> DeltaKind | None:
        """Lock *key* for *locale*.  Returns what changed, or ``None``."""
        current = self._entries.get(key)
        if current is None:
            self._entries[key] = LocaleSet.single(locale)
            return DeltaKind.NEW_KEY
        if locale in current:
            return None
        self._entries[key] = current.with_locale(locale)
        return DeltaKind.ADDED_LOCALE

    # ── serialisation ───────────────────────────────────────────────

    def to_value(self) -> dict[str, str | list[str]]:
        return {key: locales.to_value() for key, locales in self._entries.items()}


@dataclass(slots=True)
class MergeResult:
    """Merged registry plus the additions that produced it."""

    registry: LockedKeyRegistry
    delta: list[DeltaEntry] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return len(self.delta) > 0

    def delta_by_key(self) -> dict[str, list[str]]:
        """Group the delta as key → added locales, in first-seen order."""
        grouped: dict[str, list[str]] = {}
        for entry in self.delta:
            grouped.setdefault(entry.key, []).append(entry.locale)
        return grouped

    def summary(self) -> str:
        return f"New keys: {len(self.delta_by_key())}, Total after merge: {len(self.registry)}"


def merge_registry(
    prior: LockedKeyRegistry,
    discoveries: Iterable[Discovery],
) -> MergeResult:
    """Fold *discoveries* into a copy of *prior*.

    Existing locales are never removed or reordered; a new locale for an
    existing key is appended last.  Merging the same discoveries into the
    result again yields an empty delta.
    """
    merged = prior.copy()
    delta: list[DeltaEntry] = []
    for d in discoveries:
        kind = merged.add(d.key, d.locale)
        if kind is not None:
            delta.append(DeltaEntry(key=d.key, locale=d.locale, kind=kind))
    return MergeResult(registry=merged, delta=delta)
