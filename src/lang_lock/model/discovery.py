"""Discovery — one scan-time (dotted key, locale) finding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from . import DiscoveryOrigin


@dataclass(frozen=True, slots=True)
class Discovery:
    key: str
    locale: str
    origin: DiscoveryOrigin
    path: str = ""

    @property
    def is_vendor(self) -> bool:
        return self.key.startswith("vendor/")

    def to_dict(self) -> dict:
        d = {"key": self.key, "locale": self.locale, "origin": self.origin.value}
        if self.path:
            d["path"] = self.path
        return d


def dedupe_discoveries(discoveries: Iterable[Discovery]) -> list[Discovery]:
    """Drop repeated (key, locale) pairs, keeping the first occurrence."""
    seen: set[tuple[str, str]] = set()
    unique: list[Discovery] = []
    for d in discoveries:
        ident = (d.key, d.locale)
        if ident in seen:
            continue
        seen.add(ident)
        unique.append(d)
    return unique
