"""Config-file patch — place the ``locked_keys`` literal in the config source.

An existing ``'locked_keys' => ...`` entry has its value replaced in place
and every other byte of the file is kept.  Otherwise the entry is inserted
after the commented ``// 'skip_files' => [],`` line of the published config,
or after ``// 'skip_locales' => [],`` when that is the only anchor.  Without
either anchor nothing is changed and the outcome says so.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from lang_lock.php.loader import find_value_span
from lang_lock.php.tokenizer import TokenKind, tokenize

LOCKED_KEYS = "locked_keys"

_SKIP_FILES_ANCHOR = re.compile(r"//\s*'skip_files'\s*=>\s*\[\],?")
_SKIP_LOCALES_ANCHOR = re.compile(r"//\s*'skip_locales'\s*=>\s*\[\],?")


class PatchOutcome(str, Enum):
    REPLACED = "replaced"
    INSERTED = "inserted"
    INSERTED_FALLBACK = "inserted_fallback"
    ANCHOR_NOT_FOUND = "anchor_not_found"


@dataclass(frozen=True, slots=True)
class PatchResult:
    text: str
    outcome: PatchOutcome

    @property
    def applied(self) -> bool:
        return self.outcome is not PatchOutcome.ANCHOR_NOT_FOUND


def find_assignment_span(text: str, key: str = LOCKED_KEYS) -> tuple[int, int] | None:
    """Character span of the value assigned to *key*, or ``None``.

    Comments are skipped, so a commented-out example entry is not matched.
    """
    tokens = list(tokenize(text))
    for i, tok in enumerate(tokens[:-2]):
        if (
            tok.kind is TokenKind.STRING
            and tok.value == key
            and tokens[i + 1].kind is TokenKind.ARROW
        ):
            first, last = find_value_span(tokens, i + 2)
            return tokens[first].start, tokens[last].end
    return None


def _insert_after(text: str, anchor: re.Pattern[str], addition: str) -> str | None:
    m = anchor.search(text)
    if m is None:
        return None
    return text[: m.end()] + addition + text[m.end():]


def patch_locked_keys(config_text: str, literal: str) -> PatchResult:
    """Return *config_text* with exactly one ``locked_keys`` entry set to *literal*."""
    span = find_assignment_span(config_text)
    if span is not None:
        start, end = span
        return PatchResult(
            config_text[:start] + literal + config_text[end:],
            PatchOutcome.REPLACED,
        )

    entry = f"'{LOCKED_KEYS}' => {literal},"
    patched = _insert_after(config_text, _SKIP_FILES_ANCHOR, f"\n\n    {entry}")
    if patched is not None:
        return PatchResult(patched, PatchOutcome.INSERTED)

    patched = _insert_after(
        config_text,
        _SKIP_LOCALES_ANCHOR,
        f"\n    // 'skip_files' => [],\n\n    {entry}",
    )
    if patched is not None:
        return PatchResult(patched, PatchOutcome.INSERTED_FALLBACK)

    return PatchResult(config_text, PatchOutcome.ANCHOR_NOT_FOUND)
