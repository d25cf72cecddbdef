"""@locked annotation scanner — finds locked keys marked in translation files.

Two markers are recognised::

    'title' => 'Home', // @locked           inline: locks {file}.title
    'title' => "Ho\\"me" /* @LOCKED */,      inline, block comment
    // @locked nav.home                     pointer: locks nav.home verbatim
    // @locked title                        pointer: locks {file}.title

The file is tokenized (strings with escapes, comments) and markers are
matched against the token stream, so quotes or ``//`` inside string values
cannot produce false matches.  An inline entry may span lines; the marker
must sit on the line where its value ends.  ``#`` comments are not markers.
"""

from __future__ import annotations

import re
from pathlib import Path

from lang_lock.errors import MalformedTreeError, PhpSyntaxError
from lang_lock.model import DiscoveryOrigin
from lang_lock.model.discovery import Discovery, dedupe_discoveries
from lang_lock.php.tokenizer import Token, TokenKind, tokenize

_MARKER = "@locked"
_POINTER_RE = re.compile(r"\s*@locked\s+([A-Za-z0-9_.]+)", re.IGNORECASE)


def _is_marker(comment: Token) -> bool:
    if not (comment.block_comment or comment.value.startswith("//")):
        return False
    return comment.comment_body.lstrip()[: len(_MARKER)].lower() == _MARKER


def _end_line(text: str, tok: Token) -> int:
    return tok.line + text.count("\n", tok.start, tok.end)


def _inline_key(text: str, tokens: list[Token], idx: int) -> str | None:
    """Key of the ``'key' => 'value' [,]`` entry ending on the line of comment *idx*."""
    j = idx - 1
    if j >= 0 and tokens[j].kind is TokenKind.COMMA:
        j -= 1
    if j < 2:
        return None
    key, arrow, value = tokens[j - 2], tokens[j - 1], tokens[j]
    if (
        key.kind is TokenKind.STRING
        and arrow.kind is TokenKind.ARROW
        and value.kind is TokenKind.STRING
        and key.value
        and _end_line(text, value) == tokens[idx].line
    ):
        return key.value
    return None


def _starts_line(text: str, tokens: list[Token], idx: int) -> bool:
    return idx == 0 or _end_line(text, tokens[idx - 1]) < tokens[idx].line


def scan_annotations(
    text: str,
    locale: str,
    filename: str,
    *,
    path: str = "",
) -> list[Discovery]:
    """Return the keys marked ``@locked`` in *text*, de-duplicated, in file order.

    Raises ``PhpSyntaxError`` if *text* cannot be tokenized.
    """
    found: list[Discovery] = []
    tokens = list(tokenize(text, keep_comments=True))

    for idx, tok in enumerate(tokens):
        if tok.kind is not TokenKind.COMMENT:
            continue

        if _is_marker(tok):
            key = _inline_key(text, tokens, idx)
            if key is not None:
                found.append(
                    Discovery(f"{filename}.{key}", locale, DiscoveryOrigin.INLINE_MARKER, path)
                )
                continue

        if tok.value.startswith("//") and _starts_line(text, tokens, idx):
            m = _POINTER_RE.match(tok.comment_body)
            if m:
                target = m.group(1)
                key = target if "." in target else f"{filename}.{target}"
                found.append(Discovery(key, locale, DiscoveryOrigin.POINTER_MARKER, path))

    return dedupe_discoveries(found)


def scan_translation_file(path: Path, locale: str) -> list[Discovery]:
    """Scan one translation file; errors are attributed to *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedTreeError(f"not valid UTF-8 ({exc.reason})", path) from exc
    try:
        return scan_annotations(text, locale, path.stem, path=path.as_posix())
    except PhpSyntaxError as exc:
        raise exc.with_path(path) from exc
