"""Tokenizer for the subset of PHP used by translation and config files.

Only what ``return [ ... ];`` files need is recognised: quoted strings,
numbers, identifiers, brackets, ``=>``, ``,``, ``.`` and comments.  Anything
else becomes an ``OTHER`` token so callers can decide how strict to be.

Every token carries its character span and 1-based line number; the config
patcher relies on the spans to rewrite a single value in place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from lang_lock.errors import PhpSyntaxError


class TokenKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    IDENT = "ident"
    VARIABLE = "variable"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    ARROW = "=>"
    COMMA = ","
    SEMI = ";"
    DOT = "."
    MINUS = "-"
    COMMENT = "comment"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    value: str
    start: int
    end: int
    line: int

    @property
    def block_comment(self) -> bool:
        """True for ``/* ... */`` comments."""
        return self.kind is TokenKind.COMMENT and self.value.startswith("/*")

    @property
    def comment_body(self) -> str:
        """Comment text without its ``//``, ``#`` or ``/* */`` delimiters."""
        if self.kind is not TokenKind.COMMENT:
            return ""
        if self.value.startswith("/*"):
            return self.value[2:-2]
        if self.value.startswith("//"):
            return self.value[2:]
        return self.value[1:]


_PUNCT = {
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMI,
    ".": TokenKind.DOT,
    "-": TokenKind.MINUS,
}

_NUMBER_RE = re.compile(r"\d[\d_]*(?:\.\d+)?")
_IDENT_RE = re.compile(r"[A-Za-z_\\][A-Za-z0-9_\\]*")
_VARIABLE_RE = re.compile(r"\$[A-Za-z_][A-Za-z0-9_]*")

_DOUBLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "e": "\x1b",
    "f": "\f",
    "\\": "\\",
    "$": "$",
    '"': '"',
}
_OCTAL_RE = re.compile(r"[0-7]{1,3}")
_HEX_RE = re.compile(r"x([0-9A-Fa-f]{1,2})")
_UNICODE_RE = re.compile(r"u\{([0-9A-Fa-f]+)\}")


def read_quoted(text: str, pos: int) -> tuple[str, int]:
    """Read the quoted string starting at *pos*.

    Returns the unescaped value and the offset just past the closing quote.
    Single-quoted strings only unescape ``\\'`` and ``\\\\``; double-quoted
    strings follow PHP's escape sequences (variables are kept verbatim).
    """
    quote = text[pos]
    if quote not in ("'", '"'):
        raise PhpSyntaxError(f"expected a quoted string, got {quote!r}")
    out: list[str] = []
    i = pos + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == quote:
            return "".join(out), i + 1
        if ch != "\\" or i + 1 >= n:
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if quote == "'":
            if nxt in ("'", "\\"):
                out.append(nxt)
                i += 2
            else:
                out.append(ch)
                i += 1
            continue
        if nxt in _DOUBLE_ESCAPES:
            out.append(_DOUBLE_ESCAPES[nxt])
            i += 2
            continue
        m = _OCTAL_RE.match(text, i + 1)
        if m:
            out.append(chr(int(m.group(0), 8) & 0xFF))
            i = m.end()
            continue
        m = _HEX_RE.match(text, i + 1)
        if m:
            out.append(chr(int(m.group(1), 16)))
            i = m.end()
            continue
        m = _UNICODE_RE.match(text, i + 1)
        if m:
            out.append(chr(int(m.group(1), 16)))
            i = m.end()
            continue
        out.append(ch)
        i += 1
    raise PhpSyntaxError("unterminated string literal", line=text.count("\n", 0, pos) + 1)


def _line_comment_end(text: str, pos: int) -> int:
    """A ``//`` or ``#`` comment runs to end of line or a closing ``?>``."""
    newline = text.find("\n", pos)
    stop = len(text) if newline == -1 else newline
    close_tag = text.find("?>", pos, stop)
    return stop if close_tag == -1 else close_tag


def tokenize(text: str, *, keep_comments: bool = False) -> Iterator[Token]:
    """Yield the tokens of *text*.

    Raises ``PhpSyntaxError`` for unterminated strings or block comments.
    """
    pos = 0
    line = 1
    n = len(text)

    while pos < n:
        ch = text[pos]

        if ch in " \t\r\n\f\v":
            if ch == "\n":
                line += 1
            pos += 1
            continue

        if text.startswith("<?php", pos):
            pos += 5
            continue
        if text.startswith("<?", pos) or text.startswith("?>", pos):
            pos += 2
            continue

        if text.startswith("//", pos) or (ch == "#" and not text.startswith("#[", pos)):
            end = _line_comment_end(text, pos)
            if keep_comments:
                yield Token(TokenKind.COMMENT, text[pos:end], pos, end, line)
            pos = end
            continue

        if text.startswith("/*", pos):
            close = text.find("*/", pos + 2)
            if close == -1:
                raise PhpSyntaxError("unterminated block comment", line=line)
            end = close + 2
            if keep_comments:
                yield Token(TokenKind.COMMENT, text[pos:end], pos, end, line)
            line += text.count("\n", pos, end)
            pos = end
            continue

        if ch in ("'", '"'):
            value, end = read_quoted(text, pos)
            yield Token(TokenKind.STRING, value, pos, end, line)
            line += text.count("\n", pos, end)
            pos = end
            continue

        if text.startswith("=>", pos):
            yield Token(TokenKind.ARROW, "=>", pos, pos + 2, line)
            pos += 2
            continue

        if ch.isdigit():
            m = _NUMBER_RE.match(text, pos)
            assert m is not None
            yield Token(TokenKind.NUMBER, m.group(0), pos, m.end(), line)
            pos = m.end()
            continue

        if ch == "$":
            m = _VARIABLE_RE.match(text, pos)
            if m:
                yield Token(TokenKind.VARIABLE, m.group(0), pos, m.end(), line)
                pos = m.end()
                continue

        m = _IDENT_RE.match(text, pos)
        if m:
            yield Token(TokenKind.IDENT, m.group(0), pos, m.end(), line)
            pos = m.end()
            continue

        kind = _PUNCT.get(ch, TokenKind.OTHER)
        yield Token(kind, ch, pos, pos + 1, line)
        pos += 1
