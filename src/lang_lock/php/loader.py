"""Load a PHP ``return [...]`` file as a Python data structure.

PHP arrays become ``dict`` objects with string keys, except arrays whose keys
are exactly ``0..n-1`` in order, which become ``list`` objects.  An empty
array loads as an empty ``dict``.

Strict mode (translation files) rejects constants and function calls.
Lenient mode (config files) evaluates them to ``None`` so one unsupported
expression does not hide the keys we actually need.  ``env('NAME', default)``
is resolved from the process environment in both modes.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from lang_lock.errors import MalformedTreeError, PhpSyntaxError
from lang_lock.php.tokenizer import Token, TokenKind, tokenize

_logger = logging.getLogger(__name__)

_CLOSERS = {TokenKind.LBRACKET: TokenKind.RBRACKET, TokenKind.LPAREN: TokenKind.RPAREN}


class _Parser:
    def __init__(self, tokens: list[Token], *, strict: bool) -> None:
        self._tokens = tokens
        self._pos = 0
        self._strict = strict

    # ── cursor helpers ──────────────────────────────────────────────

    def _peek(self) -> Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _advance(self) -> Token:
        tok = self._peek()
        if tok is None:
            last = self._tokens[-1].line if self._tokens else None
            raise PhpSyntaxError("unexpected end of file", line=last)
        self._pos += 1
        return tok

    def _at(self, kind: TokenKind) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind is kind

    def _expect(self, kind: TokenKind) -> Token:
        tok = self._advance()
        if tok.kind is not kind:
            raise PhpSyntaxError(
                f"expected {kind.value!r}, got {tok.value!r}", line=tok.line
            )
        return tok

    # ── grammar ─────────────────────────────────────────────────────

    def parse_return(self) -> Any:
        for i, tok in enumerate(self._tokens):
            if tok.kind is TokenKind.IDENT and tok.value.lower() == "return":
                self._pos = i + 1
                break
        else:
            raise PhpSyntaxError("no return statement found")
        value = self.parse_expression()
        if self._at(TokenKind.SEMI):
            self._advance()
        return value

    def parse_expression(self) -> Any:
        value = self._parse_primary()
        while self._at(TokenKind.DOT):
            dot = self._advance()
            rhs = self._parse_primary()
            if isinstance(value, (dict, list)) or isinstance(rhs, (dict, list)):
                raise PhpSyntaxError("cannot concatenate an array", line=dot.line)
            value = _to_php_string(value) + _to_php_string(rhs)
        return value

    def _parse_primary(self) -> Any:
        tok = self._advance()
        kind = tok.kind

        if kind is TokenKind.STRING:
            return tok.value
        if kind is TokenKind.NUMBER:
            return _parse_number(tok)
        if kind is TokenKind.MINUS:
            operand = self._advance()
            if operand.kind is not TokenKind.NUMBER:
                raise PhpSyntaxError("expected a number after '-'", line=tok.line)
            return -_parse_number(operand)
        if kind is TokenKind.LBRACKET:
            return self._parse_array(TokenKind.RBRACKET)
        if kind is TokenKind.IDENT:
            return self._parse_identifier(tok)
        raise PhpSyntaxError(f"unexpected token {tok.value!r}", line=tok.line)

    def _parse_identifier(self, tok: Token) -> Any:
        name = tok.value.lstrip("\\")
        lowered = name.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        if lowered == "null":
            return None
        if self._at(TokenKind.LPAREN):
            self._advance()
            if lowered == "array":
                return self._parse_array(TokenKind.RPAREN)
            args = self._parse_call_args()
            if lowered == "env":
                return _resolve_env(args, tok)
            return self._unsupported(f"function call {name}()", tok)
        # Class constants such as Foo::BAR arrive as IDENT OTHER(:) OTHER(:) IDENT.
        while self._at(TokenKind.OTHER) and self._peek().value == ":":
            self._advance()
            if self._at(TokenKind.IDENT):
                name = f"{name}::{self._advance().value}"
        return self._unsupported(f"constant {name}", tok)

    def _parse_call_args(self) -> list[Any]:
        args: list[Any] = []
        while not self._at(TokenKind.RPAREN):
            args.append(self.parse_expression())
            if self._at(TokenKind.COMMA):
                self._advance()
                continue
            break
        self._expect(TokenKind.RPAREN)
        return args

    def _parse_array(self, closer: TokenKind) -> dict[str, Any] | list[Any]:
        entries: dict[str, Any] = {}
        is_list = True
        next_index = 0

        while True:
            if self._at(closer):
                self._advance()
                break
            first = self.parse_expression()
            if self._at(TokenKind.ARROW):
                arrow = self._advance()
                value = self.parse_expression()
                key = _array_key(first, arrow)
            else:
                key, value = next_index, first

            if isinstance(key, int):
                if key != len(entries):
                    is_list = False
                next_index = max(next_index, key + 1)
            else:
                is_list = False
            str_key = str(key)
            if str_key in entries:
                # PHP keeps the last value but the first position.
                is_list = False
            entries[str_key] = value

            if self._at(TokenKind.COMMA):
                self._advance()
                continue
            self._expect(closer)
            break

        if is_list and entries:
            return list(entries.values())
        return entries

    def _unsupported(self, what: str, tok: Token) -> None:
        if self._strict:
            raise PhpSyntaxError(f"unsupported expression: {what}", line=tok.line)
        _logger.debug("Ignoring unsupported %s on line %d", what, tok.line)
        return None


def _parse_number(tok: Token) -> int | float:
    raw = tok.value.replace("_", "")
    return float(raw) if "." in raw else int(raw)


def _to_php_string(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


def _array_key(value: Any, tok: Token) -> int | str:
    """Apply PHP's array-key casting rules."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if value is None:
        return ""
    if isinstance(value, str):
        if value.isdigit() and (value == "0" or not value.startswith("0")):
            return int(value)
        return value
    raise PhpSyntaxError("illegal array key", line=tok.line)


def _resolve_env(args: list[Any], tok: Token) -> Any:
    if not args or not isinstance(args[0], str):
        raise PhpSyntaxError("env() expects a variable name", line=tok.line)
    default = args[1] if len(args) > 1 else None
    return os.environ.get(args[0], default)


def load_php_array(text: str, *, strict: bool = True) -> Any:
    """Evaluate the value returned by PHP source *text*."""
    tokens = list(tokenize(text))
    return _Parser(tokens, strict=strict).parse_return()


def load_php_file(path: Path, *, strict: bool = True) -> Any:
    """Load *path* with :func:`load_php_array`, attributing errors to the file."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedTreeError(f"not valid UTF-8 ({exc.reason})", path) from exc
    try:
        return load_php_array(text, strict=strict)
    except PhpSyntaxError as exc:
        raise exc.with_path(path) from exc


def find_value_span(tokens: list[Token], start: int) -> tuple[int, int]:
    """Return the ``(first, last)`` token indexes of the value expression at *start*.

    The expression ends before the first ``,``, ``;`` or unmatched closing
    bracket found at nesting depth zero.
    """
    if start >= len(tokens):
        raise PhpSyntaxError("missing value expression")
    depth: list[TokenKind] = []
    i = start
    last = start
    while i < len(tokens):
        tok = tokens[i]
        if tok.kind in _CLOSERS:
            depth.append(_CLOSERS[tok.kind])
        elif tok.kind in (TokenKind.RBRACKET, TokenKind.RPAREN):
            if not depth:
                break
            if depth.pop() is not tok.kind:
                raise PhpSyntaxError(f"mismatched {tok.value!r}", line=tok.line)
        elif tok.kind in (TokenKind.COMMA, TokenKind.SEMI) and not depth:
            break
        last = i
        i += 1
    if depth:
        raise PhpSyntaxError("unbalanced brackets", line=tokens[start].line)
    return start, last
