"""Recursive helpers over translation trees (nested ``dict`` of strings)."""

from __future__ import annotations

from typing import Any, Mapping

from lang_lock.errors import MalformedTreeError

# Translation files are a few levels deep; anything past this is corrupt input.
MAX_TREE_DEPTH = 64


def _enter(node: object, ancestors: tuple[int, ...]) -> tuple[int, ...]:
    if id(node) in ancestors:
        raise MalformedTreeError("translation tree refers to itself")
    if len(ancestors) >= MAX_TREE_DEPTH:
        raise MalformedTreeError(f"translation tree nested deeper than {MAX_TREE_DEPTH} levels")
    return ancestors + (id(node),)


def flatten_tree(
    tree: Mapping[str, Any],
    prefix: str = "",
    *,
    _ancestors: tuple[int, ...] = (),
) -> dict[str, Any]:
    """Flatten *tree* to ``{"a.b.c": leaf}`` in traversal order.

    List values are walked like arrays with integer keys, matching how PHP
    treats list arrays.
    """
    ancestors = _enter(tree, _ancestors)
    flat: dict[str, Any] = {}
    for key, value in tree.items():
        full = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, list):
            value = {str(i): v for i, v in enumerate(value)}
            if not value:
                continue
        if isinstance(value, Mapping):
            for sub_key, leaf in flatten_tree(value, full, _ancestors=ancestors).items():
                flat.setdefault(sub_key, leaf)
        else:
            flat.setdefault(full, value)
    return flat


def synthesize_source_tree(
    tree: Mapping[str, Any],
    *,
    _ancestors: tuple[int, ...] = (),
) -> dict[str, Any]:
    """Return a tree shaped like *tree* whose leaves equal their own key.

    Only the terminal key segment is used, never the dotted path:
    ``{"nested": {"World": "x"}}`` becomes ``{"nested": {"World": "World"}}``.
    """
    ancestors = _enter(tree, _ancestors)
    result: dict[str, Any] = {}
    for key, value in tree.items():
        if isinstance(value, Mapping):
            result[key] = synthesize_source_tree(value, _ancestors=ancestors)
        elif isinstance(value, list):
            raise MalformedTreeError(f"key {key!r} holds a list, not a translation")
        else:
            result[key] = str(key)
    return result
