"""Render Python structures as PHP short-array literals.

The output is meant to be read back by PHP (``require``) and by
:mod:`lang_lock.php.loader`.  Mapping order and the scalar-vs-list shape of
every value are preserved exactly; nothing is inferred from the data.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

INDENT = "    "


def quote_php_string(value: str) -> str:
    """Single-quote *value*, escaping backslashes and quotes."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def export_php_value(value: Any, indent: int = 0) -> str:
    """Render one value.  Mappings span lines; sequences stay inline."""
    if isinstance(value, Mapping):
        return export_php_array(value, indent)
    if isinstance(value, str):
        return quote_php_string(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(export_php_value(v, indent) for v in value) + "]"
    raise TypeError(f"cannot export {type(value).__name__} as a PHP literal")


def export_php_array(mapping: Mapping[Any, Any], indent: int = 0) -> str:
    """Render *mapping* as a multi-line PHP array.

    *indent* is the nesting level of the opening bracket: entries are written
    one level deeper and the closing bracket at *indent*.  An empty mapping
    renders as ``[]``.
    """
    inner = INDENT * (indent + 1)
    items = [
        f"{inner}{export_php_value(key if isinstance(key, str) else str(key))} => "
        f"{export_php_value(value, indent + 1)}"
        for key, value in mapping.items()
    ]
    if not items:
        return "[]"
    return "[\n" + ",\n".join(items) + f",\n{INDENT * indent}]"


def render_php_file(mapping: Mapping[str, Any], header: Iterable[str] = ()) -> str:
    """Render a complete ``<?php return [...];`` file with a doc-comment header."""
    lines = list(header)
    doc = ""
    if lines:
        body = "\n".join(f" * {line}" if line else " *" for line in lines)
        doc = f"/**\n{body}\n */\n\n"
    return f"<?php\n\n{doc}return {export_php_array(mapping, 0)};\n"
