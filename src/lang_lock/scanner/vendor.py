"""Vendor locker — locks every key of a vendor package's translation file."""

from __future__ import annotations

from typing import Any

from lang_lock.model import DiscoveryOrigin
from lang_lock.model.discovery import Discovery
from lang_lock.tree import flatten_tree


def vendor_key_prefix(package: str, filename: str) -> str:
    return f"vendor/{package}/{filename}."


def lock_vendor_tree(
    tree: Any,
    package: str,
    filename: str,
    locale: str,
    *,
    path: str = "",
) -> list[Discovery]:
    """One discovery per leaf of *tree*, keyed ``vendor/{package}/{file}.{a.b}``.

    A value that is not a mapping has nothing to lock and yields ``[]``.
    """
    if not isinstance(tree, dict):
        return []
    prefix = vendor_key_prefix(package, filename)
    return [
        Discovery(f"{prefix}{key}", locale, DiscoveryOrigin.VENDOR, path)
        for key in flatten_tree(tree)
    ]
