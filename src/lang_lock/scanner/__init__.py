"""Scanners that turn translation files into lock discoveries."""

from lang_lock.scanner.annotations import scan_annotations, scan_translation_file
from lang_lock.scanner.vendor import lock_vendor_tree

__all__ = ["scan_annotations", "scan_translation_file", "lock_vendor_tree"]
