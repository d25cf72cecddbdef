"""lang_lock — protect locked translation keys and generate missing source locales."""

__all__ = [
    "__version__",
    "export_locked",
    "generate_source",
]
__version__ = "0.1.0"

from lang_lock.api import (  # noqa: E402, F401
    export_locked,
    generate_source,
)
