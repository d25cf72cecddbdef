"""Reading and writing the PHP array files used for translations and config."""

from lang_lock.php.export import (
    export_php_array,
    export_php_value,
    quote_php_string,
    render_php_file,
)
from lang_lock.php.loader import load_php_array, load_php_file

__all__ = [
    "export_php_array",
    "export_php_value",
    "quote_php_string",
    "render_php_file",
    "load_php_array",
    "load_php_file",
]
