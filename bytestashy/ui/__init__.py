"""UI components for the bytestashy CLI."""

from bytestashy.ui.console import (
    console,
    err_console,
    print_error,
    print_exception,
    print_success,
    print_warning,
)
from bytestashy.ui.panels import create_snippet_panel, create_snippet_table
from bytestashy.ui.spinners import create_spinner
from bytestashy.ui.theme import Theme, get_theme

__all__ = [
    # Theme
    "Theme",
    "get_theme",
    # Console
    "console",
    "err_console",
    "print_error",
    "print_exception",
    "print_success",
    "print_warning",
    # Panels
    "create_snippet_table",
    "create_snippet_panel",
    # Spinners
    "create_spinner",
]
