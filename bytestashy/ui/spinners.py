"""Spinner shown while a request is in flight."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from rich.markup import escape

from bytestashy.ui.console import err_console

SPINNER_STYLES = {
    "default": "dots",
    "loading": "dots12",
    "upload": "arc",
}


@contextmanager
def create_spinner(message: str, style: str = "default") -> Generator[None, None, None]:
    """Show a spinner on stderr for the duration of the block.

    Nothing is drawn when stderr is not a terminal.
    """
    if not err_console.is_terminal:
        yield
        return

    with err_console.status(
        f"[primary]{escape(message)}[/primary]",
        spinner=SPINNER_STYLES.get(style, "dots"),
        spinner_style="primary",
    ):
        yield
