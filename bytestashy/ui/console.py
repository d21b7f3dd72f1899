"""Rich console instances and message helpers."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from rich import box

from bytestashy.core.errors import BytestashyError
from bytestashy.ui.theme import get_theme


# Normal output goes to stdout, errors and prompts to stderr
console = Console(theme=get_theme().to_rich_theme(), highlight=True)
err_console = Console(theme=get_theme().to_rich_theme(), stderr=True)


def print_error(message: str, title: str = "Error", hint: str = "") -> None:
    """Print an error panel, with an optional remedy line."""
    content = Text()
    content.append(message, style="#FF5252")
    if hint:
        content.append("\n")
        content.append(hint, style="#888888")

    err_console.print(Panel(
        content,
        title=f"[#FF5252 bold]✖ {title}[/#FF5252 bold]",
        border_style="#FF5252",
        box=box.ROUNDED,
        padding=(0, 2),
    ))


def print_exception(error: BytestashyError) -> None:
    """Render one of our errors together with its hint."""
    print_error(error.message, title=type(error).__name__, hint=error.hint)


def print_success(message: str, title: str = "Success") -> None:
    content = Text()
    content.append(message, style="#00E676")

    console.print(Panel(
        content,
        title=f"[#00E676 bold]✔ {title}[/#00E676 bold]",
        border_style="#00E676",
        box=box.ROUNDED,
        padding=(0, 2),
    ))


def print_warning(message: str, title: str = "Warning") -> None:
    content = Text()
    content.append(message, style="#FFB347")

    err_console.print(Panel(
        content,
        title=f"[#FFB347 bold]⚠ {title}[/#FFB347 bold]",
        border_style="#FFB347",
        box=box.ROUNDED,
        padding=(0, 2),
    ))
