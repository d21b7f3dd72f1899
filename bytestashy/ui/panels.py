"""Panel components for displaying snippets."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from bytestashy.core.models import Snippet, SnippetSummary, Visibility


def _format_time(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


def _visibility_text(visibility: Visibility) -> Text:
    return Text(visibility.value, style=f"visibility.{visibility.value}")


def create_snippet_table(
    items: Sequence[SnippetSummary],
    title: str = "Snippets",
    caption: str = "",
) -> Table:
    """Create a table with one row per snippet."""
    table = Table(
        title=f"[primary]{escape(title)}[/primary]",
        caption=escape(caption) if caption else None,
        show_header=True,
        header_style="primary",
        border_style="muted",
    )
    table.add_column("ID", style="number", justify="right")
    table.add_column("Title", style="text", overflow="fold")
    table.add_column("Visibility")
    table.add_column("Categories", style="category")
    table.add_column("Files", style="filename", overflow="ellipsis")
    table.add_column("Updated", style="muted")

    for item in items:
        table.add_row(
            str(item.id),
            Text(item.title),
            _visibility_text(item.visibility),
            Text(", ".join(sorted(item.categories))),
            Text(", ".join(item.filenames)),
            _format_time(item.updated_at),
        )
    return table


def create_snippet_panel(snippet: Snippet, show_content: bool = True) -> Panel:
    """Create a panel with metadata and, optionally, every file's content."""
    meta = Text()
    meta.append("Title:       ", style="muted")
    meta.append(snippet.title, style="text")
    meta.append("\n")
    if snippet.description:
        meta.append("Description: ", style="muted")
        meta.append(snippet.description, style="text")
        meta.append("\n")
    meta.append("Visibility:  ", style="muted")
    meta.append_text(_visibility_text(snippet.visibility))
    meta.append("\n")
    meta.append("Categories:  ", style="muted")
    meta.append(", ".join(sorted(snippet.categories)) or "-", style="category")
    meta.append("\n")
    meta.append("Updated:     ", style="muted")
    meta.append(_format_time(snippet.updated_at), style="muted")

    elements = [meta]
    if show_content:
        for f in snippet.files:
            lexer = f.language or Syntax.guess_lexer(f.filename, code=f.content)
            elements.append(Text())
            elements.append(Panel(
                Syntax(f.content, lexer, line_numbers=True, word_wrap=True),
                title=f"[filename]{escape(f.filename)}[/filename]",
                border_style="tertiary",
            ))

    return Panel(
        Group(*elements),
        title=f"[primary]Snippet #{snippet.id}[/primary]",
        border_style="primary",
        padding=(1, 2),
    )
