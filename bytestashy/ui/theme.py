"""Theme and color definitions for the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from rich.style import Style
from rich.theme import Theme as RichTheme


@dataclass
class Theme:
    """Color theme for the CLI."""

    primary: str = "#C77DFF"      # Light Purple - main accent
    secondary: str = "#FF8C42"    # Orange - secondary accent
    tertiary: str = "#9D4EDD"     # Purple - tertiary accent

    # Status colors
    success: str = "#00E676"
    error: str = "#FF5252"
    warning: str = "#FFB347"
    info: str = "#B388FF"

    # Text colors
    text: str = "#E8E8E8"
    muted: str = "#888888"
    dim: str = "#555555"

    accent: str = "#00CED1"

    def to_rich_theme(self) -> RichTheme:
        """Convert to Rich theme."""
        return RichTheme({
            "primary": Style(color=self.primary),
            "secondary": Style(color=self.secondary),
            "tertiary": Style(color=self.tertiary),

            "success": Style(color=self.success, bold=True),
            "error": Style(color=self.error, bold=True),
            "warning": Style(color=self.warning),
            "info": Style(color=self.info),

            "text": Style(color=self.text),
            "muted": Style(color=self.muted),
            "dim": Style(color=self.dim),
            "accent": Style(color=self.accent),

            # Snippet fields
            "command": Style(color=self.primary, bold=True),
            "number": Style(color=self.warning),
            "filename": Style(color=self.secondary, italic=True),
            "category": Style(color=self.accent),
            "visibility.public": Style(color=self.success),
            "visibility.private": Style(color=self.muted),
            "url": Style(color=self.accent, underline=True),

            "spinner": Style(color=self.primary),
        })


_theme = Theme()


def get_theme() -> Theme:
    """Get the current theme."""
    return _theme
