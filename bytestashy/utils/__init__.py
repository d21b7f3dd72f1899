"""Utility functions for the CLI."""

from bytestashy.utils.completions import CommandCompleter, render_shell_completion
from bytestashy.utils.history import open_history

__all__ = ["CommandCompleter", "render_shell_completion", "open_history"]
