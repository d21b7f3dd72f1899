"""Base command class for CLI commands."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from rich.markup import escape

from bytestashy.core.errors import BytestashyError, ValidationError
from bytestashy.core.service import SnippetService
from bytestashy.core.session import Session
from bytestashy.ui.console import console, print_exception

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """Base class for all CLI commands."""

    name: str = "base"
    description: str = "Base command"
    usage: str = ""
    aliases: list[str] = []
    # Flags that never take a value
    bool_flags: set[str] = set()
    # Restore the saved login before executing
    requires_session: bool = True

    def __init__(self, session: Session):
        self.session = session
        self.service = SnippetService(session)

    def run(self, args: list[str]) -> bool:
        """Execute the command, rendering any expected failure."""
        if "--help" in args or "-h" in args:
            self.print_usage()
            return True
        try:
            if self.requires_session and not self.session.is_authenticated:
                self.session.restore()
            return self.execute(args)
        except BytestashyError as e:
            logger.debug("%s failed: %r", self.name, e)
            print_exception(e)
            return False

    def print_usage(self) -> None:
        console.print(f"[text]{self.description}[/text]")
        console.print(f"[muted]Usage:[/muted] [command]bytestashy {escape(self.usage)}[/command]")

    @abstractmethod
    def execute(self, args: list[str]) -> bool:
        """
        Execute the command.

        Args:
            args: Command arguments

        Returns:
            True if successful, False otherwise
        """
        pass

    def parse_flags(self, args: list[str]) -> tuple[dict[str, Any], list[str]]:
        """Parse command-line flags from arguments."""
        flags = {}
        remaining = []

        i = 0
        while i < len(args):
            arg = args[i]
            if arg.startswith("--"):
                key = arg[2:]
                if "=" in key:
                    key, value = key.split("=", 1)
                    flags[key] = value
                elif key not in self.bool_flags and i + 1 < len(args) and not args[i + 1].startswith("-"):
                    flags[key] = args[i + 1]
                    i += 1
                else:
                    flags[key] = True
            elif arg.startswith("-") and len(arg) == 2:
                key = arg[1]
                if key not in self.bool_flags and i + 1 < len(args) and not args[i + 1].startswith("-"):
                    flags[key] = args[i + 1]
                    i += 1
                else:
                    flags[key] = True
            else:
                remaining.append(arg)
            i += 1

        return flags, remaining

    @staticmethod
    def parse_int(value: Any, what: str) -> int:
        """Convert a flag or argument to int, raising ValidationError."""
        # a flag given without a value is parsed as True
        if isinstance(value, bool):
            raise ValidationError(f"Missing value for {what}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid {what}: {value}") from None
