"""CLI Commands for bytestashy."""

from __future__ import annotations

from bytestashy.commands.base import BaseCommand
from bytestashy.commands.config import ConfigCommand
from bytestashy.commands.create import CreateCommand, UpdateCommand
from bytestashy.commands.delete import DeleteCommand
from bytestashy.commands.get import GetCommand
from bytestashy.commands.help import HelpCommand
from bytestashy.commands.listing import ListCommand
from bytestashy.commands.login import LoginCommand, LogoutCommand
from bytestashy.commands.search import SearchCommand
from bytestashy.core.session import Session

COMMAND_CLASSES: list[type[BaseCommand]] = [
    LoginCommand,
    LogoutCommand,
    CreateCommand,
    ListCommand,
    GetCommand,
    UpdateCommand,
    DeleteCommand,
    SearchCommand,
    ConfigCommand,
    HelpCommand,
]


def build_commands(session: Session) -> dict[str, BaseCommand]:
    """Command registry keyed by name and every alias."""
    registry: dict[str, BaseCommand] = {}
    for cls in COMMAND_CLASSES:
        command = cls(session)
        registry[cls.name] = command
        for alias in cls.aliases:
            registry[alias] = command
    return registry


__all__ = [
    "COMMAND_CLASSES",
    "build_commands",
    "BaseCommand",
    "LoginCommand",
    "LogoutCommand",
    "CreateCommand",
    "UpdateCommand",
    "ListCommand",
    "GetCommand",
    "DeleteCommand",
    "SearchCommand",
    "ConfigCommand",
    "HelpCommand",
]
