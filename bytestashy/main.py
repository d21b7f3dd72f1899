"""Main CLI entry point - one-shot commands or an interactive shell."""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.styles import Style
from rich.logging import RichHandler

from bytestashy import __app_name__, __version__
from bytestashy.commands import BaseCommand, build_commands
from bytestashy.core.config import ConfigStore
from bytestashy.core.session import Session
from bytestashy.core.settings import Settings
from bytestashy.core.vault import CredentialVault
from bytestashy.ui.console import console, err_console, print_error
from bytestashy.utils.completions import SHELLS, CommandCompleter, render_shell_completion
from bytestashy.utils.history import open_history

logger = logging.getLogger(__name__)

PROMPT_STYLE = Style.from_dict({
    "prompt": "#FF8C42 bold",
    "completion-menu": "bg:#1a1625 #e8e8e8",
    "completion-menu.completion": "bg:#1a1625 #c77dff",
    "completion-menu.completion.current": "bg:#9d4edd #ffffff bold",
    "completion-menu.meta.completion": "bg:#1a1625 #888888",
})


def setup_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_session(settings: Settings) -> Session:
    return Session(
        store=ConfigStore(settings.config_dir),
        vault=CredentialVault(service=settings.keyring_service),
        settings=settings,
    )


class BytestashyShell:
    """Interactive shell running the same commands as the one-shot mode."""

    def __init__(self, commands: dict[str, BaseCommand]):
        self.commands = commands
        self.prompt_session = PromptSession(
            history=open_history(),
            completer=CommandCompleter(),
            style=PROMPT_STYLE,
            complete_while_typing=True,
            mouse_support=False,
        )

    def get_prompt(self) -> HTML:
        return HTML("<prompt>bytestashy ❯</prompt> ")

    def run(self) -> int:
        console.print(f"[primary]{__app_name__} {__version__}[/primary] [muted]· type help, or quit to exit[/muted]")

        while True:
            try:
                user_input = self.prompt_session.prompt(self.get_prompt()).strip()
            except KeyboardInterrupt:
                console.print("[muted]Type quit to exit[/muted]")
                continue
            except EOFError:
                return 0

            if not user_input:
                continue

            try:
                cmd_name, *args = shlex.split(user_input)
            except ValueError as e:
                print_error(f"Cannot parse input: {e}")
                continue

            cmd_name = cmd_name.lower()
            if cmd_name in ("quit", "exit"):
                return 0

            command = self.commands.get(cmd_name)
            if command is None:
                print_error(f"Unknown command: {cmd_name}", hint="Type help for available commands.")
                continue

            try:
                command.run(args)
            except KeyboardInterrupt:
                console.print("\n[warning]Interrupted[/warning]")
            console.print()


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="CLI to push snippets to ByteStash",
        epilog="Run `bytestashy help` for the list of commands.",
    )
    parser.add_argument(
        "--shell",
        choices=SHELLS,
        help="Generate shell completions for the specified shell",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log requests and responses to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{__app_name__} {__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        help="Command to execute (starts the interactive shell if omitted)",
    )
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Arguments and flags of the command",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    # Command-specific flags are parsed by the commands themselves
    args = create_parser().parse_args(argv)

    if args.shell:
        sys.stdout.write(render_shell_completion(args.shell))
        return 0

    settings = Settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    with build_session(settings) as session:
        commands = build_commands(session)
        logger.debug("Using config file %s", session.store.path)

        if args.command:
            command = commands.get(args.command.lower())
            if command is None:
                print_error(f"Unknown command: {args.command}", hint="Run `bytestashy help` to see available commands.")
                return 1
            return 0 if command.run(args.args) else 1

        return BytestashyShell(commands).run()


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
