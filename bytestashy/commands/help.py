"""Help command - display CLI help."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from bytestashy.commands.base import BaseCommand
from bytestashy.ui.console import console, print_error


class HelpCommand(BaseCommand):
    """Display help information."""

    name = "help"
    description = "Show help information"
    usage = "help [command]"
    aliases = ["h", "?"]
    requires_session = False

    def execute(self, args: list[str]) -> bool:
        _, remaining = self.parse_flags(args)

        if remaining:
            return self._show_command_help(remaining[0].lower())
        return self._show_general_help()

    @staticmethod
    def _command_classes() -> list[type[BaseCommand]]:
        from bytestashy.commands import COMMAND_CLASSES

        return COMMAND_CLASSES

    def _show_general_help(self) -> bool:
        table = Table(
            show_header=True,
            header_style="primary",
            border_style="muted",
            padding=(0, 2),
        )
        table.add_column("Command", style="command", width=10)
        table.add_column("Aliases", style="muted", width=12)
        table.add_column("Description", style="text")

        for cmd in self._command_classes():
            table.add_row(cmd.name, ", ".join(cmd.aliases), cmd.description)

        console.print(Panel(
            table,
            title="[primary]Available Commands[/primary]",
            border_style="primary",
            padding=(1, 2),
        ))

        tips = Text()
        tips.append("Tips:\n", style="primary")
        tips.append("  • ", style="muted")
        tips.append("Use ", style="text")
        tips.append("help <command>", style="command")
        tips.append(" for the usage of one command\n", style="text")
        tips.append("  • ", style="muted")
        tips.append("Run ", style="text")
        tips.append("bytestashy --shell bash", style="command")
        tips.append(" to print a completion script", style="text")
        console.print(tips)
        return True

    def _show_command_help(self, cmd_name: str) -> bool:
        cmd = next(
            (c for c in self._command_classes() if cmd_name == c.name or cmd_name in c.aliases),
            None,
        )
        if cmd is None:
            print_error(f"Unknown command: {cmd_name}", hint="Use `bytestashy help` to see available commands.")
            return False

        text = Text()
        text.append(f"{cmd.description}\n\n", style="text")
        text.append("Usage:\n", style="muted")
        text.append(f"  bytestashy {cmd.usage}", style="command")
        if cmd.aliases:
            text.append("\n\nAliases:\n", style="muted")
            text.append(f"  {', '.join(cmd.aliases)}", style="tertiary")

        console.print(Panel(
            text,
            title=f"[primary]{cmd.name}[/primary]",
            border_style="primary",
            padding=(1, 2),
        ))
        return True
