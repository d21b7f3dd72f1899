"""Config command - show or change the saved settings."""

from __future__ import annotations

from rich.table import Table

from bytestashy.commands.base import BaseCommand
from bytestashy.ui.console import console, print_success


class ConfigCommand(BaseCommand):
    """Show the saved configuration, or change the default page size."""

    name = "config"
    description = "Show or change the saved configuration"
    usage = "config [--page-size N]"
    aliases = ["settings"]

    def execute(self, args: list[str]) -> bool:
        flags, _ = self.parse_flags(args)

        if "page-size" in flags:
            size = self.parse_int(flags["page-size"], "page size")
            self.session.update_config(default_page_size=size)
            print_success(f"Default page size set to {size}.", title="Config")
            return True

        config = self.session.config
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Key", style="muted")
        table.add_column("Value", style="text")
        table.add_row("Config file", str(self.session.store.path))
        table.add_row("Server URL", config.server_url or "-")
        table.add_row("Default page size", str(config.default_page_size))
        table.add_row(
            "Session",
            "[success]logged in[/success]" if self.session.is_authenticated else "[warning]logged out[/warning]",
        )
        console.print(table)
        return True
