"""Delete command - remove a snippet from the server."""

from __future__ import annotations

from rich.prompt import Confirm

from bytestashy.commands.base import BaseCommand
from bytestashy.core.errors import ValidationError
from bytestashy.ui.console import console, print_success
from bytestashy.ui.spinners import create_spinner


class DeleteCommand(BaseCommand):
    """Delete a snippet by id, after confirmation."""

    name = "delete"
    description = "Delete a snippet by ID"
    usage = "delete <id> [-f|--force]"
    aliases = ["rm"]
    bool_flags = {"force", "f"}

    def execute(self, args: list[str]) -> bool:
        flags, remaining = self.parse_flags(args)
        if not remaining:
            raise ValidationError("Provide the snippet id to delete")
        snippet_id = self.parse_int(remaining[0], "snippet id")
        force = bool(flags.get("force") or flags.get("f"))

        if not force and not Confirm.ask(
            f"[primary]Delete snippet #{snippet_id}?[/primary]",
            console=console,
            default=False,
        ):
            console.print("[muted]Cancelled[/muted]")
            return True

        with create_spinner(f"Deleting snippet {snippet_id}...", style="loading"):
            self.service.delete(snippet_id, force=force)

        print_success(f"Snippet #{snippet_id} deleted.", title="Delete")
        return True
