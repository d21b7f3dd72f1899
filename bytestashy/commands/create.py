"""Create and update commands - upload local files as a snippet."""

from __future__ import annotations

from typing import Any, Optional

from rich.prompt import Confirm, Prompt

from bytestashy.commands.base import BaseCommand
from bytestashy.core.errors import ValidationError
from bytestashy.core.models import Snippet, SnippetDraft, SnippetFile, Visibility
from bytestashy.ui.console import console, print_success, print_warning
from bytestashy.ui.panels import create_snippet_panel
from bytestashy.ui.spinners import create_spinner


class SnippetFormMixin:
    """Turns flags plus interactive answers into a SnippetDraft."""

    def build_draft(
        self,
        flags: dict[str, Any],
        paths: list[str],
        current: Optional[Snippet] = None,
    ) -> SnippetDraft:
        if not paths:
            raise ValidationError("Provide at least one file")
        # Read files before asking anything so a bad path fails fast
        files = [SnippetFile.from_path(p) for p in paths]

        title = flags.get("title") or flags.get("t")
        if not isinstance(title, str):
            title = Prompt.ask(
                "[primary]❯[/primary] [text]Title[/text]",
                console=console,
                default=current.title if current else None,
            )

        description = flags.get("description") or flags.get("d")
        if not isinstance(description, str):
            description = Prompt.ask(
                "[primary]❯[/primary] [text]Description (optional)[/text]",
                console=console,
                default=current.description if current else "",
                show_default=bool(current and current.description),
            )

        if flags.get("public"):
            visibility: Any = Visibility.PUBLIC
        elif flags.get("private"):
            visibility = Visibility.PRIVATE
        else:
            visibility = Confirm.ask(
                "[primary]❯[/primary] [text]Make the snippet public?[/text]",
                console=console,
                default=bool(current and current.visibility is Visibility.PUBLIC),
            )

        categories = flags.get("categories") or flags.get("c")
        if not isinstance(categories, str):
            categories = Prompt.ask(
                "[primary]❯[/primary] [text]Categories (comma-separated, e.g. \"python,cli\")[/text]",
                console=console,
                default=",".join(sorted(current.categories)) if current else "",
                show_default=bool(current and current.categories),
            )

        return SnippetDraft.build(
            title=title,
            description=description,
            visibility=visibility,
            categories=categories,
            files=files,
        )


class CreateCommand(SnippetFormMixin, BaseCommand):
    """Create a new snippet from local files."""

    name = "create"
    description = "Create a new snippet"
    usage = "create <file1> [file2] ... [--title T] [--description D] [--categories a,b] [--public|--private]"
    aliases = ["push", "new"]
    bool_flags = {"public", "private"}

    def execute(self, args: list[str]) -> bool:
        flags, paths = self.parse_flags(args)
        draft = self.build_draft(flags, paths)

        with create_spinner(f"Uploading {len(draft.files)} file(s)...", style="upload"):
            snippet = self.service.create(draft)

        print_success(f"Snippet #{snippet.id} created.", title="Create")
        console.print(create_snippet_panel(snippet, show_content=False))
        return True


class UpdateCommand(SnippetFormMixin, BaseCommand):
    """Replace an existing snippet with new files and metadata."""

    name = "update"
    description = "Update an existing snippet (replaces all of its files)"
    usage = "update <id> <file1> [file2] ... [--title T] [--description D] [--categories a,b] [--public|--private]"
    aliases = ["edit"]
    bool_flags = {"public", "private", "force", "f"}

    def execute(self, args: list[str]) -> bool:
        flags, remaining = self.parse_flags(args)
        if not remaining:
            raise ValidationError("Provide the snippet id to update")
        snippet_id = self.parse_int(remaining[0], "snippet id")

        with create_spinner(f"Fetching snippet {snippet_id}...", style="loading"):
            current = self.service.get(snippet_id)

        draft = self.build_draft(flags, remaining[1:], current=current)

        dropped = set(current.filenames) - {f.filename for f in draft.files}
        if dropped:
            print_warning(
                "The update replaces every file. These files will be removed: "
                + ", ".join(sorted(dropped))
            )
            if not (flags.get("force") or flags.get("f")) and not Confirm.ask(
                "[primary]Continue?[/primary]", console=console, default=False
            ):
                console.print("[muted]Cancelled[/muted]")
                return True

        with create_spinner(f"Uploading {len(draft.files)} file(s)...", style="upload"):
            snippet = self.service.update(snippet_id, draft)

        print_success(f"Snippet #{snippet.id} updated.", title="Update")
        console.print(create_snippet_panel(snippet, show_content=False))
        return True
