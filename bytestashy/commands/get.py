"""Get command - fetch a snippet and write its files to disk."""

from __future__ import annotations

from pathlib import Path

from bytestashy.commands.base import BaseCommand
from bytestashy.core.errors import ValidationError
from bytestashy.core.models import Snippet
from bytestashy.ui.console import console, print_success
from bytestashy.ui.panels import create_snippet_panel
from bytestashy.ui.spinners import create_spinner


def safe_filename(filename: str) -> str:
    """Base name of a server-supplied filename, refusing empty and dot names."""
    name = Path(filename.replace("\\", "/")).name
    if name in ("", ".", ".."):
        raise ValidationError(f"Refusing to write file with unsafe name: {filename!r}")
    return name


def write_snippet_files(snippet: Snippet, directory: Path, overwrite: bool = False) -> list[Path]:
    """Write every file of ``snippet`` into ``directory``.

    Nothing is written if two files share a base name, or if any target
    already exists and ``overwrite`` is off.
    """
    targets = [(directory / safe_filename(f.filename), f.content) for f in snippet.files]

    seen: dict[Path, str] = {}
    for (path, _), f in zip(targets, snippet.files):
        if path in seen:
            raise ValidationError(
                f"Files {seen[path]!r} and {f.filename!r} would both be written to {path}",
                hint="Use --print to view the snippet instead.",
            )
        seen[path] = f.filename

    if not overwrite:
        existing = [str(path) for path, _ in targets if path.exists()]
        if existing:
            raise ValidationError(
                "File(s) already exist: " + ", ".join(existing),
                hint="Use --force to overwrite or --output to pick another directory.",
            )

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ValidationError(f"Couldn't create output directory {directory}: {e}") from e

    written = []
    for path, content in targets:
        try:
            path.write_text(content, encoding="utf-8", newline="")
        except OSError as e:
            raise ValidationError(
                f"Couldn't write {path}: {e}",
                hint="Already written: " + (", ".join(str(p) for p in written) or "none"),
            ) from e
        written.append(path)
    return written


class GetCommand(BaseCommand):
    """Retrieve a snippet by id."""

    name = "get"
    description = "Retrieve a snippet by ID and write its files"
    usage = "get <id> [-o|--output DIR] [--print] [-f|--force]"
    aliases = ["show"]
    bool_flags = {"print", "force", "f"}

    def execute(self, args: list[str]) -> bool:
        flags, remaining = self.parse_flags(args)
        if not remaining:
            raise ValidationError("Provide the snippet id")
        snippet_id = self.parse_int(remaining[0], "snippet id")

        with create_spinner(f"Fetching snippet {snippet_id}...", style="loading"):
            snippet = self.service.get(snippet_id)

        if flags.get("print"):
            console.print(create_snippet_panel(snippet))
            return True

        output = Path(str(flags.get("output", flags.get("o", "."))))
        written = write_snippet_files(snippet, output, overwrite=bool(flags.get("force") or flags.get("f")))

        console.print(create_snippet_panel(snippet, show_content=False))
        print_success("\n".join(str(p) for p in written), title=f"Wrote {len(written)} file(s)")
        return True
