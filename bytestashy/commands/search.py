"""Search command - find snippets by title, description or code."""

from __future__ import annotations

from bytestashy.commands.base import BaseCommand
from bytestashy.core.errors import ValidationError
from bytestashy.core.models import SearchQuery, SortOrder
from bytestashy.ui.console import console
from bytestashy.ui.panels import create_snippet_table
from bytestashy.ui.spinners import create_spinner

SORT_CHOICES = [s.value for s in SortOrder]


class SearchCommand(BaseCommand):
    """Search snippets and print the matches in the requested order."""

    name = "search"
    description = "Search snippets"
    usage = "search <query> [-s|--sort newest|oldest|alpha-asc|alpha-desc] [--search-code]"
    aliases = ["find"]
    bool_flags = {"search-code"}

    def execute(self, args: list[str]) -> bool:
        flags, remaining = self.parse_flags(args)
        sort = flags.get("sort", flags.get("s"))
        if sort is not None and sort not in SORT_CHOICES:
            raise ValidationError(f"Unknown sort order: {sort} (choose from {', '.join(SORT_CHOICES)})")

        query = SearchQuery.build(
            " ".join(remaining),
            sort=sort,
            search_code=bool(flags.get("search-code")),
        )

        with create_spinner(f"Searching for {query.text!r}...", style="loading"):
            results = self.service.search(query)

        scope = "titles, descriptions and code" if query.search_code else "titles and descriptions"
        console.print(create_snippet_table(
            results,
            title=f"Results for {query.text!r}",
            caption=f"{len(results)} match(es) in {scope} · sorted {query.sort.value}",
        ))
        return True
