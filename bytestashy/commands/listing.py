"""List command - show a page of snippets, or all of them."""

from __future__ import annotations

from bytestashy.commands.base import BaseCommand
from bytestashy.core.errors import ListingAborted
from bytestashy.ui.console import console, print_error
from bytestashy.ui.panels import create_snippet_table
from bytestashy.ui.spinners import create_spinner


class ListCommand(BaseCommand):
    """Display snippets page by page."""

    name = "list"
    description = "Show a paginated list of snippets"
    usage = "list [-a|--all] [-n|--number N] [-p|--page P]"
    aliases = ["ls"]
    bool_flags = {"all", "a"}

    def execute(self, args: list[str]) -> bool:
        flags, _ = self.parse_flags(args)
        show_all = bool(flags.get("all") or flags.get("a"))

        size_flag = flags.get("number", flags.get("n"))
        page_size = self.parse_int(size_flag, "page size") if size_flag is not None else None
        page_flag = flags.get("page", flags.get("p"))
        page_number = self.parse_int(page_flag, "page number") if page_flag is not None else 1

        if show_all:
            try:
                with create_spinner("Fetching every page...", style="loading"):
                    items = self.service.list(page_size=page_size, all=True)
            except ListingAborted as e:
                print_error(
                    f"{e.message} ({e.fetched} snippet(s) fetched before the failure were discarded)",
                    title="ListingAborted",
                    hint=e.hint,
                )
                return False
            console.print(create_snippet_table(items, caption=f"{len(items)} snippet(s)"))
            return True

        with create_spinner(f"Fetching page {page_number}...", style="loading"):
            page = self.service.page(page_number, page_size)

        pages = max(1, -(-page.total // page.page_size)) if page.page_size else 1
        console.print(create_snippet_table(
            page.items,
            caption=f"Page {page.page_number} of {pages} · {page.total} snippet(s)",
        ))
        return True
