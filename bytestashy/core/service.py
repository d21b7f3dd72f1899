"""Snippet operations on top of an authenticated session."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from bytestashy.core.errors import ApiError, ListingAborted, ValidationError
from bytestashy.core.models import (
    Page,
    SearchQuery,
    Snippet,
    SnippetDraft,
    SnippetSummary,
    SortOrder,
)
from bytestashy.core.pagination import PageIterator
from bytestashy.core.session import Session

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def order_results(results: list[Snippet], sort: SortOrder) -> list[Snippet]:
    """Deterministic ordering of search results.

    Ties are broken by id ascending, except for ``alpha-desc`` which is
    the exact reverse of ``alpha-asc``.
    """
    by_id = sorted(results, key=lambda s: s.id)
    if sort is SortOrder.NEWEST:
        return sorted(by_id, key=lambda s: s.updated_at or _EPOCH, reverse=True)
    if sort is SortOrder.OLDEST:
        return sorted(by_id, key=lambda s: s.updated_at or _EPOCH)

    ascending = sorted(by_id, key=lambda s: s.title.casefold())
    if sort is SortOrder.ALPHA_DESC:
        ascending.reverse()
    return ascending


class SnippetService:
    """Create, list, get, update, delete and search snippets.

    Every call checks the session first and raises AuthRequired,
    without any request, when it is not authenticated.
    """

    def __init__(self, session: Session):
        self.session = session

    def _page_size(self, page_size: Optional[int]) -> int:
        size = page_size if page_size is not None else self.session.config.default_page_size
        if size < 1:
            raise ValidationError(f"Page size must be at least 1, got {size}")
        return size

    def create(self, draft: SnippetDraft) -> Snippet:
        client = self.session.require_client()
        snippet = client.create_snippet(draft)
        logger.info("Created snippet %d with %d file(s)", snippet.id, len(draft.files))
        return snippet

    def page(self, page: int = 1, page_size: Optional[int] = None) -> Page:
        client = self.session.require_client()
        if page < 1:
            raise ValidationError(f"Page numbers start at 1, got {page}")
        return client.list_page(page, self._page_size(page_size))

    def pages(self, page_size: Optional[int] = None) -> PageIterator:
        """Lazy sequence of every page, starting at page 1 on each iteration."""
        client = self.session.require_client()
        return PageIterator(client.list_page, self._page_size(page_size))

    def list(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        all: bool = False,
    ) -> list[SnippetSummary]:
        """List snippet summaries.

        With ``all`` the pages are fetched one after another and their
        items concatenated in page order. If any request fails the items
        collected so far are dropped and ListingAborted is raised with the
        last page that did arrive.
        """
        if not all:
            return list(self.page(page, page_size).items)

        items: list[SnippetSummary] = []
        last_page = 0
        try:
            for current in self.pages(page_size):
                items.extend(current.items)
                last_page += 1
        except ApiError as e:
            raise ListingAborted(e, last_page=last_page, fetched=len(items)) from e
        return items

    def get(self, snippet_id: int) -> Snippet:
        return self.session.require_client().get_snippet(snippet_id)

    def update(self, snippet_id: int, draft: SnippetDraft) -> Snippet:
        """Replace title, metadata and the whole file set of a snippet.

        There is no partial update: files missing from ``draft`` are gone
        afterwards.
        """
        client = self.session.require_client()
        snippet = client.update_snippet(snippet_id, draft)
        logger.info("Replaced snippet %d with %d file(s)", snippet_id, len(draft.files))
        return snippet

    def delete(self, snippet_id: int, force: bool = False) -> None:
        """Delete a snippet. Confirmation, skipped by ``force``, is the caller's job."""
        client = self.session.require_client()
        client.delete_snippet(snippet_id)
        logger.info("Deleted snippet %d (force=%s)", snippet_id, force)

    def search(self, query: SearchQuery) -> list[Snippet]:
        client = self.session.require_client()
        return order_results(client.search_snippets(query), query.sort)
