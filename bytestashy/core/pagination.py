"""Lazy walk over the pages of the snippet listing."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from bytestashy.core.models import Page

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], Page]


class PageIterator:
    """Finite, restartable sequence of listing pages.

    Each ``iter()`` starts again at page 1 and requests pages one at a
    time in ascending order; the next request is only sent when the
    caller asks for the next page, so breaking out early saves the rest.
    The walk ends once the items seen reach the reported total or a page
    comes back empty. Request errors propagate unchanged.
    """

    def __init__(self, fetch: PageFetcher, page_size: int):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._fetch = fetch
        self.page_size = page_size

    def __iter__(self) -> Iterator[Page]:
        page_number = 1
        seen = 0
        while True:
            page = self._fetch(page_number, self.page_size)
            logger.debug(
                "Fetched page %d (%d items, total %d)",
                page_number,
                len(page.items),
                page.total,
            )
            yield page

            seen += len(page.items)
            if not page.items or seen >= page.total:
                return
            page_number += 1
