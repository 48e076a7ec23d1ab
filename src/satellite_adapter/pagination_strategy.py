"""
PaginationStrategy module deciding whether another page must be fetched
"""

from typing import Optional, Protocol

from .page_cursor import normalize_page_cursor
from .resource_fetcher import PageEnvelope


class PaginationStrategy(Protocol):
    """Protocol for pagination strategies"""

    def get_next_page(self, envelope: PageEnvelope, page_num: int) -> Optional[int]:
        """Return the next page number to fetch, or None if no more pages"""
        ...


class PageTotalPagination:
    """
    Page-based pagination driven by the envelope's cursor, page size and total

    The listing is complete once per_page * cursor reaches the reported total.
    The next page number comes from the driver's own counter, never from the
    server cursor, so an overcounting total cannot loop forever.
    """

    def get_next_page(self, envelope: PageEnvelope, page_num: int) -> Optional[int]:
        """
        Calculate the page to request after page_num

        Args:
            envelope: Page just fetched
            page_num: Page number that was requested

        Returns:
            page_num + 1 if more results exist, None otherwise

        Raises:
            UnsupportedCursorType: If the envelope's page field cannot be interpreted
        """
        cursor = normalize_page_cursor(envelope.page)
        if envelope.per_page * cursor < envelope.total:
            return page_num + 1
        return None
