"""
PaginationDriver module orchestrating a single paginated listing

Pages are fetched strictly one after the other: whether another page exists
is only known once the previous one has been decoded.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Iterator, Optional

from .pagination_strategy import PaginationStrategy, PageTotalPagination
from .resource_fetcher import PageEnvelope
from .streaming_sink import StreamingSink

logger = logging.getLogger(__name__)


class ListingState(Enum):
    """States of a listing operation"""
    START = 'start'
    FETCHING_PAGE = 'fetching_page'
    HAS_MORE = 'has_more'
    EXHAUSTED = 'exhausted'
    CANCELLED = 'cancelled'
    ERROR = 'error'

    @property
    def is_done(self) -> bool:
        return self in (ListingState.EXHAUSTED, ListingState.CANCELLED, ListingState.ERROR)


class PaginationDriver:
    """
    Drives repeated page fetches and streams every record through a sink

    Usage:
        driver = PaginationDriver(lambda page: fetcher.fetch('/api/hosts', page=page))
        for record in driver:
            ...

    The driver is single-use: iterating it a second time raises RuntimeError.
    """

    def __init__(self, fetch_page: Callable[[int], PageEnvelope],
                 strategy: Optional[PaginationStrategy] = None,
                 sink: Optional[StreamingSink] = None,
                 cancel_event: Optional[threading.Event] = None):
        """
        Args:
            fetch_page: Callable fetching one page by its one-indexed number
            strategy: Decides whether another page is needed (PageTotalPagination by default)
            sink: Decodes and wraps each record (records pass through unchanged by default)
            cancel_event: Polled before every record and before every page fetch
        """
        self.fetch_page = fetch_page
        self.strategy = strategy or PageTotalPagination()
        self.sink = sink or StreamingSink()
        self.cancel_event = cancel_event
        self.state = ListingState.START
        self.current_page = 0
        self.pages_fetched = 0
        self.records_streamed = 0

    def __iter__(self) -> Iterator[Any]:
        return self.stream()

    def stream(self) -> Iterator[Any]:
        """
        Generate records across all pages, page N's records before page N+1's

        Raises:
            RuntimeError: If the listing was already started
            TransportError, HTTPError, DecodeError, UnsupportedCursorType:
                Fetch or pagination failures; records already yielded stay delivered
        """
        if self.state is not ListingState.START:
            raise RuntimeError("listing already started; drivers cannot be restarted")
        # claim the driver before the generator body runs
        self.state = ListingState.HAS_MORE
        return self._run()

    def _run(self) -> Iterator[Any]:
        page_num = 1
        try:
            while True:
                if self._is_cancelled():
                    return

                self.state = ListingState.FETCHING_PAGE
                self.current_page = page_num
                logger.debug(f"retrieving page {page_num}")
                envelope = self.fetch_page(page_num)
                self.pages_fetched += 1

                for record in envelope.results:
                    if self._is_cancelled():
                        return
                    item = self.sink.emit(record)
                    self.records_streamed += 1
                    yield item

                next_page = self.strategy.get_next_page(envelope, page_num)
                if next_page is None:
                    self.state = ListingState.EXHAUSTED
                    logger.debug(
                        f"all pages retrieved: pages={self.pages_fetched} "
                        f"subtotal={envelope.subtotal} total={envelope.total}"
                    )
                    return

                if not envelope.results:
                    # cursor says more, but the server has nothing left to give
                    self.state = ListingState.EXHAUSTED
                    logger.warning(
                        f"page {page_num} was empty although total={envelope.total}, "
                        f"per_page={envelope.per_page}, page={envelope.page!r}; stopping"
                    )
                    return

                self.state = ListingState.HAS_MORE
                page_num = next_page
                logger.debug(f"retrieving next page {page_num}")

        except Exception:
            self.state = ListingState.ERROR
            raise
        except GeneratorExit:
            # consumer closed the sequence early
            self.state = ListingState.CANCELLED
            raise

    def _is_cancelled(self) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.state = ListingState.CANCELLED
            logger.debug(f"listing cancelled after {self.records_streamed} records")
            return True
        return False
