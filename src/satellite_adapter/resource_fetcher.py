"""
ResourceFetcher module: one HTTP GET per page of a Satellite collection
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from .http_client import HTTPClient, APIRequest
from .page_cursor import PageCursor
from .payload_validator import PayloadValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SortOrder:
    """The envelope's sort block"""
    by: Optional[str] = None
    order: Optional[str] = None


@dataclass
class PageEnvelope:
    """
    One decoded page of a collection

    ``page`` keeps the wire shape (int, float or str) so the pagination
    strategy can normalise it; the other counters default to 0 when absent.
    """
    total: int
    subtotal: int
    page: PageCursor
    per_page: int
    results: List[Dict[str, Any]] = field(default_factory=list)
    search: Optional[str] = None
    sort: SortOrder = field(default_factory=SortOrder)
    error: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PageEnvelope':
        sort = data.get('sort') or {}
        if not isinstance(sort, dict):
            sort = {}
        return cls(
            total=data.get('total') or 0,
            subtotal=data.get('subtotal') or 0,
            page=data.get('page'),
            per_page=data.get('per_page') or 0,
            results=list(data['results']),
            search=data.get('search'),
            sort=SortOrder(by=sort.get('by'), order=sort.get('order')),
            error=data.get('error')
        )


class ResourceFetcher:
    """
    Fetches single pages of a collection endpoint

    No retries happen here; the HTTPClient owns the retry policy.
    """

    def __init__(self, http_client: HTTPClient, payload_validator: Optional[PayloadValidator] = None):
        self.http_client = http_client
        self.payload_validator = payload_validator or PayloadValidator()

    def fetch(self, endpoint: str, path_parameters: Optional[Dict[str, Any]] = None,
              query_parameters: Optional[Dict[str, Any]] = None, page: int = 1,
              headers: Optional[Dict[str, str]] = None) -> PageEnvelope:
        """
        Fetch and decode one page of a collection

        Args:
            endpoint: Path template, e.g. '/api/hosts/{id}/packages'
            path_parameters: Values for the template placeholders
            query_parameters: Extra query parameters (search, thin, per_page, ...)
            page: One-indexed page number, sent as the 'page' query parameter
            headers: Per-request headers

        Returns:
            PageEnvelope for the requested page

        Raises:
            TransportError: Network or connection failure
            HTTPError: Non-2xx response
            DecodeError: Body is not a valid page envelope
        """
        request = APIRequest(
            path=endpoint,
            path_parameters=dict(path_parameters or {}),
            parameters={**(query_parameters or {}), 'page': str(page)},
            headers=dict(headers or {})
        )
        response = self.http_client.get(request)
        data = self.payload_validator.decode_envelope(response)
        envelope = PageEnvelope.from_dict(data)

        logger.debug(
            f"request successful: url={response.url} total={envelope.total} "
            f"subtotal={envelope.subtotal} page={envelope.page!r} per_page={envelope.per_page}"
        )
        return envelope

    def fetch_one(self, endpoint: str, path_parameters: Optional[Dict[str, Any]] = None,
                  query_parameters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Fetch a single (non-paginated) resource object

        Raises:
            TransportError, HTTPError, DecodeError: As for fetch()
        """
        request = APIRequest(
            path=endpoint,
            path_parameters=dict(path_parameters or {}),
            parameters=dict(query_parameters or {})
        )
        response = self.http_client.get(request)
        data = self.payload_validator.decode_object(response)
        logger.debug(f"request successful: url={response.url} resource={json.dumps(data)[:200]}")
        return data
