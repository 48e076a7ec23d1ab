"""
HTTPClient module for handling Satellite API requests with basic authentication and retry logic
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional
from urllib.parse import quote

import requests
import requests_cache

from .errors import TransportError, HTTPError

logger = logging.getLogger(__name__)


@dataclass
class APIRequest:
    """Represents a single API request against a path template such as /api/hosts/{id}"""
    path: str
    path_parameters: Dict[str, Any] = field(default_factory=dict)
    parameters: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    method: str = "GET"

    def render_path(self) -> str:
        """Substitute {name} placeholders with URL-escaped path parameter values"""
        path = self.path
        for name, value in self.path_parameters.items():
            path = path.replace(f"{{{name}}}", quote(str(value), safe=''))
        return path


@dataclass
class APIResponse:
    """Raw API response; decoding is left to the caller"""
    text: str
    status_code: int
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    request_timestamp: datetime = field(default_factory=datetime.now)


class HTTPClient:
    """
    HTTP client shared by all listing operations of one connection

    Holds the base URL, default headers, basic-auth credentials and the
    organisation/location query parameters. The underlying session is created
    lazily and may be used by several listings concurrently.
    """

    DEFAULT_HEADERS = {
        'Accept': 'application/json,version=2',
        'Content-Type': 'application/json',
    }

    # HTTP status codes that should trigger retries
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

    def __init__(self, base_url: str, max_retries: int = 0, backoff_factor: float = 2.0,
                 requests_per_second: float = 0.0, timeout: float = 30.0,
                 verify_tls: bool = True, default_parameters: Optional[Dict[str, str]] = None,
                 cache_settings: Optional[Dict[str, Any]] = None):
        if not base_url:
            raise ValueError("no API endpoint available")
        self.base_url = base_url.rstrip('/')
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.requests_per_second = requests_per_second
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.default_parameters: Dict[str, str] = dict(default_parameters or {})
        self.cache_settings: Dict[str, Any] = dict(cache_settings or {})
        self.headers: Dict[str, str] = dict(self.DEFAULT_HEADERS)
        self.auth: Optional[tuple] = None
        self.session: Optional[requests.Session] = None
        self.last_request_time: Optional[float] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config, credentials: Dict[str, str]) -> 'HTTPClient':
        """
        Build an authenticated client from a SatelliteConfig

        Args:
            config: SatelliteConfig with api, rate limit, retry and cache settings
            credentials: Resolved 'username' and 'password'

        Returns:
            HTTPClient ready for use
        """
        client = cls(
            base_url=config.base_url,
            max_retries=int(config.retries.get('max_attempts', 0)),
            backoff_factor=float(config.retries.get('backoff_factor', 2.0)),
            requests_per_second=float(config.rate_limits.get('requests_per_second', 0.0)),
            timeout=config.timeout_seconds,
            verify_tls=config.verify_tls,
            default_parameters=config.default_query_parameters,
            cache_settings=config.cache
        )
        client.authenticate({'type': 'basic', **credentials})
        return client

    def authenticate(self, credentials: Dict[str, Any]) -> None:
        """
        Configure basic authentication

        Args:
            credentials: Dictionary with 'type', 'username' and 'password'

        Raises:
            ValueError: If authentication type is not supported or credentials are incomplete
        """
        auth_type = credentials.get('type')

        if auth_type != 'basic':
            raise ValueError(f"Unsupported authentication type: {auth_type}")

        if not credentials.get('username') or not credentials.get('password'):
            raise ValueError("no authentication info available")

        self.auth = (credentials['username'], credentials['password'])
        if self.session is not None:
            self.session.auth = self.auth

    def get(self, request: APIRequest) -> APIResponse:
        """
        Perform a GET request, retrying transient failures with exponential backoff

        Args:
            request: APIRequest with path template, path and query parameters

        Returns:
            APIResponse with the raw body of a 2xx answer

        Raises:
            TransportError: If the API cannot be reached after all retry attempts
            HTTPError: For non-2xx answers (after retries for retryable status codes)
        """
        session = self._get_session()
        url = f"{self.base_url}{request.render_path()}"
        parameters = {**self.default_parameters, **request.parameters}

        retry_count = 0
        while True:
            self.apply_rate_limit()
            request_timestamp = datetime.now()
            logger.debug(f"GET {url} params={parameters}")

            try:
                response = session.get(
                    url,
                    params=parameters,
                    headers=request.headers,
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                if retry_count < self.max_retries:
                    retry_count += 1
                    self._backoff(retry_count)
                    continue
                logger.error(f"Error performing request {url}: {e}")
                raise TransportError(f"request {url!r} failed: {e}", url=url) from e

            if 200 <= response.status_code < 300:
                return APIResponse(
                    text=response.text,
                    status_code=response.status_code,
                    url=url,
                    headers=dict(response.headers),
                    request_timestamp=request_timestamp
                )

            if response.status_code in self.RETRYABLE_STATUS_CODES and retry_count < self.max_retries:
                retry_count += 1
                logger.warning(f"Retryable status {response.status_code} from {url}, attempt {retry_count}")
                self._backoff(retry_count)
                continue

            logger.error(f"Error performing request {url}: status {response.status_code}, response {response.text}")
            raise HTTPError(response.status_code, response.text, url=url)

    def apply_rate_limit(self) -> None:
        """
        Apply rate limiting delay to respect API quotas

        Each caller reserves the next free request slot under the lock and
        sleeps outside it, so concurrent listings sharing this client queue
        up 1 / requests_per_second apart.
        """
        if not self.requests_per_second:
            return

        min_delay = 1.0 / self.requests_per_second
        with self._lock:
            now = time.time()
            if self.last_request_time is None:
                wait = 0.0
            else:
                wait = max(0.0, self.last_request_time + min_delay - now)
            self.last_request_time = now + wait

        if wait > 0:
            time.sleep(wait)

    def _backoff(self, retry_count: int) -> None:
        # 1 second base delay: 1, factor, factor^2, ...
        time.sleep(1.0 * (self.backoff_factor ** (retry_count - 1)))

    def _get_session(self) -> requests.Session:
        with self._lock:
            if self.session is None:
                self.session = self._create_session()
            return self.session

    def _create_session(self) -> requests.Session:
        if self.cache_settings.get('enabled', False):
            cache_name = self.cache_settings.get('cache_name', 'satellite_cache')
            expire_after = self.cache_settings.get('expiration_seconds', 300)
            logger.info(f"Request caching enabled with expiration of {expire_after} seconds")
            session = requests_cache.CachedSession(cache_name, expire_after=expire_after)
        else:
            session = requests.Session()
        session.headers.update(self.headers)
        session.auth = self.auth
        session.verify = self.verify_tls
        return session

    def close_connection(self) -> None:
        """
        Close HTTP session and release resources
        """
        with self._lock:
            if self.session:
                self.session.close()
                self.session = None
