"""
Exception taxonomy shared by the transport, fetcher and listing components
"""

from typing import Optional


class SatelliteAdapterError(Exception):
    """Base exception for all Satellite adapter errors"""
    pass


class TransportError(SatelliteAdapterError):
    """Raised when a request cannot reach the API (connection, DNS, timeout)"""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class HTTPError(SatelliteAdapterError):
    """Raised when the API answers with a non-2xx status code"""

    def __init__(self, status_code: int, body: str, url: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"request {url!r} failed with status {status_code}")


class DecodeError(SatelliteAdapterError):
    """Raised when a response body is not the expected JSON envelope"""
    pass
