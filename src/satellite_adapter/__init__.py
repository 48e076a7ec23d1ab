"""
Red Hat Satellite API adapter package
Streams hosts, installed packages and applicable errata from the Satellite v2 API as lazy record sequences
"""

from .errors import SatelliteAdapterError, TransportError, HTTPError, DecodeError
from .config_loader import ConfigLoader, ConfigurationError, EnvironmentVariableError, SatelliteConfig
from .http_client import HTTPClient, APIRequest, APIResponse
from .payload_validator import PayloadValidator
from .page_cursor import PageCursor, UnsupportedCursorType, normalize_page_cursor
from .resource_fetcher import ResourceFetcher, PageEnvelope, SortOrder
from .pagination_strategy import PaginationStrategy, PageTotalPagination
from .pagination_driver import PaginationDriver, ListingState
from .streaming_sink import StreamingSink, JoinContext, HostScopedRecord
from .name_resolver import HostNameResolver, ResolutionPolicy, NotFound, AmbiguousName
from .nvra_parser import parse_nvra, PackageIdentifier, MalformedIdentifier
from .models import Host, HostPackage, HostErrata, ErrataReference
from .satellite_client import SatelliteClient

__all__ = [
    'SatelliteAdapterError',
    'TransportError',
    'HTTPError',
    'DecodeError',
    'ConfigLoader',
    'ConfigurationError',
    'EnvironmentVariableError',
    'SatelliteConfig',
    'HTTPClient',
    'APIRequest',
    'APIResponse',
    'PayloadValidator',
    'PageCursor',
    'UnsupportedCursorType',
    'normalize_page_cursor',
    'ResourceFetcher',
    'PageEnvelope',
    'SortOrder',
    'PaginationStrategy',
    'PageTotalPagination',
    'PaginationDriver',
    'ListingState',
    'StreamingSink',
    'JoinContext',
    'HostScopedRecord',
    'HostNameResolver',
    'ResolutionPolicy',
    'NotFound',
    'AmbiguousName',
    'parse_nvra',
    'PackageIdentifier',
    'MalformedIdentifier',
    'Host',
    'HostPackage',
    'HostErrata',
    'ErrataReference',
    'SatelliteClient'
]
