"""
SatelliteClient module: the entry point for listing Satellite resources

Wires the transport, fetcher, resolver and pagination driver together and
exposes one lazy iterator per collection.
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterator, Optional

from .config_loader import ConfigLoader, ConfigurationError, SatelliteConfig
from .errors import DecodeError
from .http_client import HTTPClient
from .models import Host, HostPackage, HostErrata
from .name_resolver import HostNameResolver, ResolutionPolicy
from .nvra_parser import parse_nvra, PackageIdentifier
from .pagination_driver import PaginationDriver
from .resource_fetcher import ResourceFetcher
from .streaming_sink import StreamingSink, JoinContext


class SatelliteClient:
    """
    High-level client for Satellite host, package and errata listings

    Every listing method returns a forward-only iterator; consuming it drives
    the page fetches. Listings may run concurrently from several threads, they
    only share the HTTPClient.
    """

    HOSTS_ENDPOINT = '/api/hosts'
    HOST_ENDPOINT = '/api/hosts/{id}'
    HOST_PACKAGES_ENDPOINT = '/api/hosts/{id}/packages'
    HOST_ERRATA_ENDPOINT = '/api/hosts/{id}/errata'

    # sent on host-scoped listings
    HOST_SCOPED_HEADERS = {'Accept-Encoding': 'gzip'}

    def __init__(self, http_client: HTTPClient, fetcher: Optional[ResourceFetcher] = None,
                 resolver: Optional[HostNameResolver] = None, per_page: Optional[int] = None):
        """
        Initialise SatelliteClient with dependency injection

        Args:
            http_client: Shared transport; the caller owns its lifecycle unless using the context manager
            fetcher: Page fetcher (built on http_client by default)
            resolver: Host name resolver (built on the fetcher by default)
            per_page: Optional page size requested from the API
        """
        self.http_client = http_client
        self.fetcher = fetcher or ResourceFetcher(http_client)
        self.resolver = resolver or HostNameResolver(self.fetcher)
        self.per_page = per_page
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: SatelliteConfig) -> 'SatelliteClient':
        """
        Build a client from a loaded SatelliteConfig

        Raises:
            ConfigurationError: If credentials are missing or the resolution policy is unknown
            EnvironmentVariableError: If a referenced credential variable is unset
        """
        credentials = ConfigLoader.resolve_credentials(config)
        http_client = HTTPClient.from_config(config, credentials)
        fetcher = ResourceFetcher(http_client)

        policy_name = config.resolution.get('policy', ResolutionPolicy.FIRST.value)
        try:
            policy = ResolutionPolicy(policy_name)
        except ValueError:
            raise ConfigurationError(f"Unsupported resolution policy: {policy_name}") from None

        return cls(
            http_client=http_client,
            fetcher=fetcher,
            resolver=HostNameResolver(fetcher, policy=policy),
            per_page=config.per_page
        )

    def __enter__(self) -> 'SatelliteClient':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        """Release the transport's connections"""
        self.http_client.close_connection()

    def create_driver(self, endpoint: str, path_parameters: Optional[Dict[str, Any]] = None,
                      query_parameters: Optional[Dict[str, Any]] = None,
                      join_context: Optional[JoinContext] = None,
                      record_factory: Optional[Callable[[Dict[str, Any]], Any]] = None,
                      headers: Optional[Dict[str, str]] = None,
                      cancel_event: Optional[threading.Event] = None) -> PaginationDriver:
        """
        Build a PaginationDriver for one collection endpoint

        Args:
            endpoint: Path template of the collection, e.g. '/api/hosts/{id}/errata'
            path_parameters: Values for the template placeholders
            query_parameters: Extra query parameters
            join_context: Parent host attached to every record
            record_factory: Decoder from raw dict to typed record
            headers: Per-request headers
            cancel_event: Cooperative cancellation signal

        Returns:
            A fresh, single-use PaginationDriver
        """
        query = dict(query_parameters or {})
        if self.per_page is not None:
            query.setdefault('per_page', str(self.per_page))
        path_parameters = dict(path_parameters or {})

        def fetch_page(page: int):
            return self.fetcher.fetch(endpoint, path_parameters, query, page=page, headers=headers)

        return PaginationDriver(
            fetch_page,
            sink=StreamingSink(record_factory=record_factory, join_context=join_context),
            cancel_event=cancel_event
        )

    def list_collection(self, endpoint: str, path_parameters: Optional[Dict[str, Any]] = None,
                        query_parameters: Optional[Dict[str, Any]] = None,
                        join_context: Optional[JoinContext] = None,
                        record_factory: Optional[Callable[[Dict[str, Any]], Any]] = None,
                        headers: Optional[Dict[str, str]] = None,
                        cancel_event: Optional[threading.Event] = None) -> Iterator[Any]:
        """
        List every record of a collection as a lazy iterator

        See create_driver() for the arguments.

        Raises (while iterating):
            TransportError, HTTPError, DecodeError, UnsupportedCursorType
        """
        return iter(self.create_driver(
            endpoint, path_parameters, query_parameters, join_context,
            record_factory, headers, cancel_event
        ))

    def list_hosts(self, search: Optional[str] = None, thin: bool = True,
                   cancel_event: Optional[threading.Event] = None) -> Iterator[Host]:
        """
        List hosts, optionally filtered with a Satellite search expression

        Args:
            search: Satellite search query, e.g. 'os = RedHat'
            thin: Ask for the thin host representation (id and name only)
            cancel_event: Cooperative cancellation signal

        Returns:
            Iterator of Host records
        """
        self.logger.debug("retrieving satellite host list")
        query = {}
        if thin:
            query['thin'] = 'true'
        if search:
            query['search'] = search
        return self.list_collection(
            self.HOSTS_ENDPOINT,
            query_parameters=query,
            record_factory=Host.from_dict,
            cancel_event=cancel_event
        )

    def get_host(self, id_or_name: Any) -> Host:
        """
        Retrieve a single host by numeric id or by name

        Raises:
            TransportError, HTTPError: Request failures (404 surfaces as HTTPError)
            DecodeError: If the body or one of its fields cannot be decoded
        """
        self.logger.debug(f"retrieving satellite host {id_or_name}")
        data = self.fetcher.fetch_one(self.HOST_ENDPOINT, {'id': id_or_name})
        try:
            return Host.from_dict(data)
        except ValueError as e:
            raise DecodeError(f"cannot decode host {id_or_name!r}: {e}") from e

    def resolve_name(self, name: str) -> int:
        """Resolve a host name to its numeric id (see HostNameResolver.resolve)"""
        return self.resolver.resolve(name)

    @staticmethod
    def parse_identifier(compound: str) -> PackageIdentifier:
        """Split an NVRA package identifier (see nvra_parser.parse_nvra)"""
        return parse_nvra(compound)

    def list_host_packages(self, host_id: Optional[int] = None, host_name: Optional[str] = None,
                           cancel_event: Optional[threading.Event] = None) -> Iterator[Any]:
        """
        List installed packages, for one host or for every host

        With neither host_id nor host_name, the packages of all hosts are listed
        host after host.

        Returns:
            Iterator of HostScopedRecord[HostPackage]

        Raises:
            NotFound, AmbiguousName: If host_name cannot be resolved
        """
        if host_id or host_name:
            scope = self._resolve_scope(host_id, host_name)
            self.logger.debug(f"running query against single host {scope.host_id} ({scope.host_name})")
            return self._list_host_scoped(self.HOST_PACKAGES_ENDPOINT, scope, HostPackage.from_dict, cancel_event)

        return self._list_across_hosts(self.HOST_PACKAGES_ENDPOINT, HostPackage.from_dict, cancel_event)

    def list_host_errata(self, host_id: Optional[int] = None, host_name: Optional[str] = None,
                         cancel_event: Optional[threading.Event] = None) -> Iterator[Any]:
        """
        List errata applicable to one host

        Returns:
            Iterator of HostScopedRecord[HostErrata]

        Raises:
            ValueError: If neither host_id nor host_name is given
            NotFound, AmbiguousName: If host_name cannot be resolved
        """
        if not host_id and not host_name:
            self.logger.error("no valid host id or name provided")
            raise ValueError("no valid host id or name provided")

        scope = self._resolve_scope(host_id, host_name)
        self.logger.debug(f"retrieving satellite errata list for host {scope.host_id}")
        return self._list_host_scoped(self.HOST_ERRATA_ENDPOINT, scope, HostErrata.from_dict, cancel_event)

    def _resolve_scope(self, host_id: Optional[int], host_name: Optional[str]) -> JoinContext:
        if host_id:
            return JoinContext(host_id=int(host_id), host_name=host_name or "")
        return JoinContext(host_id=self.resolve_name(host_name), host_name=host_name)

    def _list_host_scoped(self, endpoint: str, scope: JoinContext,
                          record_factory: Callable[[Dict[str, Any]], Any],
                          cancel_event: Optional[threading.Event]) -> Iterator[Any]:
        return self.list_collection(
            endpoint,
            path_parameters={'id': scope.host_id},
            join_context=scope,
            record_factory=record_factory,
            headers=self.HOST_SCOPED_HEADERS,
            cancel_event=cancel_event
        )

    def _list_across_hosts(self, endpoint: str, record_factory: Callable[[Dict[str, Any]], Any],
                           cancel_event: Optional[threading.Event]) -> Iterator[Any]:
        # the host list is taken in full before the first child listing starts
        hosts = [JoinContext(host.id, host.name) for host in self.list_hosts(cancel_event=cancel_event)]
        self.logger.debug(f"retrieving records from {len(hosts)} hosts")
        for scope in hosts:
            if cancel_event is not None and cancel_event.is_set():
                self.logger.debug("context done, exit")
                return
            self.logger.debug(f"running query against host {scope.host_id} ({scope.host_name})")
            yield from self._list_host_scoped(endpoint, scope, record_factory, cancel_event)
