"""
Resolves host names to numeric host ids before host-scoped listings
"""

import logging
from enum import Enum
from typing import Any, Dict, List

from .errors import SatelliteAdapterError, DecodeError
from .resource_fetcher import ResourceFetcher
from .timestamps import coerce_int_field

logger = logging.getLogger(__name__)


class NotFound(SatelliteAdapterError):
    """Raised when no resource matches the requested name"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"no host found with name {name!r}")


class AmbiguousName(SatelliteAdapterError):
    """Raised under the strict policy when several resources match the name"""

    def __init__(self, name: str, candidate_ids: List[int]):
        self.name = name
        self.candidate_ids = candidate_ids
        super().__init__(f"host name {name!r} matches {len(candidate_ids)} hosts: {candidate_ids}")


class ResolutionPolicy(Enum):
    """How to pick among several matches of a name"""
    # first match in the server-side search order
    FIRST = 'first'
    # more than one match is an error
    STRICT = 'strict'


class HostNameResolver:
    """
    Looks up a host id by name with a server-side search

    The search is ``name = "<name>"`` on /api/hosts, which Satellite treats as
    an exact match. Under ResolutionPolicy.FIRST the first result of the
    server's ordering is used when several hosts match.
    """

    ENDPOINT = '/api/hosts'

    def __init__(self, fetcher: ResourceFetcher, policy: ResolutionPolicy = ResolutionPolicy.FIRST):
        self.fetcher = fetcher
        self.policy = policy

    def resolve(self, name: str) -> int:
        """
        Resolve a host name to its numeric id

        Args:
            name: Host name (usually the FQDN)

        Returns:
            Numeric host id

        Raises:
            ValueError: If name is empty
            NotFound: If no host matches
            AmbiguousName: If several hosts match and the policy is STRICT
            TransportError, HTTPError, DecodeError: Lookup request failures
        """
        if not name:
            raise ValueError("host name must not be empty")

        logger.debug(f"resolving host by name: {name}")
        escaped = name.replace('\\', '\\\\').replace('"', '\\"')
        envelope = self.fetcher.fetch(
            self.ENDPOINT,
            query_parameters={'search': f'name = "{escaped}"', 'thin': 'true'},
            page=1
        )

        candidate_ids = [self._candidate_id(name, record) for record in envelope.results]
        if not candidate_ids:
            logger.error(f"error resolving host by name: {name}")
            raise NotFound(name)

        if len(candidate_ids) > 1:
            if self.policy is ResolutionPolicy.STRICT:
                raise AmbiguousName(name, candidate_ids)
            logger.warning(
                f"host name {name!r} matches {len(candidate_ids)} hosts, using first match {candidate_ids[0]}"
            )

        logger.debug(f"resolved host {name} to id {candidate_ids[0]}")
        return candidate_ids[0]

    @staticmethod
    def _candidate_id(name: str, record: Dict[str, Any]) -> int:
        value = record.get('id')
        if value is None or value == "":
            raise DecodeError(f"host search result for {name!r} carries no id: {record!r}")
        try:
            return coerce_int_field(value)
        except ValueError as e:
            raise DecodeError(f"host search result for {name!r} has an invalid id: {e}") from e
