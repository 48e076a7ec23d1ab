"""
StreamingSink module turning raw records into typed, host-scoped records one at a time
"""

from dataclasses import dataclass, asdict, is_dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from .errors import SatelliteAdapterError, DecodeError

RecordT = TypeVar('RecordT')


@dataclass(frozen=True)
class JoinContext:
    """Parent host fields attached to package and errata records"""
    host_id: int
    host_name: str = ""


@dataclass(frozen=True)
class HostScopedRecord(Generic[RecordT]):
    """A child record together with the id and name of the host it was listed for"""
    host_id: int
    host_name: str
    record: RecordT

    def __getattr__(self, name: str) -> Any:
        # only reached for attributes the wrapper itself does not define
        if name == 'record':
            raise AttributeError(name)
        return getattr(self.record, name)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten child fields and join fields into one mapping"""
        if hasattr(self.record, 'to_dict'):
            data = self.record.to_dict()
        elif is_dataclass(self.record):
            data = asdict(self.record)
        else:
            data = dict(self.record)
        data['host_id'] = self.host_id
        data['host_name'] = self.host_name
        return data


class StreamingSink:
    """
    Emits records downstream in the order they are received

    Each raw record is decoded with ``record_factory`` and, when a join
    context is set, wrapped into a HostScopedRecord. Records are never
    mutated or buffered.
    """

    def __init__(self, record_factory: Optional[Callable[[Dict[str, Any]], Any]] = None,
                 join_context: Optional[JoinContext] = None):
        self.record_factory = record_factory
        self.join_context = join_context
        self.emitted = 0

    def emit(self, record: Dict[str, Any]) -> Any:
        """
        Decode one record and attach the join context

        Args:
            record: Raw record from a page envelope

        Returns:
            The typed record, wrapped in a HostScopedRecord if a join context is set

        Raises:
            DecodeError: If a field of the record cannot be decoded
        """
        try:
            item = self.record_factory(record) if self.record_factory else record
        except SatelliteAdapterError:
            raise
        except (TypeError, ValueError) as e:
            raise DecodeError(f"cannot decode record {record.get('id')!r}: {e}") from e
        if self.join_context is not None:
            item = HostScopedRecord(
                host_id=self.join_context.host_id,
                host_name=self.join_context.host_name,
                record=item
            )
        self.emitted += 1
        return item
