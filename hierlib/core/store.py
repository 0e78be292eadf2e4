"""Node storage for HierLib engines.

The NodeStore is the single relation an engine persists: a mapping from node
identity to node record. It replaces ambient global state with an explicit
object that has a lifecycle (open, close) and transactional boundaries for
composite operations.
"""

import logging
import threading
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Dict, Hashable, Iterator, Mapping, Optional, Tuple

from ..errors import StoreClosedError

logger = logging.getLogger(__name__)


class NodeStore:
    """In-memory key/value store of tree nodes.

    This class encapsulates all storage operations including:
    - Get/put/delete keyed by node identity
    - Lifecycle management (open/close, context manager)
    - Transactions with rollback on error
    - Consistent read snapshots
    - Access statistics

    All access is serialized through a re-entrant lock. A transaction copies
    the records on entry and restores the copy if the block raises, so a
    failed remove or move never leaves a half-applied state behind. Nested
    transactions join the outermost one.
    """

    def __init__(self, records: Optional[Mapping[Hashable, Any]] = None):
        """Create an open store.

        Args:
            records: Optional initial records, copied into the store
        """
        self._records: Dict[Hashable, Any] = dict(records or {})
        self._lock = threading.RLock()
        self._closed = False
        self._tx_depth = 0
        self.reads = 0
        self.writes = 0

    # Lifecycle

    def open(self) -> "NodeStore":
        """Reopen a closed store. Records survive close/open cycles."""
        self._closed = False
        return self

    def close(self) -> None:
        """Close the store. Further access raises StoreClosedError."""
        with self._lock:
            if self._tx_depth:
                raise StoreClosedError("Cannot close store inside a transaction")
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "NodeStore":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError("Store is closed")

    # Record access

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the record stored under key, or None."""
        with self._lock:
            self._check_open()
            self.reads += 1
            return self._records.get(key)

    def put(self, key: Hashable, record: Any) -> None:
        """Store record under key, replacing any existing record."""
        with self._lock:
            self._check_open()
            self.writes += 1
            self._records[key] = record

    def delete(self, key: Hashable) -> Optional[Any]:
        """Remove and return the record stored under key (None if absent)."""
        with self._lock:
            self._check_open()
            self.writes += 1
            return self._records.pop(key, None)

    # Reads take the lock too, so they wait for an open transaction to finish.

    def __contains__(self, key: object) -> bool:
        with self._lock:
            self._check_open()
            return key in self._records

    def __len__(self) -> int:
        with self._lock:
            self._check_open()
            return len(self._records)

    def __iter__(self) -> Iterator[Hashable]:
        return self.keys()

    def keys(self) -> Iterator[Hashable]:
        with self._lock:
            self._check_open()
            return iter(list(self._records))

    def values(self) -> Iterator[Any]:
        with self._lock:
            self._check_open()
            return iter(list(self._records.values()))

    def items(self) -> Iterator[Tuple[Hashable, Any]]:
        with self._lock:
            self._check_open()
            return iter(list(self._records.items()))

    # Consistency

    @contextmanager
    def transaction(self) -> Iterator["NodeStore"]:
        """Run a block of writes atomically.

        Yields:
            The store itself

        Raises:
            Whatever the block raised, after the records were restored
        """
        with self._lock:
            self._check_open()
            if self._tx_depth:
                # Join the enclosing transaction
                self._tx_depth += 1
                try:
                    yield self
                finally:
                    self._tx_depth -= 1
                return

            backup = dict(self._records)
            self._tx_depth = 1
            try:
                yield self
            except BaseException:
                logger.debug("Rolling back transaction (%d records restored)", len(backup))
                self._records = backup
                raise
            finally:
                self._tx_depth = 0

    @contextmanager
    def snapshot(self) -> Iterator[Mapping[Hashable, Any]]:
        """Hold the store lock and yield a read-only view of the records.

        Writers in other threads are excluded for the duration of the block,
        so multi-read queries see one consistent state.
        """
        with self._lock:
            self._check_open()
            self.reads += 1
            yield MappingProxyType(self._records)

    def stats(self) -> Dict[str, Any]:
        """Return access statistics for debugging and tests."""
        return {
            'records': len(self._records),
            'reads': self.reads,
            'writes': self.writes,
            'closed': self._closed,
        }

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"NodeStore({len(self._records)} records, {state})"
