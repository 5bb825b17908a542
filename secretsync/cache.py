"""Read side of the watch cache.

kopf keeps two in-memory indices up to date from the cluster's list/watch
streams: secrets of the source namespace and all namespaces. kopf only hands
indices to resource handlers once every index has been populated from its
initial listing, so the first handler call that attaches them is the
"synced" signal.
"""
import asyncio
import logging
import time
from typing import Any, Iterable, List, Mapping, Optional
from secretsync.types.models import CredentialObject, Partition

logger = logging.getLogger(__name__)

#: kopf.Index is a mapping of index keys to stores (iterables of values)
IndexT = Mapping[Any, Iterable[Any]]


def _flatten(index: IndexT) -> List[Any]:
    return [value for store in index.values() for value in store]


class WatchCache:
    """Eventually consistent snapshot reads of credential objects and partitions."""

    def __init__(self) -> None:
        self._credentials: IndexT = {}
        self._partitions: IndexT = {}
        self._synced = asyncio.Event()
        self._created_at = time.monotonic()
        self.sync_wait_time: Optional[float] = None

    @property
    def synced(self) -> bool:
        return self._synced.is_set()

    def attach(self, credentials: IndexT, partitions: IndexT) -> bool:
        """Attach the populated indices.

        Returns True the first time, i.e. on the transition to synced.
        """
        self._credentials = credentials
        self._partitions = partitions
        if self.synced:
            return False
        self.sync_wait_time = time.monotonic() - self._created_at
        self._synced.set()
        logger.info(
            f"Watch cache synced after {self.sync_wait_time:.2f}s: "
            f"{len(self._credentials)} secrets, {len(self._partitions)} namespaces"
        )
        return True

    def list_candidate_objects(self) -> List[CredentialObject]:
        """Snapshot of the secrets observed in the source namespace."""
        return _flatten(self._credentials)

    def list_partitions(self) -> List[Partition]:
        """Snapshot of all observed namespaces."""
        return _flatten(self._partitions)

    async def wait_for_sync(
        self, timeout: float, stopped: Optional[asyncio.Event] = None
    ) -> bool:
        """Wait for the initial listing.

        Returns False if ``timeout`` elapsed or ``stopped`` fired first.
        """
        if self.synced:
            return True
        waiters = {asyncio.ensure_future(self._synced.wait())}
        if stopped is not None:
            waiters.add(asyncio.ensure_future(stopped.wait()))
        try:
            await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()
        return self.synced
