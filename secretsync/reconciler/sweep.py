import asyncio
import logging
from secretsync.cache import WatchCache
from secretsync.reconciler.router import EventRouter
from secretsync.utils.errors import CacheSyncTimeout

logger = logging.getLogger(__name__)

BOOTSTRAP = "bootstrap"
RESYNC = "resync"


class BootstrapSweep:
    """Level-triggered full passes independent of any single event.

    Runs one pass as soon as the watch cache is synced, then one every
    ``resync_interval`` seconds, so that events lost to restarts or dropped
    watches are corrected without being replayed.
    """

    def __init__(
        self,
        cache: WatchCache,
        router: EventRouter,
        resync_interval: float = 0,
        sync_timeout: float = 60,
    ):
        self.cache = cache
        self.router = router
        self.resync_interval = resync_interval
        self.sync_timeout = sync_timeout

    async def run(self, stopped: asyncio.Event) -> None:
        logger.info(f"Waiting up to {self.sync_timeout:.0f}s for the watch cache to sync")
        if not await self.cache.wait_for_sync(self.sync_timeout, stopped=stopped):
            if stopped.is_set():
                return
            raise CacheSyncTimeout(self.sync_timeout)

        self.router.mark_synced()
        self.router.request_pass(BOOTSTRAP)

        if self.resync_interval <= 0:
            logger.info("Periodic resync disabled")
            return

        while not stopped.is_set():
            try:
                await asyncio.wait_for(stopped.wait(), timeout=self.resync_interval)
            except asyncio.TimeoutError:
                self.router.request_pass(RESYNC)
