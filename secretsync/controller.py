"""Composition of the reconciliation core.

One pass lists the watch cache, filters candidates and targets, computes the
desired replicas and converges them. Passes are run by the router's single
worker, requested either by notifications or by the bootstrap sweep.
"""
import asyncio
import logging
from logging import Logger
from typing import Any, Dict, Mapping, Optional
from kubernetes_asyncio.client import CoreV1Api
from secretsync.cache import WatchCache
from secretsync.reconciler import (
    BootstrapSweep,
    ConvergenceEngine,
    ConvergenceReport,
    EventRouter,
    RelevanceFilter,
    compute_desired,
    notification_from_event,
)
from secretsync.sensors.base import OperatorSensor
from secretsync.types.settings import Settings
from secretsync.utils.errors import CacheSyncTimeout, MalformedObjectError

logger = logging.getLogger(__name__)


class Controller:
    """Secret replication controller."""

    settings: Settings
    cache: WatchCache
    filter: RelevanceFilter
    engine: ConvergenceEngine
    router: EventRouter
    sweep: BootstrapSweep

    last_report: Optional[ConvergenceReport] = None
    failure: Optional[Exception] = None

    def __init__(
        self,
        settings: Settings,
        core_v1_api: CoreV1Api,
        cache: WatchCache = None,
        sensor: OperatorSensor = None,
    ):
        self.settings = settings
        self.sensor = sensor
        self.cache = cache or WatchCache()
        self.filter = RelevanceFilter.from_settings(settings)
        self.engine = ConvergenceEngine(
            core_v1_api,
            max_concurrency=settings.max_concurrent_writes,
            sensor=sensor,
        )
        self.router = EventRouter(self.reconcile, sensor=sensor)
        self.sweep = BootstrapSweep(
            self.cache,
            self.router,
            resync_interval=settings.resync_interval_seconds,
            sync_timeout=settings.cache_sync_timeout_seconds,
        )
        self._stopped = asyncio.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    async def reconcile(self, trigger: str = "manual") -> ConvergenceReport:
        """Run one full pass against the current cache snapshot."""
        sensor_state = None
        if self.sensor:
            sensor_state = self.sensor.on_pass_start(trigger)
        try:
            candidates = self.filter.candidates(self.cache.list_candidate_objects())
            targets = self.filter.targets(self.cache.list_partitions())
            desired = compute_desired(candidates, targets)
            logger.debug(
                f"Pass ({trigger}): {len(candidates)} candidates x "
                f"{len(targets)} targets = {len(desired)} replicas"
            )
            report = await self.engine.converge(desired)
        except Exception as e:
            if self.sensor:
                self.sensor.on_pass_complete(trigger, sensor_state, None, e)
            raise

        self.last_report = report
        if self.sensor:
            self.sensor.on_pass_complete(trigger, sensor_state, report.summary(), None)

        summary = report.summary()
        message = (
            f"Pass ({trigger}) completed in {report.duration:.2f} seconds: "
            + ", ".join(f"{k}={v}" for k, v in summary.items())
        )
        if report.succeeded:
            logger.info(message)
        else:
            logger.warning(message)
        return report

    async def handle_event(
        self,
        kind: str,
        event_type: Optional[str],
        body: Mapping[str, Any],
        logger: Logger = logger,
    ) -> bool:
        """Route a raw watch event. Returns True if a pass was requested."""
        try:
            notification = notification_from_event(kind, event_type, body)
        except MalformedObjectError as e:
            logger.error(f"Skipping event: {e}")
            if self.sensor:
                self.sensor.on_event_skipped(kind, "malformed")
            return False
        return await self.router.route(notification)

    def attach_cache(self, credentials, partitions) -> None:
        if self.cache.attach(credentials, partitions) and self.sensor:
            self.sensor.on_cache_synced(self.cache.sync_wait_time or 0.0)

    async def run(self) -> None:
        """Run the worker and the sweep until :meth:`stop` is called.

        Raises:
            CacheSyncTimeout: the watch cache never synced; nothing was reconciled.
        """
        router_task = asyncio.create_task(self.router.run(self._stopped))
        try:
            await self.sweep.run(self._stopped)
            await router_task
        except CacheSyncTimeout as e:
            self.failure = e
            logger.critical(str(e))
            raise
        finally:
            self._stopped.set()
            if not router_task.done():
                await router_task

    def stop(self) -> None:
        """Signal shutdown; an in-flight pass completes, no new one starts."""
        if not self.stopped:
            logger.info("Stopping controller...")
        self._stopped.set()

    def status(self) -> Dict[str, Any]:
        status = {
            "state": self.router.state.value,
            "synced": self.cache.synced,
            "passes": self.router.passes_completed,
        }
        if self.last_report is not None:
            status["lastPass"] = self.last_report.summary()
        if self.failure is not None:
            status["failure"] = str(self.failure)
        return status
