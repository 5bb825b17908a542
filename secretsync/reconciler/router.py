import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional
from secretsync.reconciler.notifications import EventAction, Notification
from secretsync.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class RouterState(str, Enum):
    UNSYNCED = "unsynced"
    SYNCED = "synced"


class EventRouter:
    """Turns notifications into full reconciliation passes.

    Until the watch cache reports its initial listing complete, notifications
    are dropped: reconciling against a partial cache would compute a wrong
    desired state. Once synced, any notification on either kind requests a
    full pass. Requests are coalesced, and passes run one at a time on the
    single worker started with :meth:`run`.
    """

    def __init__(
        self,
        run_pass: Callable[[str], Awaitable[Any]],
        sensor: OperatorSensor = None,
    ):
        self._run_pass = run_pass
        self.sensor = sensor
        self._state = RouterState.UNSYNCED
        self._wakeup = asyncio.Event()
        self._pending_trigger: Optional[str] = None
        self._in_pass = False
        self.passes_completed = 0

    @property
    def state(self) -> RouterState:
        return self._state

    @property
    def synced(self) -> bool:
        return self._state is RouterState.SYNCED

    @property
    def pending(self) -> bool:
        return self._pending_trigger is not None

    @property
    def in_pass(self) -> bool:
        return self._in_pass

    def mark_synced(self) -> None:
        if not self.synced:
            self._state = RouterState.SYNCED
            logger.info("Watch cache synced, notifications now trigger reconciliation")

    async def route(self, notification: Notification) -> bool:
        """Handle one notification. Returns True if a pass was requested."""
        kind, action = notification.kind, notification.action
        if self.sensor:
            self.sensor.on_event_received(kind, action.value)

        if not self.synced:
            logger.debug(f"Ignoring {kind} {notification.name} {action.value}: cache not synced")
            if self.sensor:
                self.sensor.on_event_skipped(kind, "unsynced")
            return False

        if action is EventAction.DELETED:
            # Replicas are never garbage collected, the pass only refreshes the rest.
            logger.info(f"{kind} {notification.name} deleted; existing replicas are kept")
        else:
            logger.debug(f"{kind} {notification.name} {action.value}")

        self.request_pass(f"{kind.lower()}_{action.value}")
        return True

    def request_pass(self, trigger: str) -> bool:
        """Schedule a full pass.

        Returns False if the request was folded into one already pending.
        """
        coalesced = self._pending_trigger is not None
        if not coalesced:
            self._pending_trigger = trigger
        self._wakeup.set()
        if self.sensor:
            self.sensor.on_pass_requested(trigger, coalesced)
        return not coalesced

    async def _wait_for_request(self, stopped: asyncio.Event) -> None:
        wakeup = asyncio.ensure_future(self._wakeup.wait())
        stop = asyncio.ensure_future(stopped.wait())
        try:
            await asyncio.wait({wakeup, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (wakeup, stop):
                if not task.done():
                    task.cancel()

    async def run(self, stopped: asyncio.Event) -> None:
        """Single worker loop; returns once ``stopped`` is set.

        A pass in flight when ``stopped`` fires runs to completion, no new pass
        starts afterwards.
        """
        logger.info("Reconciliation worker started")
        while not stopped.is_set():
            await self._wait_for_request(stopped)
            if stopped.is_set():
                break

            trigger = self._pending_trigger
            self._pending_trigger = None
            self._wakeup.clear()
            if trigger is None:
                continue

            self._in_pass = True
            try:
                await self._run_pass(trigger)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Unexpected error during reconciliation pass ({trigger}): {e}")
                logger.exception(e)
            finally:
                self._in_pass = False
                self.passes_completed += 1
        logger.info("Reconciliation worker stopped")
