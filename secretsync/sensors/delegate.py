"""Sensor delegation for fan-out pattern.

SensorDelegate routes sensor events to multiple monitoring backends
simultaneously. Each backend receives the same events and maintains
independent state. A failing backend is logged and never affects the others
or the operator itself.
"""

from typing import Set, Dict, Optional, Any
import logging

from secretsync.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class SensorDelegate(OperatorSensor):
    """Delegate sensor that fans out events to multiple backends.

    Example:
        delegate = SensorDelegate()
        delegate.add(CustomSensor())
        delegate.add(PrometheusMonitor())

        state = delegate.on_pass_start("bootstrap")
        delegate.on_pass_complete("bootstrap", state, {"created": 2})
    """

    def __init__(self) -> None:
        self._sensors: Set[OperatorSensor] = set()

    def add(self, sensor: OperatorSensor) -> None:
        logger.info(f"Adding sensor: {sensor.__class__.__name__}")
        self._sensors.add(sensor)

    def remove(self, sensor: OperatorSensor) -> None:
        logger.info(f"Removing sensor: {sensor.__class__.__name__}")
        self._sensors.discard(sensor)

    def clear(self) -> None:
        logger.info(f"Clearing {len(self._sensors)} sensors")
        self._sensors.clear()

    def __len__(self) -> int:
        return len(self._sensors)

    def _fanout(self, hook: str, *args: Any) -> None:
        for sensor in self._sensors:
            try:
                getattr(sensor, hook)(*args)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )

    def _start(self, hook: str, *args: Any) -> Optional[Dict[OperatorSensor, Any]]:
        """Call a start hook on all sensors and collect their states."""
        if not self._sensors:
            return None
        states = {}
        for sensor in self._sensors:
            try:
                state = getattr(sensor, hook)(*args)
                if state is not None:
                    states[sensor] = state
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )
        return states if states else None

    # =============================================================================
    # Notification Hooks
    # =============================================================================

    def on_event_received(self, kind: str, action: str) -> None:
        self._fanout("on_event_received", kind, action)

    def on_event_skipped(self, kind: str, reason: str) -> None:
        self._fanout("on_event_skipped", kind, reason)

    def on_cache_synced(self, wait_time: float) -> None:
        self._fanout("on_cache_synced", wait_time)

    # =============================================================================
    # Reconciliation Pass Hooks
    # =============================================================================

    def on_pass_requested(self, trigger: str, coalesced: bool) -> None:
        self._fanout("on_pass_requested", trigger, coalesced)

    def on_pass_start(self, trigger: str) -> Optional[Dict[OperatorSensor, Any]]:
        return self._start("on_pass_start", trigger)

    def on_pass_complete(
        self,
        trigger: str,
        state: Optional[Dict[OperatorSensor, Any]],
        summary: Optional[Dict[str, int]],
        error: Optional[Exception] = None,
    ) -> None:
        for sensor in self._sensors:
            try:
                sensor_state = state.get(sensor) if state else None
                sensor.on_pass_complete(trigger, sensor_state, summary, error)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_pass_complete: {e}",
                    exc_info=True,
                )

    # =============================================================================
    # Replica Hooks
    # =============================================================================

    def on_replica_sync_start(
        self, namespace: str, name: str
    ) -> Optional[Dict[OperatorSensor, Any]]:
        return self._start("on_replica_sync_start", namespace, name)

    def on_replica_sync_complete(
        self,
        namespace: str,
        name: str,
        state: Optional[Dict[OperatorSensor, Any]],
        outcome: str,
        error_kind: Optional[str] = None,
    ) -> None:
        for sensor in self._sensors:
            try:
                sensor_state = state.get(sensor) if state else None
                sensor.on_replica_sync_complete(
                    namespace, name, sensor_state, outcome, error_kind
                )
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_replica_sync_complete: {e}",
                    exc_info=True,
                )
