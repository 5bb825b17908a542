"""Secretsync Operator Sensor Framework.

Non-invasive instrumentation of operator lifecycle events through a
hook-based pattern.

Key components:
- OperatorSensor: Base class defining lifecycle hooks for operator events
- SensorDelegate: Fan-out pattern for routing events to multiple sensor backends
- PrometheusMonitor: Prometheus metrics exporter

Usage:
    from secretsync.sensors import OperatorSensor, SensorDelegate

    class CustomSensor(OperatorSensor):
        def on_replica_sync_complete(self, namespace, name, state, outcome, error_kind=None):
            print(f"{namespace}/{name}: {outcome}")

    delegate = SensorDelegate()
    delegate.add(CustomSensor())
    delegate.add(PrometheusMonitor())
"""

from secretsync.sensors.base import OperatorSensor
from secretsync.sensors.delegate import SensorDelegate
from secretsync.sensors.prometheus import PrometheusMonitor
from secretsync.sensors.server import init_metrics_server

__all__ = [
    "OperatorSensor",
    "SensorDelegate",
    "PrometheusMonitor",
    "init_metrics_server",
]
