"""Prometheus monitoring backend for the secretsync operator.

PrometheusMonitor collects operator lifecycle events and exposes them as
Prometheus metrics in three categories:

1. Notifications - events received and dropped, cache readiness
2. Reconciliation passes - duration, throughput, requests, desired size
3. Replica writes - outcome counts, errors, latency
"""

from typing import Dict, Optional, Any
import time
import logging

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, Gauge

from secretsync.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class PrometheusMonitor(OperatorSensor):
    """Prometheus metrics monitor for the secretsync operator.

    Metrics are organized into three categories:
    - secretsync_events_* / secretsync_cache_* - Notification metrics
    - secretsync_pass_* / secretsync_desired_* - Reconciliation pass metrics
    - secretsync_replica_* - Replica write metrics

    Example:
        monitor = PrometheusMonitor()
        state = monitor.on_pass_start("resync")
        monitor.on_pass_complete("resync", state, {"desired": 4, "created": 1})
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        super().__init__()

        # =============================================================================
        # Notification Metrics
        # =============================================================================

        self.events_total = Counter(
            "secretsync_events_total",
            "Total number of notifications received",
            labelnames=["kind", "action"],
            registry=registry,
        )

        self.events_skipped_total = Counter(
            "secretsync_events_skipped_total",
            "Total number of notifications dropped without triggering a pass",
            labelnames=["kind", "reason"],
            registry=registry,
        )

        self.cache_synced = Gauge(
            "secretsync_cache_synced",
            "Whether the watch cache completed its initial listing",
            registry=registry,
        )

        self.cache_sync_wait_seconds = Gauge(
            "secretsync_cache_sync_wait_seconds",
            "Time spent waiting for the initial listing",
            registry=registry,
        )

        # =============================================================================
        # Reconciliation Pass Metrics
        # =============================================================================

        self.pass_duration = Histogram(
            "secretsync_pass_duration_seconds",
            "Time spent in a reconciliation pass",
            labelnames=["trigger", "result"],
            buckets=[0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=registry,
        )

        self.pass_total = Counter(
            "secretsync_pass_total",
            "Total number of reconciliation passes",
            labelnames=["trigger", "result"],
            registry=registry,
        )

        self.pass_requests_total = Counter(
            "secretsync_pass_requests_total",
            "Total number of pass requests",
            labelnames=["trigger", "coalesced"],
            registry=registry,
        )

        self.desired_replicas = Gauge(
            "secretsync_desired_replicas",
            "Number of replicas in the last computed desired state",
            registry=registry,
        )

        # =============================================================================
        # Replica Metrics
        # =============================================================================

        self.replica_sync_duration = Histogram(
            "secretsync_replica_sync_duration_seconds",
            "Time spent converging a single replica",
            labelnames=["namespace", "outcome"],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=registry,
        )

        self.replica_sync_total = Counter(
            "secretsync_replica_sync_total",
            "Total number of replica convergence attempts",
            labelnames=["namespace", "outcome"],
            registry=registry,
        )

        self.replica_sync_errors = Counter(
            "secretsync_replica_sync_errors_total",
            "Total number of failed replica convergence attempts",
            labelnames=["namespace", "error_kind"],
            registry=registry,
        )

        logger.info("PrometheusMonitor initialized with all metrics")

    # =============================================================================
    # Notification Hooks
    # =============================================================================

    def on_event_received(self, kind: str, action: str) -> None:
        self.events_total.labels(kind=kind, action=action).inc()

    def on_event_skipped(self, kind: str, reason: str) -> None:
        self.events_skipped_total.labels(kind=kind, reason=reason).inc()

    def on_cache_synced(self, wait_time: float) -> None:
        self.cache_synced.set(1)
        self.cache_sync_wait_seconds.set(wait_time)

    # =============================================================================
    # Reconciliation Pass Hooks
    # =============================================================================

    def on_pass_requested(self, trigger: str, coalesced: bool) -> None:
        self.pass_requests_total.labels(
            trigger=trigger, coalesced=str(coalesced).lower()
        ).inc()

    def on_pass_start(self, trigger: str) -> Optional[Dict[str, Any]]:
        """Record pass start time."""
        return {"start_time": time.time()}

    def on_pass_complete(
        self,
        trigger: str,
        state: Optional[Dict[str, Any]],
        summary: Optional[Dict[str, int]],
        error: Optional[Exception] = None,
    ) -> None:
        """Record pass duration and result.

        A pass that completed with failed replicas is a partial result.
        """
        if error is not None:
            result = "error"
        elif summary and summary.get("failed"):
            result = "partial"
        else:
            result = "success"

        if state:
            duration = time.time() - state["start_time"]
            self.pass_duration.labels(trigger=trigger, result=result).observe(duration)
        self.pass_total.labels(trigger=trigger, result=result).inc()

        if summary is not None:
            self.desired_replicas.set(summary.get("desired", 0))

    # =============================================================================
    # Replica Hooks
    # =============================================================================

    def on_replica_sync_start(
        self, namespace: str, name: str
    ) -> Optional[Dict[str, Any]]:
        """Record replica sync start time."""
        return {"start_time": time.time()}

    def on_replica_sync_complete(
        self,
        namespace: str,
        name: str,
        state: Optional[Dict[str, Any]],
        outcome: str,
        error_kind: Optional[str] = None,
    ) -> None:
        if state:
            duration = time.time() - state["start_time"]
            self.replica_sync_duration.labels(
                namespace=namespace, outcome=outcome
            ).observe(duration)

        self.replica_sync_total.labels(namespace=namespace, outcome=outcome).inc()

        if error_kind:
            self.replica_sync_errors.labels(
                namespace=namespace, error_kind=error_kind
            ).inc()
