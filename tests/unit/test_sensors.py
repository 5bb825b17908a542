"""Unit tests for the sensor delegate and the Prometheus monitor."""

import pytest
from prometheus_client import CollectorRegistry
from secretsync.sensors import OperatorSensor, PrometheusMonitor, SensorDelegate


class Recorder(OperatorSensor):
    def __init__(self):
        self.events = []

    def on_event_received(self, kind, action):
        self.events.append(("received", kind, action))

    def on_pass_start(self, trigger):
        return f"state-{id(self)}"

    def on_pass_complete(self, trigger, state, summary, error=None):
        self.events.append(("pass", trigger, state, summary))


class Broken(OperatorSensor):
    def on_event_received(self, kind, action):
        raise RuntimeError("sensor bug")

    def on_pass_start(self, trigger):
        raise RuntimeError("sensor bug")


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def monitor(registry):
    return PrometheusMonitor(registry=registry)


class TestSensorDelegate:
    """Tests for SensorDelegate."""

    def test_fanout(self):
        a, b = Recorder(), Recorder()
        delegate = SensorDelegate()
        delegate.add(a)
        delegate.add(b)

        delegate.on_event_received("Secret", "added")

        assert a.events == b.events == [("received", "Secret", "added")]

    def test_state_routed_back_to_each_sensor(self):
        a, b = Recorder(), Recorder()
        delegate = SensorDelegate()
        delegate.add(a)
        delegate.add(b)

        state = delegate.on_pass_start("bootstrap")
        delegate.on_pass_complete("bootstrap", state, {"desired": 1})

        assert a.events == [("pass", "bootstrap", f"state-{id(a)}", {"desired": 1})]
        assert b.events == [("pass", "bootstrap", f"state-{id(b)}", {"desired": 1})]

    def test_failing_sensor_isolated(self):
        good = Recorder()
        delegate = SensorDelegate()
        delegate.add(Broken())
        delegate.add(good)

        delegate.on_event_received("Namespace", "deleted")
        state = delegate.on_pass_start("resync")
        delegate.on_pass_complete("resync", state, None)

        assert ("received", "Namespace", "deleted") in good.events
        assert ("pass", "resync", f"state-{id(good)}", None) in good.events

    def test_no_sensors(self):
        delegate = SensorDelegate()
        assert len(delegate) == 0
        assert delegate.on_pass_start("bootstrap") is None
        delegate.on_pass_complete("bootstrap", None, None)

    def test_remove_and_clear(self):
        a, b = Recorder(), Recorder()
        delegate = SensorDelegate()
        delegate.add(a)
        delegate.add(b)
        delegate.remove(a)
        assert len(delegate) == 1
        delegate.clear()
        assert len(delegate) == 0


class TestPrometheusMonitor:
    """Tests for PrometheusMonitor."""

    def test_events(self, monitor, registry):
        monitor.on_event_received("Secret", "updated")
        monitor.on_event_skipped("Secret", "unsynced")
        assert registry.get_sample_value(
            "secretsync_events_total", {"kind": "Secret", "action": "updated"}
        ) == 1
        assert registry.get_sample_value(
            "secretsync_events_skipped_total", {"kind": "Secret", "reason": "unsynced"}
        ) == 1

    def test_cache_synced(self, monitor, registry):
        monitor.on_cache_synced(2.5)
        assert registry.get_sample_value("secretsync_cache_synced") == 1
        assert registry.get_sample_value("secretsync_cache_sync_wait_seconds") == 2.5

    def test_pass_results(self, monitor, registry):
        state = monitor.on_pass_start("bootstrap")
        monitor.on_pass_complete("bootstrap", state, {"desired": 4, "failed": 0})
        state = monitor.on_pass_start("resync")
        monitor.on_pass_complete("resync", state, {"desired": 4, "failed": 1})
        state = monitor.on_pass_start("resync")
        monitor.on_pass_complete("resync", state, None, RuntimeError("boom"))

        def passes(trigger, result):
            return registry.get_sample_value(
                "secretsync_pass_total", {"trigger": trigger, "result": result}
            )

        assert passes("bootstrap", "success") == 1
        assert passes("resync", "partial") == 1
        assert passes("resync", "error") == 1
        assert registry.get_sample_value("secretsync_desired_replicas") == 4
        assert registry.get_sample_value(
            "secretsync_pass_duration_seconds_count",
            {"trigger": "bootstrap", "result": "success"},
        ) == 1

    def test_pass_requests(self, monitor, registry):
        monitor.on_pass_requested("secret_updated", True)
        assert registry.get_sample_value(
            "secretsync_pass_requests_total",
            {"trigger": "secret_updated", "coalesced": "true"},
        ) == 1

    def test_replica_outcomes(self, monitor, registry):
        state = monitor.on_replica_sync_start("team-a", "db-cred")
        monitor.on_replica_sync_complete("team-a", "db-cred", state, "created")
        state = monitor.on_replica_sync_start("team-b", "db-cred")
        monitor.on_replica_sync_complete("team-b", "db-cred", state, "failed", "permanent")

        assert registry.get_sample_value(
            "secretsync_replica_sync_total", {"namespace": "team-a", "outcome": "created"}
        ) == 1
        assert registry.get_sample_value(
            "secretsync_replica_sync_errors_total",
            {"namespace": "team-b", "error_kind": "permanent"},
        ) == 1
        assert registry.get_sample_value(
            "secretsync_replica_sync_errors_total",
            {"namespace": "team-a", "error_kind": "permanent"},
        ) is None
