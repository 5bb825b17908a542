import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from kubernetes_asyncio.client import CoreV1Api
from secretsync.reconciler.desired import DesiredMapping, DesiredReplica
from secretsync.resources.replica import ReplicaOutcome, ReplicaSecret
from secretsync.sensors.base import OperatorSensor
from secretsync.types.models import ObjectKey
from secretsync.utils.errors import classify_api_exception, describe_api_exception

logger = logging.getLogger(__name__)


@dataclass
class ReplicaResult:
    """Outcome of converging a single replica."""

    key: ObjectKey
    outcome: ReplicaOutcome
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.outcome is ReplicaOutcome.FAILED


@dataclass
class ConvergenceReport:
    """Per-replica outcomes of one convergence run."""

    results: Dict[ObjectKey, ReplicaResult] = field(default_factory=dict)
    duration: float = 0.0

    def add(self, result: ReplicaResult) -> None:
        self.results[result.key] = result

    def _with(self, outcome: ReplicaOutcome) -> List[ReplicaResult]:
        return [r for r in self.results.values() if r.outcome is outcome]

    @property
    def created(self) -> List[ReplicaResult]:
        return self._with(ReplicaOutcome.CREATED)

    @property
    def updated(self) -> List[ReplicaResult]:
        return self._with(ReplicaOutcome.UPDATED)

    @property
    def unchanged(self) -> List[ReplicaResult]:
        return self._with(ReplicaOutcome.UNCHANGED)

    @property
    def failed(self) -> List[ReplicaResult]:
        return self._with(ReplicaOutcome.FAILED)

    @property
    def changes(self) -> int:
        """Number of writes that changed the cluster."""
        return len(self.created) + len(self.updated)

    @property
    def succeeded(self) -> bool:
        return not self.failed

    def summary(self) -> Dict[str, int]:
        return {
            "desired": len(self.results),
            "created": len(self.created),
            "updated": len(self.updated),
            "unchanged": len(self.unchanged),
            "failed": len(self.failed),
        }


class ConvergenceEngine:
    """Applies a desired mapping against the cluster API.

    Replicas are converged concurrently and independently; a failure on one
    (namespace, name) pair is recorded in the report and never interrupts
    the others. Failed replicas are not retried within the run, the next
    pass picks them up again.
    """

    core_v1_api: CoreV1Api
    sensor: Optional[OperatorSensor]

    def __init__(
        self,
        core_v1_api: CoreV1Api,
        max_concurrency: int = 10,
        sensor: OperatorSensor = None,
    ):
        self.core_v1_api = core_v1_api
        self.max_concurrency = max_concurrency
        self.sensor = sensor

    async def converge(self, desired: DesiredMapping) -> ConvergenceReport:
        report = ConvergenceReport()
        start_time = time.monotonic()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _bounded(entry: DesiredReplica) -> ReplicaResult:
            async with semaphore:
                return await self.converge_entry(entry)

        results = await asyncio.gather(*(_bounded(entry) for entry in desired.values()))
        for result in results:
            report.add(result)
        report.duration = time.monotonic() - start_time
        return report

    async def converge_entry(self, entry: DesiredReplica) -> ReplicaResult:
        replica = ReplicaSecret(entry.source, entry.target)
        logger.debug(f"Converging replica {replica.info()}")
        sensor_state = None
        if self.sensor:
            sensor_state = self.sensor.on_replica_sync_start(
                replica.namespace, replica.name
            )
        try:
            outcome = await replica.synchronize(self.core_v1_api)
            result = ReplicaResult(key=entry.key, outcome=outcome)
            if outcome is not ReplicaOutcome.UNCHANGED:
                logger.info(
                    f"Replica {entry.key} {outcome.value} from "
                    f"{entry.source.namespace}/{entry.source.name}"
                )
        except asyncio.CancelledError:
            raise
        except Exception as ex:
            error_kind = classify_api_exception(ex)
            result = ReplicaResult(
                key=entry.key,
                outcome=ReplicaOutcome.FAILED,
                error=describe_api_exception(ex),
                error_kind=error_kind,
            )
            logger.warning(
                f"Failed to converge replica {entry.key} ({error_kind}): {result.error}"
            )
        if self.sensor:
            self.sensor.on_replica_sync_complete(
                replica.namespace,
                replica.name,
                sensor_state,
                result.outcome.value,
                result.error_kind,
            )
        return result
