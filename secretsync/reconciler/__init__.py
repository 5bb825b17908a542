from .relevance import RelevanceFilter
from .desired import DesiredMapping, DesiredReplica, compute_desired
from .convergence import ConvergenceEngine, ConvergenceReport, ReplicaResult
from .notifications import (
    CREDENTIAL_KIND,
    PARTITION_KIND,
    CredentialNotification,
    EventAction,
    Notification,
    PartitionNotification,
    notification_from_event,
)
from .router import EventRouter, RouterState
from .sweep import BootstrapSweep

__all__ = [
    "RelevanceFilter",
    "DesiredMapping",
    "DesiredReplica",
    "compute_desired",
    "ConvergenceEngine",
    "ConvergenceReport",
    "ReplicaResult",
    "CREDENTIAL_KIND",
    "PARTITION_KIND",
    "CredentialNotification",
    "EventAction",
    "Notification",
    "PartitionNotification",
    "notification_from_event",
    "EventRouter",
    "RouterState",
    "BootstrapSweep",
]
