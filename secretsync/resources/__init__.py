from .replica import ReplicaSecret, ReplicaOutcome

__all__ = ["ReplicaSecret", "ReplicaOutcome"]
