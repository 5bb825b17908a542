"""Desired replica state computation.

Every pass recomputes the complete mapping from the current candidates and
targets instead of diffing individual events, so a lost or reordered event
can never leave a namespace out of date for longer than one pass.
"""
from typing import Dict, Iterable, NamedTuple
from secretsync.types.models import CredentialObject, ObjectKey, Partition


class DesiredReplica(NamedTuple):
    """A replica that should exist, and the secret it is copied from."""

    target: str
    source: CredentialObject

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.target, self.source.name)


DesiredMapping = Dict[ObjectKey, DesiredReplica]


def compute_desired(
    candidates: Iterable[CredentialObject], targets: Iterable[Partition]
) -> DesiredMapping:
    """Cross product of targets and candidates, keyed by (namespace, name).

    Inputs are expected to be filtered already.
    """
    candidates = list(candidates)
    desired: DesiredMapping = {}
    for target in targets:
        for candidate in candidates:
            entry = DesiredReplica(target=target.name, source=candidate)
            desired[entry.key] = entry
    return desired
