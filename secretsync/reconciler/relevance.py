"""Predicates deciding which secrets and namespaces take part in replication."""
from typing import FrozenSet, Iterable, List
from secretsync.types.models import CredentialObject, Partition
from secretsync.types.settings import Settings

#: Only this exact annotation value opts an object in
SYNC_ENABLED = "true"


class RelevanceFilter:
    """Pure candidate/target predicates over an explicit configuration."""

    source_namespace: str
    sync_type: str
    sync_annotation: str
    protected_namespaces: FrozenSet[str]

    def __init__(
        self,
        source_namespace: str,
        sync_type: str,
        protected_namespaces: Iterable[str],
        sync_annotation: str,
    ):
        self.source_namespace = source_namespace
        self.sync_type = sync_type
        self.sync_annotation = sync_annotation
        self.protected_namespaces = frozenset(protected_namespaces) | {
            source_namespace
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelevanceFilter":
        return cls(
            source_namespace=settings.source_namespace,
            sync_type=settings.sync_type,
            protected_namespaces=settings.protected_namespaces,
            sync_annotation=settings.sync_annotation,
        )

    def _opted_in(self, annotations) -> bool:
        # Strict string comparison, "True" or "1" do not count.
        return (annotations or {}).get(self.sync_annotation) == SYNC_ENABLED

    def is_candidate(self, obj: CredentialObject) -> bool:
        return (
            obj.namespace == self.source_namespace
            and obj.type == self.sync_type
            and self._opted_in(obj.annotations)
        )

    def is_target(self, partition: Partition) -> bool:
        return partition.name not in self.protected_namespaces and self._opted_in(
            partition.annotations
        )

    def candidates(self, objs: Iterable[CredentialObject]) -> List[CredentialObject]:
        return [obj for obj in objs if self.is_candidate(obj)]

    def targets(self, partitions: Iterable[Partition]) -> List[Partition]:
        return [partition for partition in partitions if self.is_target(partition)]
