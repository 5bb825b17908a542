from enum import Enum
from typing import Dict, Optional
from kubernetes_asyncio.client import (
    ApiException,
    CoreV1Api,
    V1ObjectMeta,
    V1Secret,
)
from secretsync.common.models.labels import Labels
from secretsync.resources.base import BaseResource
from secretsync.types.models import CredentialObject, ObjectKey
from secretsync.utils.errors import (
    ImmutableTypeError,
    ReplicaGoneError,
    already_exists_error,
)
from secretsync.utils.helpers import deep_compare_dict, qualified_name, without_keys
from secretsync.utils.objects import cached_property


class ReplicaOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class ReplicaSecret(BaseResource):
    """Copy of a source secret materialized in a target namespace."""

    KIND = "Secret"

    source: CredentialObject

    def __init__(self, source: CredentialObject, target_namespace: str):
        labels = Labels.generate_replica_labels(
            source.labels, self.SECRETSYNC_OPERATOR_NAME
        )
        super().__init__(namespace=target_namespace, name=source.name, labels=labels)
        self.source = source

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.namespace, self.name)

    @cached_property
    def payload_hash(self) -> str:
        return self.compute_hash(self.source.data or {})

    @cached_property
    def body(self) -> V1Secret:
        return self.prepare_secret()

    def prepare_annotations(self) -> Dict[str, str]:
        annotations = without_keys(
            self.source.annotations, [Labels.KUBECTL_LAST_APPLIED_ANNOTATION]
        )
        annotations[Labels.SECRETSYNC_SOURCE_ANNOTATION] = qualified_name(
            self.source.namespace, self.source.name
        )
        annotations.update(self.prepare_hash_annotation(self.payload_hash))
        return annotations

    def prepare_secret(self, resource_version: Optional[str] = None) -> V1Secret:
        """Build the write body.

        Source identity (namespace, uid, resource version) is never carried
        over: the API rejects a create holding a foreign resource version.
        ``resource_version`` is only set for updates, and must be the one of
        the destination secret.
        """
        return V1Secret(
            api_version="v1",
            kind=self.KIND,
            metadata=V1ObjectMeta(
                name=self.name,
                namespace=self.namespace,
                labels=self.labels.as_dict(),
                annotations=self.prepare_annotations(),
                resource_version=resource_version,
            ),
            type=self.source.type,
            data=dict(self.source.data or {}),
        )

    def in_sync(self, actual: V1Secret) -> bool:
        """True if the destination already carries the desired payload."""
        return deep_compare_dict(actual.data, self.source.data)

    async def synchronize(self, core_v1_api: CoreV1Api) -> ReplicaOutcome:
        """Create the replica, or update it if it already exists."""
        try:
            await self.create_secret(core_v1_api, self.namespace, self.body)
            return ReplicaOutcome.CREATED
        except ApiException as ex:
            if not already_exists_error(ex):
                raise

        actual = await self.fetch_secret(core_v1_api, self.name, self.namespace)
        if actual is None:
            raise ReplicaGoneError(self.namespace, self.name)
        if actual.type != self.source.type:
            raise ImmutableTypeError(
                self.namespace, self.name, actual.type, self.source.type
            )
        if self.in_sync(actual):
            return ReplicaOutcome.UNCHANGED

        await self.replace_secret(
            core_v1_api,
            self.name,
            self.namespace,
            self.prepare_secret(resource_version=actual.metadata.resource_version),
        )
        return ReplicaOutcome.UPDATED

    def info(self) -> Dict:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "source": qualified_name(self.source.namespace, self.source.name),
            "hash": self.payload_hash,
        }
