from typing import Dict, NamedTuple, Optional
from secretsync.types.base import BaseModel
from secretsync.types.models.meta import ObjectMeta


class ObjectKey(NamedTuple):
    """Identity of a namespaced object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class CredentialObject(BaseModel):
    """A secret as observed through the watch cache."""

    metadata: ObjectMeta
    type: str
    data: Dict[str, str]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        if getattr(self, "data", None) is None:
            self.data = {}

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.namespace

    @property
    def annotations(self) -> Dict[str, str]:
        return self.metadata.annotations

    @property
    def labels(self) -> Dict[str, str]:
        return self.metadata.labels

    @property
    def resource_version(self) -> Optional[str]:
        return self.metadata.resource_version

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.namespace, self.name)
