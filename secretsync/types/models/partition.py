from typing import Dict
from secretsync.types.base import BaseModel
from secretsync.types.models.meta import ObjectMeta


class Partition(BaseModel):
    """A namespace as observed through the watch cache."""

    metadata: ObjectMeta

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def annotations(self) -> Dict[str, str]:
        return self.metadata.annotations

    @property
    def labels(self) -> Dict[str, str]:
        return self.metadata.labels
