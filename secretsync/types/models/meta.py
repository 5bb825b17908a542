from typing import Dict, Optional
from secretsync.types.base import BaseModel


class ObjectMeta(BaseModel):
    """Subset of kubernetes object metadata the operator relies on."""

    name: str
    namespace: Optional[str]
    annotations: Dict[str, str]
    labels: Dict[str, str]
    resource_version: Optional[str]
    uid: Optional[str]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        # the API serializes empty maps as null
        if getattr(self, "annotations", None) is None:
            self.annotations = {}
        if getattr(self, "labels", None) is None:
            self.labels = {}
