from typing import Dict


class ResourceLabels:
    SECRETSYNC_DOMAIN: str = "secretsync.io/"

    #: Namespace/name of the secret a replica was copied from
    SECRETSYNC_SOURCE_ANNOTATION = SECRETSYNC_DOMAIN + "source"

    #: Hash of the replicated payload
    SECRETSYNC_HASH_ANNOTATION = SECRETSYNC_DOMAIN + "resource-hash"

    #: Annotations never carried over from the source secret
    KUBECTL_LAST_APPLIED_ANNOTATION = "kubectl.kubernetes.io/last-applied-configuration"


class Labels(ResourceLabels):
    KUBERNETES_DOMAIN = "app.kubernetes.io/"

    KUBERNETES_MANAGED_BY_LABEL = KUBERNETES_DOMAIN + "managed-by"

    _labels: Dict[str, str]

    def __init__(self, labels: Dict[str, str] = None) -> None:
        self._labels = dict(labels) if labels else dict()

    def update(self, labels: Dict[str, str]) -> "Labels":
        self._labels.update(labels.copy())
        return self

    def as_dict(self) -> Dict[str, str]:
        """Return labels are dictionary."""
        return self._labels.copy()

    def include(self, label: str, value: str) -> "Labels":
        self.update({label: value})
        return self

    def include_kubernetes_managed_by(self, operator_name: str) -> "Labels":
        return self.include(self.KUBERNETES_MANAGED_BY_LABEL, operator_name)

    @classmethod
    def generate_replica_labels(
        cls, source_labels: Dict[str, str], managed_by: str
    ) -> "Labels":
        """Source labels plus the managed-by marker."""
        return Labels(source_labels).include_kubernetes_managed_by(managed_by)
