import mmh3
import hashlib
from typing import Any, Dict, Optional, Union
from secretsync.utils.helpers import canonicalize_dict
from secretsync.common.models.labels import Labels
from kubernetes_asyncio.client import (
    ApiException,
    CoreV1Api,
    V1Secret,
)


class BaseResource:
    """Base resource model."""

    SECRETSYNC_OPERATOR_NAME = "secretsync-operator"

    _namespace: str
    _name: str
    _labels: Labels

    def __init__(self, namespace: str, name: str, labels: Labels):
        self._namespace = namespace
        self._name = name
        self._labels = labels

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def name(self) -> str:
        return self._name

    @property
    def labels(self) -> Labels:
        return self._labels

    def compute_hash(self, data: Any) -> str:
        """Compute a murmur3 hash."""
        if isinstance(data, dict):
            _data = canonicalize_dict(data)
        elif isinstance(data, str):
            _data = data.encode()
        else:
            raise ValueError(f"Hash of {type(data)} is not supported.")
        mumur_str = str(mmh3.hash128(_data))

        hash_obj = hashlib.sha256(mumur_str.encode("utf-8"))
        full_hash = hash_obj.hexdigest()

        # First 16 characters keep annotations readable
        return full_hash[:16]

    def prepare_hash_annotation(self, hash: Union[str, int]) -> Dict[str, str]:
        """Prepare hash annotation for k8s resources."""
        return {Labels.SECRETSYNC_HASH_ANNOTATION: str(hash)}

    async def fetch_secret(
        self, core_v1_api: CoreV1Api, name: str, namespace: str
    ) -> Optional[V1Secret]:
        """Retrieve the latest state of a secret"""
        try:
            return await core_v1_api.read_namespaced_secret(
                name=name, namespace=namespace
            )
        except ApiException as ex:
            if ex.status == 404:
                return None
            raise

    async def create_secret(
        self, core_v1_api: CoreV1Api, namespace: str, secret: V1Secret
    ) -> None:
        await core_v1_api.create_namespaced_secret(namespace=namespace, body=secret)

    async def replace_secret(
        self, core_v1_api: CoreV1Api, name: str, namespace: str, secret: V1Secret
    ) -> None:
        await core_v1_api.replace_namespaced_secret(
            name=name,
            namespace=namespace,
            body=secret,
        )
