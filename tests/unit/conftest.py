"""Shared fixtures: an in-memory CoreV1Api and object factories."""

import json
import pytest
from typing import Dict, List, Tuple
from kubernetes_asyncio.client import ApiException, V1ObjectMeta, V1Secret
from secretsync.types.schemas import CredentialObjectSchema, PartitionSchema
from secretsync.types.settings import Settings

SOURCE_NAMESPACE = "secretsync"
SYNC_TYPE = "secretsync.io/secretsync"
SYNC_ANNOTATION = "secretsync.io/sync"
PROTECTED_NAMESPACES = ["kube-node-lease", "kube-public", "kube-system", "local-path-storage"]


def api_error(status: int, reason: str, message: str = "") -> ApiException:
    """ApiException shaped like the ones raised for a failed Status response."""
    ex = ApiException(status=status, reason=reason)
    ex.body = json.dumps(
        {
            "kind": "Status",
            "apiVersion": "v1",
            "status": "Failure",
            "message": message,
            "reason": reason,
            "code": status,
        }
    )
    return ex


def _stored_copy(secret: V1Secret, resource_version: str) -> V1Secret:
    return V1Secret(
        api_version="v1",
        kind="Secret",
        metadata=V1ObjectMeta(
            name=secret.metadata.name,
            namespace=secret.metadata.namespace,
            labels=dict(secret.metadata.labels or {}),
            annotations=dict(secret.metadata.annotations or {}),
            resource_version=resource_version,
        ),
        type=secret.type,
        data=dict(secret.data) if secret.data else None,
    )


class FakeCoreV1Api:
    """Secrets API backed by a dict, with the API server's write semantics.

    - create rejects an existing name (409 AlreadyExists) and a body that
      carries a resource version
    - replace requires the current resource version (409 Conflict otherwise)
    - replace never changes the type of a secret (422 Invalid)
    - reads return copies, so callers never mutate stored state
    """

    def __init__(self):
        self.secrets: Dict[Tuple[str, str], V1Secret] = {}
        self.calls: List[Tuple[str, str, str]] = []
        self.failures: Dict[str, ApiException] = {}
        self._version = 100

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)

    def _check_failure(self, namespace: str) -> None:
        if namespace in self.failures:
            raise self.failures[namespace]

    def fail_namespace(self, namespace: str, error: ApiException = None) -> None:
        self.failures[namespace] = error or api_error(403, "Forbidden", "forbidden")

    def seed(self, namespace: str, name: str, type: str, data: Dict[str, str]) -> V1Secret:
        """Store a secret directly, bypassing call recording."""
        secret = V1Secret(
            metadata=V1ObjectMeta(name=name, namespace=namespace),
            type=type,
            data=data,
        )
        stored = _stored_copy(secret, self._next_version())
        self.secrets[(namespace, name)] = stored
        return stored

    def get(self, namespace: str, name: str) -> V1Secret:
        return self.secrets.get((namespace, name))

    def writes(self) -> List[Tuple[str, str, str]]:
        return [call for call in self.calls if call[0] in ("create", "replace")]

    async def create_namespaced_secret(self, namespace, body, **kwargs):
        self.calls.append(("create", namespace, body.metadata.name))
        self._check_failure(namespace)
        key = (namespace, body.metadata.name)
        if body.metadata.resource_version:
            raise api_error(
                500, "InternalError", "resourceVersion should not be set on objects to be created"
            )
        if key in self.secrets:
            raise api_error(409, "AlreadyExists", f'secrets "{key[1]}" already exists')
        self.secrets[key] = _stored_copy(body, self._next_version())
        return _stored_copy(self.secrets[key], self.secrets[key].metadata.resource_version)

    async def read_namespaced_secret(self, name, namespace, **kwargs):
        self.calls.append(("read", namespace, name))
        stored = self.secrets.get((namespace, name))
        if stored is None:
            raise api_error(404, "NotFound", f'secrets "{name}" not found')
        return _stored_copy(stored, stored.metadata.resource_version)

    async def replace_namespaced_secret(self, name, namespace, body, **kwargs):
        self.calls.append(("replace", namespace, name))
        self._check_failure(namespace)
        stored = self.secrets.get((namespace, name))
        if stored is None:
            raise api_error(404, "NotFound", f'secrets "{name}" not found')
        if body.metadata.resource_version != stored.metadata.resource_version:
            raise api_error(
                409, "Conflict", "the object has been modified; please apply your changes"
            )
        if body.type != stored.type:
            raise api_error(422, "Invalid", "type: Invalid value: field is immutable")
        self.secrets[(namespace, name)] = _stored_copy(body, self._next_version())
        return self.secrets[(namespace, name)]


def secret_body(
    name,
    namespace=SOURCE_NAMESPACE,
    type=SYNC_TYPE,
    data=None,
    annotations=None,
    labels=None,
    resource_version="1",
    sync=True,
):
    annotations = dict(annotations or {})
    if sync:
        annotations.setdefault(SYNC_ANNOTATION, "true")
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "annotations": annotations,
            "labels": labels,
            "resourceVersion": resource_version,
            "uid": f"uid-{namespace}-{name}",
            "managedFields": [{"manager": "kubectl"}],
        },
        "type": type,
        "data": {"password": "aHVudGVyMg=="} if data is None else data,
    }


def namespace_body(name, annotations=None, sync=True):
    annotations = dict(annotations or {})
    if sync:
        annotations.setdefault(SYNC_ANNOTATION, "true")
    return {
        "apiVersion": "v1",
        "kind": "Namespace",
        "metadata": {"name": name, "annotations": annotations},
        "status": {"phase": "Active"},
    }


@pytest.fixture
def settings():
    """Settings independent of the environment the tests run in."""
    return Settings(
        sync_type=SYNC_TYPE,
        sync_annotation=SYNC_ANNOTATION,
        source_namespace=SOURCE_NAMESPACE,
        protected_namespaces=PROTECTED_NAMESPACES,
        resync_interval_seconds=0,
        cache_sync_timeout_seconds=1,
        max_concurrent_writes=4,
    )


@pytest.fixture
def fake_api():
    return FakeCoreV1Api()


@pytest.fixture
def make_secret():
    """Factory for credential objects as loaded from the watch cache."""

    def _make(name, **kwargs):
        return CredentialObjectSchema().load(secret_body(name, **kwargs))

    return _make


@pytest.fixture
def make_namespace():
    """Factory for partitions as loaded from the watch cache."""

    def _make(name, **kwargs):
        return PartitionSchema().load(namespace_body(name, **kwargs))

    return _make


@pytest.fixture
def index_of():
    """Build a kopf-like index (key -> store of values) from models."""

    def _index(*objs):
        return {obj.name: [obj] for obj in objs}

    return _index


@pytest.fixture
def make_api_error():
    return api_error


@pytest.fixture
def make_secret_body():
    return secret_body


@pytest.fixture
def make_namespace_body():
    return namespace_body
