import os
from typing import Any, FrozenSet, Iterable
from secretsync.utils.helpers import split_csv

_TRUE, _FALSE = {"True", "true", "yes", "1"}, {"False", "false", "no", "0"}


def _getenv(name: str, *default: Any) -> Any:
    try:
        v = os.environ[name]
        if v in _TRUE:
            return True
        elif v in _FALSE:
            return False
        else:
            return v
    except KeyError:
        pass
    if default:
        return default[0]
    raise KeyError(name)


def _getenv_str(name: str, default: str) -> str:
    """Read a string variable without boolean coercion (e.g. a namespace named "yes")."""
    return os.environ.get(name, default)


# ------------------------------------------------
# ---- Defaults and environment variables ----
# ------------------------------------------------

#: Secret type that marks a secret for distribution
SYNC_TYPE = _getenv_str("SECRETSYNC_SYNC_TYPE", "secretsync.io/secretsync")

#: Annotation that opts secrets and namespaces into replication
SYNC_ANNOTATION = _getenv_str("SECRETSYNC_ANNOTATION", "secretsync.io/sync")

#: Namespace holding the secrets to distribute
SOURCE_NAMESPACE = _getenv_str("SECRETSYNC_SOURCE_NAMESPACE", "secretsync")

#: Namespaces that never receive replicas, regardless of annotations
PROTECTED_NAMESPACES = split_csv(
    _getenv_str(
        "SECRETSYNC_PROTECTED_NAMESPACES",
        "kube-node-lease,kube-public,kube-system,local-path-storage",
    )
)

#: Seconds between periodic full reconciliation passes (0 disables them)
RESYNC_INTERVAL_SECONDS = float(_getenv("SECRETSYNC_RESYNC_INTERVAL_SECONDS", 300))

#: Seconds to wait for the watch cache initial listing before giving up
CACHE_SYNC_TIMEOUT_SECONDS = float(_getenv("SECRETSYNC_CACHE_SYNC_TIMEOUT_SECONDS", 60))

#: Maximum number of replica writes in flight during a pass
MAX_CONCURRENT_WRITES = int(_getenv("SECRETSYNC_MAX_CONCURRENT_WRITES", 10))

#: Port of the prometheus metrics endpoint
METRICS_PORT = int(_getenv("METRICS_PORT", 8000))


class Settings:
    """Operator settings"""

    sync_type: str = SYNC_TYPE
    sync_annotation: str = SYNC_ANNOTATION
    source_namespace: str = SOURCE_NAMESPACE
    resync_interval_seconds: float = RESYNC_INTERVAL_SECONDS
    cache_sync_timeout_seconds: float = CACHE_SYNC_TIMEOUT_SECONDS
    max_concurrent_writes: int = MAX_CONCURRENT_WRITES
    metrics_port: int = METRICS_PORT

    _protected_namespaces: FrozenSet[str] = frozenset(PROTECTED_NAMESPACES)

    def __init__(
        self,
        *args,
        sync_type: str = None,
        sync_annotation: str = None,
        source_namespace: str = None,
        protected_namespaces: Iterable[str] = None,
        resync_interval_seconds: float = None,
        cache_sync_timeout_seconds: float = None,
        max_concurrent_writes: int = None,
        metrics_port: int = None,
        **kwargs,
    ):
        if sync_type is not None:
            self.sync_type = sync_type

        if sync_annotation is not None:
            self.sync_annotation = sync_annotation

        if source_namespace is not None:
            self.source_namespace = source_namespace

        if protected_namespaces is not None:
            self._protected_namespaces = frozenset(protected_namespaces)

        if resync_interval_seconds is not None:
            self.resync_interval_seconds = resync_interval_seconds

        if cache_sync_timeout_seconds is not None:
            self.cache_sync_timeout_seconds = cache_sync_timeout_seconds

        if max_concurrent_writes is not None:
            if max_concurrent_writes < 1:
                raise ValueError("max_concurrent_writes must be at least 1")
            self.max_concurrent_writes = max_concurrent_writes

        if metrics_port is not None:
            self.metrics_port = metrics_port

    @property
    def protected_namespaces(self) -> FrozenSet[str]:
        """Protected namespaces, always including the source namespace."""
        return self._protected_namespaces | {self.source_namespace}
