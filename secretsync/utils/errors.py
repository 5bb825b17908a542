import json
from typing import Optional
from kubernetes_asyncio.client import ApiException

_ALREADY_EXISTS = "alreadyexists"
_NOT_FOUND = "notfound"
_CONFLICT = "conflict"

#: Error kinds recorded against replicas that failed to converge
TRANSIENT = "transient"
PERMANENT = "permanent"
CONFLICT = "conflict"
GONE = "gone"

# Client errors that are still worth retrying on the next pass
_RETRYABLE_CLIENT_STATUSES = (408, 429)


class SecretSyncError(Exception):
    """Base class for operator errors."""


class CacheSyncTimeout(SecretSyncError):
    """The watch cache did not finish its initial listing in time."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"Watch cache did not sync within {timeout:.0f} seconds; "
            "refusing to reconcile against an incomplete cache."
        )


class ReplicaGoneError(SecretSyncError):
    """The destination secret vanished between create and update."""

    def __init__(self, namespace: str, name: str):
        self.namespace = namespace
        self.name = name
        super().__init__(f"Secret {namespace}/{name} vanished while being updated")


class ImmutableTypeError(SecretSyncError):
    """The destination secret has another type; the API rejects type changes on update."""

    def __init__(self, namespace: str, name: str, actual_type: str, desired_type: str):
        self.namespace = namespace
        self.name = name
        self.actual_type = actual_type
        self.desired_type = desired_type
        super().__init__(
            f"Secret {namespace}/{name} has type {actual_type!r}, source has "
            f"{desired_type!r}; a secret type cannot be changed in place"
        )


class MalformedObjectError(SecretSyncError):
    """A notified object could not be loaded as the expected kind."""

    def __init__(self, kind: str, name: Optional[str], errors=None):
        self.kind = kind
        self.name = name
        self.errors = errors or {}
        super().__init__(f"Malformed {kind} '{name}': {self.errors}")


def _reason(ex: ApiException) -> str:
    try:
        if ex.body:
            return json.loads(ex.body).get("reason", "").lower()
    except (json.JSONDecodeError, AttributeError, TypeError):
        pass
    return (ex.reason or "").replace(" ", "").lower()


def already_exists_error(ex: Exception) -> bool:
    if not isinstance(ex, ApiException):
        return False
    return ex.status == 409 and _reason(ex) == _ALREADY_EXISTS


def not_found_error(ex: Exception) -> bool:
    if not isinstance(ex, ApiException):
        return False
    return ex.status == 404 or _reason(ex) == _NOT_FOUND


def conflict_error(ex: Exception) -> bool:
    """Stale resource version on a write."""
    if not isinstance(ex, ApiException):
        return False
    return ex.status == 409 and _reason(ex) != _ALREADY_EXISTS


def classify_api_exception(ex: Exception) -> str:
    """Map a failed API call to the error kind recorded for the replica.

    Non-API exceptions (timeouts, dropped connections) are transient.
    4xx errors other than 408 and 429 are permanent for the current state of
    the cluster, although the next pass will still try again.
    """
    if isinstance(ex, ReplicaGoneError):
        return GONE
    if isinstance(ex, ImmutableTypeError):
        return PERMANENT
    if not isinstance(ex, ApiException):
        return TRANSIENT
    if not_found_error(ex):
        return GONE
    if conflict_error(ex):
        return CONFLICT
    if ex.status and 400 <= ex.status < 500 and ex.status not in _RETRYABLE_CLIENT_STATUSES:
        return PERMANENT
    return TRANSIENT


def describe_api_exception(ex: Exception) -> str:
    """Short human readable description of a failed API call."""
    if not isinstance(ex, ApiException):
        return f"{type(ex).__name__}: {ex}"
    error_msg = f"Kubernetes API error ({ex.status}): {ex.reason}"
    try:
        if ex.body:
            body = json.loads(ex.body)
            if "message" in body:
                error_msg = f"{error_msg} - {body['message']}"
    except (json.JSONDecodeError, AttributeError, TypeError):
        pass
    return error_msg
