"""Unit tests for API error classification."""

import asyncio
import pytest
from kubernetes_asyncio.client import ApiException
from secretsync.utils.errors import (
    CONFLICT,
    GONE,
    PERMANENT,
    TRANSIENT,
    CacheSyncTimeout,
    ImmutableTypeError,
    ReplicaGoneError,
    already_exists_error,
    classify_api_exception,
    conflict_error,
    describe_api_exception,
    not_found_error,
)


class TestPredicates:
    """Tests for the ApiException predicates."""

    def test_already_exists(self, make_api_error):
        assert already_exists_error(make_api_error(409, "AlreadyExists")) is True
        assert already_exists_error(make_api_error(409, "Conflict")) is False
        assert already_exists_error(ValueError()) is False

    def test_already_exists_without_body(self):
        ex = ApiException(status=409, reason="Already Exists")
        assert already_exists_error(ex) is True

    def test_conflict(self, make_api_error):
        assert conflict_error(make_api_error(409, "Conflict")) is True
        assert conflict_error(make_api_error(409, "AlreadyExists")) is False

    def test_not_found(self, make_api_error):
        assert not_found_error(make_api_error(404, "NotFound")) is True
        assert not_found_error(make_api_error(403, "Forbidden")) is False

    def test_garbage_body(self):
        ex = ApiException(status=409, reason="Conflict")
        ex.body = "<html>bad gateway</html>"
        assert conflict_error(ex) is True


class TestClassify:
    """Tests for classify_api_exception()."""

    @pytest.mark.parametrize(
        "status,reason,kind",
        [
            (404, "NotFound", GONE),
            (409, "Conflict", CONFLICT),
            (403, "Forbidden", PERMANENT),
            (422, "Invalid", PERMANENT),
            (400, "BadRequest", PERMANENT),
            (429, "TooManyRequests", TRANSIENT),
            (408, "Timeout", TRANSIENT),
            (500, "InternalError", TRANSIENT),
            (503, "ServiceUnavailable", TRANSIENT),
        ],
    )
    def test_api_errors(self, make_api_error, status, reason, kind):
        assert classify_api_exception(make_api_error(status, reason)) == kind

    def test_non_api_errors_are_transient(self):
        assert classify_api_exception(asyncio.TimeoutError()) == TRANSIENT
        assert classify_api_exception(ConnectionResetError()) == TRANSIENT

    def test_vanished_replica(self):
        assert classify_api_exception(ReplicaGoneError("team-a", "db-cred")) == GONE

    def test_type_mismatch(self):
        ex = ImmutableTypeError("team-a", "db-cred", "Opaque", "secretsync.io/secretsync")
        assert classify_api_exception(ex) == PERMANENT


class TestDescribe:
    """Tests for describe_api_exception()."""

    def test_includes_message(self, make_api_error):
        message = describe_api_exception(make_api_error(403, "Forbidden", "no access"))
        assert message == "Kubernetes API error (403): Forbidden - no access"

    def test_other_exception(self):
        assert describe_api_exception(ValueError("bad")) == "ValueError: bad"


def test_cache_sync_timeout_message():
    assert "60 seconds" in str(CacheSyncTimeout(60))
