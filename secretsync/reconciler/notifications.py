"""Typed notifications delivered by the watch cache."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union
from marshmallow import ValidationError
from secretsync.types.models import CredentialObject, Partition
from secretsync.types.schemas import CredentialObjectSchema, PartitionSchema
from secretsync.utils.errors import MalformedObjectError

CREDENTIAL_KIND = "Secret"
PARTITION_KIND = "Namespace"


class EventAction(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"


# Raw watch event types; the initial listing is delivered without a type.
_EVENT_ACTIONS = {
    None: EventAction.ADDED,
    "ADDED": EventAction.ADDED,
    "MODIFIED": EventAction.UPDATED,
    "DELETED": EventAction.DELETED,
}


@dataclass(frozen=True)
class CredentialNotification:
    action: EventAction
    obj: CredentialObject

    kind = CREDENTIAL_KIND

    @property
    def name(self) -> str:
        return str(self.obj.key)


@dataclass(frozen=True)
class PartitionNotification:
    action: EventAction
    partition: Partition

    kind = PARTITION_KIND

    @property
    def name(self) -> str:
        return self.partition.name


Notification = Union[CredentialNotification, PartitionNotification]


def _body_name(body: Any) -> Optional[str]:
    try:
        return body["metadata"]["name"]
    except (KeyError, TypeError):
        return None


def notification_from_event(
    kind: str, event_type: Optional[str], body: Mapping[str, Any]
) -> Notification:
    """Build a notification from a raw watch event.

    Raises:
        MalformedObjectError: the body does not load as ``kind``, or the
            event type is not one the router understands.
    """
    try:
        action = _EVENT_ACTIONS[event_type]
    except KeyError:
        raise MalformedObjectError(
            kind, _body_name(body), {"type": [f"Unsupported event type {event_type!r}"]}
        )

    try:
        if kind == CREDENTIAL_KIND:
            return CredentialNotification(action, CredentialObjectSchema().load(body))
        elif kind == PARTITION_KIND:
            return PartitionNotification(action, PartitionSchema().load(body))
    except ValidationError as e:
        raise MalformedObjectError(kind, _body_name(body), e.messages) from e
    raise MalformedObjectError(kind, _body_name(body), {"kind": ["Unknown kind"]})
