import kopf
from logging import Logger
from marshmallow import ValidationError
from secretsync.reconciler import PARTITION_KIND
from secretsync.types.schemas import PartitionSchema


@kopf.index("v1", "namespaces")
def partition_index(name, body, logger: Logger, **kwargs):
    """Watch cache of all namespaces."""
    try:
        return {name: PartitionSchema().load(body)}
    except ValidationError as e:
        logger.error(f"Not caching malformed namespace {name}: {e.messages}")
        return {}


@kopf.on.event("v1", "namespaces")
async def on_namespace_event(
    type, body, memo: kopf.Memo, logger: Logger, credential_index, partition_index, **kwargs
):
    """Namespaces opting in or out, appearing or going away, request a full pass."""
    controller = memo.controller
    controller.attach_cache(credential_index, partition_index)
    await controller.handle_event(PARTITION_KIND, type, body, logger)
