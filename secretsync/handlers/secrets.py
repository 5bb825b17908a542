import kopf
from logging import Logger
from marshmallow import ValidationError
from secretsync.reconciler import CREDENTIAL_KIND
from secretsync.types.schemas import CredentialObjectSchema


def in_source_namespace(namespace, memo: kopf.Memo, **_):
    return namespace == memo.conf.source_namespace


@kopf.index("v1", "secrets", when=in_source_namespace)
def credential_index(name, body, logger: Logger, **kwargs):
    """Watch cache of the secrets in the source namespace."""
    try:
        return {name: CredentialObjectSchema().load(body)}
    except ValidationError as e:
        logger.error(f"Not caching malformed secret {name}: {e.messages}")
        return {}


@kopf.on.event("v1", "secrets", when=in_source_namespace)
async def on_secret_event(
    type, body, memo: kopf.Memo, logger: Logger, credential_index, partition_index, **kwargs
):
    """Any change to a source secret requests a full pass."""
    controller = memo.controller
    controller.attach_cache(credential_index, partition_index)
    await controller.handle_event(CREDENTIAL_KIND, type, body, logger)
