from marshmallow import fields
from secretsync.types.base import BaseSchema
from secretsync.types.models.credential import CredentialObject
from secretsync.types.schemas.meta import ObjectMetaSchema

#: Type assigned by the API server to secrets created without one
DEFAULT_SECRET_TYPE = "Opaque"


class CredentialObjectSchema(BaseSchema):
    """Loads a v1 Secret body into a credential object."""

    __model__ = CredentialObject

    metadata = fields.Nested(ObjectMetaSchema, data_key="metadata", required=True)
    type = fields.Str(data_key="type", load_default=DEFAULT_SECRET_TYPE)
    data = fields.Dict(
        keys=fields.Str(),
        values=fields.Str(),
        data_key="data",
        load_default=None,
        allow_none=True,
    )
