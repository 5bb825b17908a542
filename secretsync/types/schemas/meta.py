from marshmallow import fields
from secretsync.types.base import BaseSchema
from secretsync.types.models.meta import ObjectMeta


class ObjectMetaSchema(BaseSchema):
    __model__ = ObjectMeta

    name = fields.Str(data_key="name", required=True)
    namespace = fields.Str(data_key="namespace", load_default=None, allow_none=True)
    annotations = fields.Dict(
        keys=fields.Str(),
        values=fields.Str(),
        data_key="annotations",
        load_default=None,
        allow_none=True,
    )
    labels = fields.Dict(
        keys=fields.Str(),
        values=fields.Str(),
        data_key="labels",
        load_default=None,
        allow_none=True,
    )
    resource_version = fields.Str(
        data_key="resourceVersion", load_default=None, allow_none=True
    )
    uid = fields.Str(data_key="uid", load_default=None, allow_none=True)
