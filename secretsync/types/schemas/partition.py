from marshmallow import fields
from secretsync.types.base import BaseSchema
from secretsync.types.models.partition import Partition
from secretsync.types.schemas.meta import ObjectMetaSchema


class PartitionSchema(BaseSchema):
    """Loads a v1 Namespace body into a partition."""

    __model__ = Partition

    metadata = fields.Nested(ObjectMetaSchema, data_key="metadata", required=True)
