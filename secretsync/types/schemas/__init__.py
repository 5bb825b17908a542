from .meta import ObjectMetaSchema
from .credential import CredentialObjectSchema, DEFAULT_SECRET_TYPE
from .partition import PartitionSchema

__all__ = [
    "ObjectMetaSchema",
    "CredentialObjectSchema",
    "DEFAULT_SECRET_TYPE",
    "PartitionSchema",
]
