from .meta import ObjectMeta
from .credential import CredentialObject, ObjectKey
from .partition import Partition

__all__ = ["ObjectMeta", "CredentialObject", "ObjectKey", "Partition"]
