import jsonpickle
from typing import Iterable, List


def split_csv(value: str) -> List[str]:
    """Split a comma separated string into stripped, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def qualified_name(namespace: str, name: str) -> str:
    return f"{namespace}/{name}"


def sort_dict_keys(d):
    """Recursively sort dictionary keys and handle nested structures.

    Args:
        d: Data structure (dict, list, or primitive type)

    Returns:
        Sorted version of the data structure
    """
    if isinstance(d, dict):
        return {key: sort_dict_keys(value) for key, value in sorted(d.items())}
    elif isinstance(d, list):
        return [sort_dict_keys(item) for item in d]
    else:
        return d


def canonicalize_dict(data):
    """
    Returns a canonical JSON representation of a dictionary.

    The JSON string uses sorted keys, which ensures that the representation
    of the dictionary remains consistent even when key order varies.
    """
    return jsonpickle.dumps(sort_dict_keys(data), unpicklable=False)


def deep_compare_dict(data1, data2) -> bool:
    """Compare two data structures deeply.

    ``None`` and an empty mapping are treated as equal, since the API omits
    empty secret payloads from responses.

    Args:
        data1: First data structure (dict, list, or nested combination)
        data2: Second data structure (dict, list, or nested combination)

    Returns:
        True if data structures are equivalent, False otherwise
    """
    if not data1 and not data2:
        return True
    if data1 is None or data2 is None:
        return False

    if not isinstance(data1, type(data2)) and not isinstance(data2, type(data1)):
        return False

    try:
        return canonicalize_dict(data1) == canonicalize_dict(data2)
    except (TypeError, ValueError):
        return data1 == data2


def without_keys(data, keys: Iterable[str]):
    """Return a copy of mapping ``data`` without ``keys``."""
    excluded = set(keys)
    return {k: v for k, v in (data or {}).items() if k not in excluded}
