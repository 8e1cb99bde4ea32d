"""Stable content hash used to name anonymous map definitions."""

import hashlib
from collections.abc import Mapping
from typing import Any


def _canonical(value: Any) -> str:
    if isinstance(value, Mapping):
        items = " ".join(f"{k}:{_canonical(value[k])}" for k in sorted(value, key=str))
        return f"map[{items}]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_canonical(v) for v in value) + "]"
    if isinstance(value, (set, frozenset)):
        # iteration order of a set follows PYTHONHASHSEED
        return "set[" + " ".join(sorted(_canonical(v) for v in value)) + "]"
    return str(value)


def map_hash(entries: Mapping) -> str:
    """First 10 hex chars of a digest over the sorted keys and their values.

    Equal mappings always hash equally regardless of insertion order.
    """
    h = hashlib.sha256()
    for key in sorted(entries, key=str):
        h.update(hashlib.sha256(str(key).encode()).digest())
        h.update(hashlib.sha256(_canonical(entries[key]).encode()).digest())
    return h.hexdigest()[:10]


def definition_name(desc: Any) -> str:
    """Name under which a descriptor's definition is registered.

    Slices and pointers are named after their element. Anonymous maps get
    "dict_" plus a hash of their entries, or of their key and value types
    when there are no entries to look at.
    """
    from .reflection import Map, Pointer, Slice

    if isinstance(desc, (Slice, Pointer)):
        return definition_name(desc.elem)
    if isinstance(desc, Map) and not desc.name:
        entries = desc.entries if desc.entries is not None else {desc.key.name: desc.value.name}
        return f"dict_{map_hash(entries)}"
    return desc.name
