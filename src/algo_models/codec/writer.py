"""
Canonical Writer

Encodes raw value trees (integers, byte strings, strings, booleans, arrays
and string/integer keyed maps) to MessagePack in canonical form:

- integers use the smallest representation the format allows (msgpack's
  own minimality rule, applied by the packer)
- map keys are emitted in byte-wise order of their UTF-8 encoding
  (integer keys, which only occur inside opaque proof structures, sort
  numerically ahead of string keys)
- no extension types, floats or nil values are ever written
"""

from typing import Any, Tuple, Union

import msgpack

from ..constants import MAX_UINT64, MIN_INT64
from ..runtime.errors import UnsupportedTagError

MapKey = Union[str, int]


def map_key_order(key: MapKey) -> Tuple[int, Any]:
    """
    Sort key for canonical map ordering.

    Args:
        key: Map key (string or integer)

    Returns:
        Tuple ordering integer keys numerically before string keys by UTF-8 bytes
    """
    if isinstance(key, str):
        return (1, key.encode("utf-8"))
    return (0, key)


def canonicalize(value: Any, path: str = "$") -> Any:
    """
    Normalize a raw value tree into the exact shape that will be packed.

    Maps are rebuilt with sorted keys, tuples become lists and byte-like
    objects become ``bytes``.

    Args:
        value: Raw value tree
        path: Location of ``value`` inside the tree, used in error details

    Returns:
        Canonicalized copy of the tree

    Raises:
        UnsupportedTagError: If the tree holds a value outside the raw value kinds
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value < MIN_INT64 or value > MAX_UINT64:
            raise UnsupportedTagError(
                f"Integer at {path} does not fit in 64 bits",
                {"path": path, "value": value},
            )
        return int(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return [canonicalize(item, f"{path}[{i}]") for i, item in enumerate(value)]
    if isinstance(value, dict):
        for key in value:
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                raise UnsupportedTagError(
                    f"Map key at {path} must be a string or integer",
                    {"path": path, "key_type": type(key).__name__},
                )
        return {
            key: canonicalize(value[key], f"{path}.{key}")
            for key in sorted(value, key=map_key_order)
        }
    raise UnsupportedTagError(
        f"Value at {path} has unsupported type {type(value).__name__}",
        {"path": path, "type": type(value).__name__},
    )


def encode(value: Any) -> bytes:
    """
    Encode a raw value tree to canonical MessagePack bytes.

    Args:
        value: Raw value tree

    Returns:
        Canonical encoding
    """
    return msgpack.packb(canonicalize(value), use_bin_type=True)


__all__ = ["canonicalize", "encode", "map_key_order"]
