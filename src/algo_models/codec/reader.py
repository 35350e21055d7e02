"""
Canonical Reader

Decodes exactly one MessagePack value and checks that it only uses the raw
value kinds this package understands. Decoding is lenient about integer
widths; re-encoding always produces the canonical form.
"""

import logging
import re
from typing import Any, NamedTuple

import msgpack

from ..runtime.errors import TrailingBytesError, TruncatedInputError, UnsupportedTagError

logger = logging.getLogger(__name__)

_DECLARED_LENGTH = re.compile(r"(\d+) exceeds max_(\w+?)_len")


class DecodeResult(NamedTuple):
    """One decoded value plus how much of the input it used."""

    value: Any
    consumed: int
    remaining: int


def _reject_ext(code: int, data: bytes) -> Any:
    raise UnsupportedTagError(
        f"Extension type {code} is not supported",
        {"ext_code": code, "length": len(data)},
    )


def _check_tree(value: Any, path: str = "$") -> None:
    """Reject values the wire format allows but the raw value model does not."""
    if isinstance(value, (bool, int, bytes, str)):
        return
    if isinstance(value, list):
        for i, item in enumerate(value):
            _check_tree(item, f"{path}[{i}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                raise UnsupportedTagError(
                    f"Map key at {path} must be a string or integer",
                    {"path": path, "key_type": type(key).__name__},
                )
            _check_tree(item, f"{path}.{key}")
        return
    # float, nil and timestamp markers
    raise UnsupportedTagError(
        f"Value at {path} has unsupported type {type(value).__name__}",
        {"path": path, "type": type(value).__name__},
    )


def decode_prefix(data: bytes) -> DecodeResult:
    """
    Decode the first complete value in ``data``.

    Args:
        data: Input bytes

    Returns:
        DecodeResult with the value, bytes consumed and bytes left over

    Raises:
        TruncatedInputError: If the input ends before the value is complete
        UnsupportedTagError: If a type marker is not a recognized kind
    """
    data = bytes(data)
    # A declared length can never exceed the bytes supplied
    limit = len(data)
    unpacker = msgpack.Unpacker(
        raw=False,
        strict_map_key=False,
        ext_hook=_reject_ext,
        max_bin_len=limit,
        max_str_len=limit,
        max_array_len=limit,
        max_map_len=limit // 2,
        max_ext_len=limit,
    )
    unpacker.feed(data)
    try:
        value = unpacker.unpack()
    except msgpack.OutOfData as e:
        raise TruncatedInputError(details={"length": len(data)}, cause=e)
    except UnicodeDecodeError as e:
        raise UnsupportedTagError(
            "String is not valid UTF-8", {"position": e.start}, cause=e
        )
    except ValueError as e:
        declared = _DECLARED_LENGTH.search(str(e))
        if declared:
            raise TruncatedInputError(
                f"Declared {declared.group(2)} length {declared.group(1)} exceeds the {len(data)} byte input",
                {"length": len(data), "declared": int(declared.group(1)), "kind": declared.group(2)},
                cause=e,
            )
        # FormatError / StackError: reserved marker byte or excessive nesting
        raise UnsupportedTagError(f"Unrecognized type marker: {e}", cause=e)

    _check_tree(value)
    consumed = unpacker.tell()
    return DecodeResult(value, consumed, len(data) - consumed)


def decode(data: bytes) -> Any:
    """
    Decode exactly one value; leftover bytes are an error.

    Args:
        data: Input bytes

    Returns:
        Decoded raw value tree

    Raises:
        TrailingBytesError: If bytes remain after the value
    """
    result = decode_prefix(data)
    if result.remaining:
        logger.debug(f"Rejecting {result.remaining} trailing byte(s) after offset {result.consumed}")
        raise TrailingBytesError(result.remaining, result.consumed)
    return result.value


__all__ = ["DecodeResult", "decode", "decode_prefix"]
