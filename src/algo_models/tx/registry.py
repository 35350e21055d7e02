"""
Transaction type registry.

Maps ``type`` tags to transaction kind classes. Decoding dispatches on the
tag, then checks it against the kind implied by the type-specific fields
present in the map; the two must agree.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TYPE_CHECKING

from ..runtime.errors import UnknownTransactionTypeError, UnsupportedTagError
from .header import TransactionHeader

if TYPE_CHECKING:
    from .transaction import TransactionBase

logger = logging.getLogger(__name__)

TYPE_KEY = "type"

_REGISTRY: Dict[str, Type["TransactionBase"]] = {}


def register_transaction_type(cls: Type["TransactionBase"]) -> Type["TransactionBase"]:
    """
    Class decorator registering a transaction kind under its type tag.

    Raises:
        ValueError: If the tag is already taken by another class
    """
    tag = cls.transaction_type.value
    existing = _REGISTRY.get(tag)
    if existing is not None and existing is not cls:
        raise ValueError(f"Transaction type '{tag}' already registered to {existing.__name__}")
    _REGISTRY[tag] = cls
    return cls


def lookup_transaction_type(tag: str) -> Optional[Type["TransactionBase"]]:
    """Get the kind class for a type tag, or None."""
    return _REGISTRY.get(tag)


def registered_transaction_types() -> List[str]:
    """Registered type tags in sorted order."""
    return sorted(_REGISTRY)


def _kind_keys(raw: Mapping[Any, Any]) -> List[Any]:
    header_keys = TransactionHeader.wire_keys()
    return [key for key in raw if key != TYPE_KEY and key not in header_keys]


def _owners(key: Any) -> List[str]:
    return sorted(tag for tag, cls in _REGISTRY.items() if key in cls.wire_keys())


def derive_transaction_type(raw: Mapping[Any, Any]) -> Optional[str]:
    """
    Infer the type tag from which type-specific fields are present.

    Args:
        raw: Raw transaction map

    Returns:
        The single registered tag whose fields cover every non-header key,
        or None when no key identifies a kind or the keys are inconsistent
    """
    keys = _kind_keys(raw)
    if not keys:
        return None
    candidates = [tag for tag, cls in _REGISTRY.items() if all(key in cls.wire_keys() for key in keys)]
    if len(candidates) == 1:
        return candidates[0]
    return None


def transaction_from_raw(raw: Any, context: str = "txn") -> "TransactionBase":
    """
    Dispatch a raw transaction map to its kind class.

    Args:
        raw: Raw transaction map
        context: Name used in error details

    Returns:
        Typed transaction

    Raises:
        UnknownTransactionTypeError: If the tag is missing, unregistered or
            disagrees with the type-specific fields present
    """
    if not isinstance(raw, dict):
        raise UnsupportedTagError(
            f"{context} must be a map, got {type(raw).__name__}",
            {"context": context, "type": type(raw).__name__},
        )

    tag = raw.get(TYPE_KEY)
    if not isinstance(tag, str) or not tag:
        raise UnknownTransactionTypeError(
            "Transaction has no type tag", {"context": context, "type": tag}
        )

    cls = lookup_transaction_type(tag)
    if cls is None:
        raise UnknownTransactionTypeError(
            f"Unknown transaction type '{tag}'",
            {"context": context, "type": tag, "registered": registered_transaction_types()},
        )

    kind_keys = cls.wire_keys()
    foreign = sorted(str(key) for key in _kind_keys(raw) if key not in kind_keys)
    derived = derive_transaction_type(raw)
    if derived is not None and derived != tag:
        implied = [derived]
    else:
        # mixed maps: no single kind covers the keys, so name every owner
        implied = sorted({owner for key in foreign for owner in _owners(key)})
    if implied:
        logger.debug(f"Type tag '{tag}' disagrees with fields {foreign} of {implied}")
        raise UnknownTransactionTypeError(
            f"Type tag '{tag}' disagrees with fields present for {', '.join(implied)}",
            {"context": context, "type": tag, "derived": implied, "fields": foreign},
        )

    logger.debug(f"Decoding '{tag}' transaction as {cls.__name__}")
    return cls.from_raw(raw, context)


__all__ = [
    "TYPE_KEY",
    "register_transaction_type",
    "lookup_transaction_type",
    "registered_transaction_types",
    "derive_transaction_type",
    "transaction_from_raw",
]
