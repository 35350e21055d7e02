"""
Byte-level entry points for transactions and signed envelopes.
"""

import logging
from typing import Optional

from ..codec import reader, writer
from ..codec.hashes import DigestFunction
from ..constants import TX_PREFIX
from ..runtime.errors import UnknownTransactionTypeError, UnsupportedTagError
from ..signatures import Signature
from .registry import TYPE_KEY, transaction_from_raw
from .signed import SignedTransaction, TXN_KEY
from .transaction import TransactionBase

logger = logging.getLogger(__name__)


def encode_transaction(transaction: TransactionBase) -> bytes:
    """
    Encode a transaction canonically.

    Args:
        transaction: Transaction of any registered kind

    Returns:
        Canonical bytes with zero-valued fields omitted and the type tag set
    """
    return transaction.encode()


def decode_transaction(data: bytes) -> TransactionBase:
    """
    Decode one complete transaction map.

    Args:
        data: Canonical encoding of a bare transaction

    Returns:
        Typed transaction of the kind named by its ``type`` tag

    Raises:
        DecodeError: On any malformed input
    """
    return transaction_from_raw(reader.decode(data))


def bytes_for_signing(transaction: TransactionBase) -> bytes:
    """Message a direct signature covers: ``"TX" || encode(transaction)``."""
    return TX_PREFIX + transaction.encode()


def transaction_id(transaction: TransactionBase, digest: Optional[DigestFunction] = None) -> bytes:
    """Raw 32-byte transaction id."""
    return transaction.raw_id(digest)


def transaction_id_string(transaction: TransactionBase, digest: Optional[DigestFunction] = None) -> str:
    """Transaction id as 52 characters of base-32 text."""
    return transaction.id(digest)


def get_encoded_transaction_type(data: bytes) -> str:
    """
    Read the type tag of an encoded transaction without building it.

    Raises:
        UnknownTransactionTypeError: If the map has no string ``type`` entry
    """
    raw = reader.decode(data)
    if not isinstance(raw, dict):
        raise UnsupportedTagError(
            f"Transaction must be a map, got {type(raw).__name__}",
            {"context": "txn", "type": type(raw).__name__},
        )
    tag = raw.get(TYPE_KEY)
    if not isinstance(tag, str) or not tag:
        raise UnknownTransactionTypeError("Transaction has no type tag", {"context": "txn", "type": tag})
    return tag


def encode_signed_transaction(signed: SignedTransaction) -> bytes:
    """Canonical encoding of a signed envelope."""
    return signed.encode()


def decode_signed_transaction(data: bytes) -> SignedTransaction:
    """
    Decode one complete signed envelope.

    Raises:
        DecodeError: On malformed input, including a missing or ambiguous signature
    """
    return SignedTransaction.decode(data)


def attach_signature(encoded_transaction: bytes, signature: Signature) -> bytes:
    """
    Wrap an already encoded transaction with a signature.

    The transaction bytes are decoded first so the result is always a
    well-formed envelope.

    Args:
        encoded_transaction: Canonical transaction bytes
        signature: Signature variant to attach

    Returns:
        Encoded signed envelope
    """
    transaction = decode_transaction(encoded_transaction)
    logger.debug(f"Attaching '{signature.envelope_key}' signature to '{transaction.transaction_type.value}' transaction")
    return writer.encode({
        TXN_KEY: transaction.to_raw(),
        signature.envelope_key: signature.envelope_value(),
    })


__all__ = [
    "encode_transaction",
    "decode_transaction",
    "bytes_for_signing",
    "transaction_id",
    "transaction_id_string",
    "get_encoded_transaction_type",
    "encode_signed_transaction",
    "decode_signed_transaction",
    "attach_signature",
]
