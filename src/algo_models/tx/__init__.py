"""
Transaction Model

Typed transaction kinds over the canonical codec, the signed envelope and
group ids.

Key components:
- header.py: fields shared by every kind
- transaction.py: the registered kinds
- registry.py: ``type`` tag dispatch
- signed.py: signed envelope
- codec.py: byte-level encode/decode/id functions
- group.py: atomic group ids
"""

from .types import AssetParams, BoxReference, OnComplete, StateProofMessage, StateSchema, TransactionType
from .header import TransactionHeader
from .registry import (
    derive_transaction_type,
    lookup_transaction_type,
    register_transaction_type,
    registered_transaction_types,
    transaction_from_raw,
)
from .transaction import (
    ApplicationCallTransaction,
    AssetConfigTransaction,
    AssetFreezeTransaction,
    AssetTransferTransaction,
    KeyRegistrationTransaction,
    PaymentTransaction,
    StateProofTransaction,
    Transaction,
    TransactionBase,
)
from .signed import SignedTransaction
from .codec import (
    attach_signature,
    bytes_for_signing,
    decode_signed_transaction,
    decode_transaction,
    encode_signed_transaction,
    encode_transaction,
    get_encoded_transaction_type,
    transaction_id,
    transaction_id_string,
)
from .group import assign_group_id, compute_group_id

__all__ = [
    "TransactionType",
    "OnComplete",
    "AssetParams",
    "StateSchema",
    "BoxReference",
    "StateProofMessage",
    "TransactionHeader",
    "register_transaction_type",
    "lookup_transaction_type",
    "registered_transaction_types",
    "derive_transaction_type",
    "transaction_from_raw",
    "TransactionBase",
    "PaymentTransaction",
    "AssetTransferTransaction",
    "AssetConfigTransaction",
    "AssetFreezeTransaction",
    "KeyRegistrationTransaction",
    "ApplicationCallTransaction",
    "StateProofTransaction",
    "Transaction",
    "SignedTransaction",
    "encode_transaction",
    "decode_transaction",
    "bytes_for_signing",
    "transaction_id",
    "transaction_id_string",
    "get_encoded_transaction_type",
    "encode_signed_transaction",
    "decode_signed_transaction",
    "attach_signature",
    "compute_group_id",
    "assign_group_id",
]
