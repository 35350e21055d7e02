"""
Signed transaction envelope.

The envelope map carries the transaction under ``txn`` and exactly one of
``sig``, ``msig`` or ``lsig``. A rekeyed account additionally names its
authorizer under ``sgnr``.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..codec import reader, writer
from ..codec.canonical import is_zero_value
from ..runtime.address import Address
from ..runtime.errors import (
    AmbiguousOrMissingSignatureError,
    MissingFieldError,
    UnsupportedTagError,
)
from ..signatures import SIGNATURE_VARIANTS, Signature
from .registry import transaction_from_raw
from .transaction import TransactionBase

logger = logging.getLogger(__name__)

TXN_KEY = "txn"
AUTH_ADDRESS_KEY = "sgnr"
SIGNATURE_KEYS = tuple(variant.envelope_key for variant in SIGNATURE_VARIANTS)
ENVELOPE_KEYS = (TXN_KEY, AUTH_ADDRESS_KEY) + SIGNATURE_KEYS


class SignedTransaction(BaseModel):
    """
    A transaction paired with exactly one signature variant.

    Attributes:
        transaction: The signed transaction
        signature: Ed25519, multisig or logic signature
        auth_address: Authorizing address when it differs from the sender
    """

    model_config = ConfigDict(frozen=True)

    transaction: TransactionBase
    signature: Signature
    auth_address: Optional[Address] = Field(default=None)

    @property
    def authorizer(self) -> Address:
        """Address whose authorization the signature must prove."""
        if self.auth_address is not None and not self.auth_address.is_zero():
            return self.auth_address
        return self.transaction.sender

    @property
    def signature_kind(self) -> str:
        """Envelope key of the signature variant (``sig``, ``msig`` or ``lsig``)."""
        return self.signature.envelope_key

    def to_raw(self) -> Dict[str, Any]:
        raw = {
            TXN_KEY: self.transaction.to_raw(),
            self.signature.envelope_key: self.signature.envelope_value(),
        }
        if not is_zero_value(self.auth_address):
            raw[AUTH_ADDRESS_KEY] = self.auth_address.public_key
        return raw

    @classmethod
    def from_raw(cls, raw: Any) -> SignedTransaction:
        """
        Build a signed transaction from a raw envelope map.

        Raises:
            UnsupportedTagError: If the envelope is not a map or has unknown keys
            MissingFieldError: If ``txn`` is absent
            AmbiguousOrMissingSignatureError: Unless exactly one signature key is present
        """
        if not isinstance(raw, dict):
            raise UnsupportedTagError(
                f"Signed transaction must be a map, got {type(raw).__name__}",
                {"context": "signed transaction", "type": type(raw).__name__},
            )
        unknown = sorted(str(key) for key in raw if key not in ENVELOPE_KEYS)
        if unknown:
            raise UnsupportedTagError(
                f"Unrecognized field(s) in signed transaction: {', '.join(unknown)}",
                {"context": "signed transaction", "fields": unknown},
            )
        if TXN_KEY not in raw:
            raise MissingFieldError(TXN_KEY, "signed transaction")

        present = [key for key in SIGNATURE_KEYS if key in raw]
        if len(present) != 1:
            raise AmbiguousOrMissingSignatureError(
                "Signed transaction must carry exactly one of 'sig', 'msig', 'lsig'"
                f" (found {len(present)})",
                {"context": "signed transaction", "fields": present},
            )

        key = present[0]
        variant = next(v for v in SIGNATURE_VARIANTS if v.envelope_key == key)
        logger.debug(f"Decoding signed transaction with '{key}' signature")

        transaction = transaction_from_raw(raw[TXN_KEY], TXN_KEY)
        signature = variant.from_envelope_value(raw[key], key)

        auth_address = None
        if AUTH_ADDRESS_KEY in raw:
            value = raw[AUTH_ADDRESS_KEY]
            if not isinstance(value, bytes):
                raise UnsupportedTagError(
                    f"'{AUTH_ADDRESS_KEY}' must be a byte string, got {type(value).__name__}",
                    {"context": "signed transaction", "field": AUTH_ADDRESS_KEY},
                )
            auth_address = Address(value)

        return cls(transaction=transaction, signature=signature, auth_address=auth_address)

    def encode(self) -> bytes:
        """Canonical encoding of the envelope."""
        return writer.encode(self.to_raw())

    @classmethod
    def decode(cls, data: bytes) -> SignedTransaction:
        """Decode one complete envelope; trailing bytes are an error."""
        return cls.from_raw(reader.decode(data))


__all__ = [
    "SignedTransaction",
    "ENVELOPE_KEYS",
    "SIGNATURE_KEYS",
]
