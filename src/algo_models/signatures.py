"""
Signature variants carried by a signed transaction envelope.

A signed transaction holds exactly one of:

- ``Ed25519Signature``: a single 64-byte signature (envelope key ``sig``)
- ``MultisigSignature``: version, threshold and ordered sub-signatures (``msig``)
- ``LogicSignature``: a logic program with optional arguments and an optional
  delegating signature or multisig over the program (``lsig``)

A logic signature never nests another logic signature.
"""

from __future__ import annotations
from typing import Annotated, Any, ClassVar, Dict, Optional, Tuple, Union

from pydantic import Field, StrictBytes, model_validator

from .codec.canonical import FixedSize, Uint8, WireModel
from .codec.hashes import DigestFunction
from .constants import PUBLIC_KEY_LENGTH, SIGNATURE_LENGTH
from .runtime.address import Address, multisig_address
from .runtime.errors import AmbiguousOrMissingSignatureError


class Ed25519Signature(WireModel):
    """Single Ed25519 signature."""

    envelope_key: ClassVar[str] = "sig"

    signature: Annotated[StrictBytes, FixedSize(SIGNATURE_LENGTH)] = Field(alias="sig")

    def envelope_value(self) -> bytes:
        return self.signature

    @classmethod
    def from_envelope_value(cls, value: Any, context: str) -> Ed25519Signature:
        return cls.build({"sig": value}, context)


class MultisigSubsignature(WireModel):
    """One ordered key slot of a multisig account, optionally signed."""

    required_fields = ("pk",)

    public_key: Annotated[StrictBytes, FixedSize(PUBLIC_KEY_LENGTH)] = Field(alias="pk")
    signature: Annotated[Optional[StrictBytes], FixedSize(SIGNATURE_LENGTH)] = Field(default=None, alias="s")

    @property
    def address(self) -> Address:
        return Address(self.public_key)


class MultisigSignature(WireModel):
    """Threshold signature over an ordered list of public keys."""

    envelope_key: ClassVar[str] = "msig"
    nested_fields = {"subsig": MultisigSubsignature}
    required_fields = ("v", "thr", "subsig")

    version: Uint8 = Field(default=0, alias="v")
    threshold: Uint8 = Field(default=0, alias="thr")
    subsignatures: Tuple[MultisigSubsignature, ...] = Field(default=(), alias="subsig")

    @property
    def public_keys(self) -> Tuple[bytes, ...]:
        return tuple(sub.public_key for sub in self.subsignatures)

    @property
    def signature_count(self) -> int:
        """Number of slots carrying a signature."""
        return sum(1 for sub in self.subsignatures if sub.signature is not None)

    def address(self, digest: Optional[DigestFunction] = None) -> Address:
        """Address of the multisig account these keys form."""
        return multisig_address(self.version, self.threshold, self.public_keys, digest)

    def envelope_value(self) -> Dict[str, Any]:
        return self.to_raw()

    @classmethod
    def from_envelope_value(cls, value: Any, context: str) -> MultisigSignature:
        return cls.from_raw(value, context)


class LogicSignature(WireModel):
    """Logic program authorizing a transaction, optionally delegated by a signature."""

    envelope_key: ClassVar[str] = "lsig"
    nested_fields = {"msig": MultisigSignature}
    required_fields = ("l",)

    program: StrictBytes = Field(default=b"", alias="l")
    args: Tuple[StrictBytes, ...] = Field(default=(), alias="arg")
    signature: Annotated[Optional[StrictBytes], FixedSize(SIGNATURE_LENGTH)] = Field(default=None, alias="sig")
    multisig: Optional[MultisigSignature] = Field(default=None, alias="msig")

    @model_validator(mode="after")
    def check_single_delegation(self) -> LogicSignature:
        if self.signature is not None and self.multisig is not None:
            raise AmbiguousOrMissingSignatureError(
                "Logic signature carries both 'sig' and 'msig'",
                {"context": "lsig", "fields": ["msig", "sig"]},
            )
        return self

    @property
    def is_delegated(self) -> bool:
        return self.signature is not None or self.multisig is not None

    @classmethod
    def from_raw(cls, raw: Any, context: Optional[str] = None) -> LogicSignature:
        context = context or "lsig"
        # Depth bound: the delegating signature of a program is never itself a program
        if isinstance(raw, dict) and "lsig" in raw:
            raise AmbiguousOrMissingSignatureError(
                "Logic signature may not nest another logic signature",
                {"context": context, "fields": ["lsig"]},
            )
        return super().from_raw(raw, context)

    def envelope_value(self) -> Dict[str, Any]:
        return self.to_raw()

    @classmethod
    def from_envelope_value(cls, value: Any, context: str) -> LogicSignature:
        return cls.from_raw(value, context)


Signature = Union[Ed25519Signature, MultisigSignature, LogicSignature]

SIGNATURE_VARIANTS = (Ed25519Signature, MultisigSignature, LogicSignature)


__all__ = [
    "Ed25519Signature",
    "MultisigSubsignature",
    "MultisigSignature",
    "LogicSignature",
    "Signature",
    "SIGNATURE_VARIANTS",
]
