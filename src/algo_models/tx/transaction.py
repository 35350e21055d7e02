"""
Transaction kinds.

Every kind is a frozen model holding the shared ``TransactionHeader`` plus
its own fields. On the wire both sit in one flat map together with the
``type`` tag. New kinds are added by defining another model and decorating
it with ``register_transaction_type``.
"""

from __future__ import annotations
import logging
from typing import Annotated, Any, ClassVar, Dict, Optional, Tuple, Union

from pydantic import Field, StrictBool, StrictBytes, StrictInt, StrictStr, field_validator, model_validator

from ..codec import writer
from ..codec.canonical import FixedSize, Uint32, Uint64, WireModel
from ..codec.hashes import DigestFunction, transaction_hash
from ..constants import PUBLIC_KEY_LENGTH, STATE_PROOF_KEY_LENGTH
from ..runtime.address import Address, encode_transaction_id
from ..runtime.errors import MissingFieldError, UnsupportedTagError
from .header import TransactionHeader
from .registry import TYPE_KEY, register_transaction_type
from .types import (
    AssetParams,
    BoxReference,
    OnComplete,
    StateProofMessage,
    StateSchema,
    TransactionType,
)

logger = logging.getLogger(__name__)


class TransactionBase(WireModel):
    """Shared behaviour of all transaction kinds."""

    transaction_type: ClassVar[TransactionType]

    header: TransactionHeader

    @classmethod
    def wire_keys(cls) -> Dict[str, str]:
        """Wire keys of the kind-specific fields only."""
        keys = super().wire_keys()
        keys.pop("header", None)
        return keys

    @property
    def sender(self) -> Address:
        return self.header.sender

    @property
    def fee(self) -> int:
        return self.header.fee

    def to_raw(self) -> Dict[str, Any]:
        """Flatten header and kind fields into one map with the type tag."""
        raw = super().to_raw()
        raw.update(raw.pop("header", {}))
        raw[TYPE_KEY] = self.transaction_type.value
        return raw

    @classmethod
    def from_raw(cls, raw: Any, context: Optional[str] = None):
        context = context or "txn"
        if not isinstance(raw, dict):
            raise UnsupportedTagError(
                f"{context} must be a map, got {type(raw).__name__}",
                {"context": context, "type": type(raw).__name__},
            )
        header_keys = TransactionHeader.wire_keys()
        header_raw = {key: value for key, value in raw.items() if key in header_keys}
        kind_raw = {
            key: value for key, value in raw.items()
            if key not in header_keys and key != TYPE_KEY
        }
        values = cls.collect_fields(kind_raw, context)
        values["header"] = TransactionHeader.from_raw(header_raw, context)
        return cls.build(values, context)

    def encode(self) -> bytes:
        """Canonical encoding of the transaction."""
        return writer.encode(self.to_raw())

    def raw_id(self, digest: Optional[DigestFunction] = None) -> bytes:
        """32-byte transaction id: digest of ``"TX" || encode()``."""
        return transaction_hash(self.encode(), digest)

    def id(self, digest: Optional[DigestFunction] = None) -> str:
        """Transaction id as base-32 text."""
        return encode_transaction_id(self.raw_id(digest))


@register_transaction_type
class PaymentTransaction(TransactionBase):
    """
    Moves microunits from sender to receiver.

    ``close_remainder_to`` closes the sender account, sending everything left
    to that address. A pure close carries no receiver and a zero amount.
    """

    transaction_type: ClassVar[TransactionType] = TransactionType.PAYMENT

    receiver: Optional[Address] = Field(default=None, alias="rcv")
    amount: Uint64 = Field(default=0, alias="amt")
    close_remainder_to: Optional[Address] = Field(default=None, alias="close")

    @classmethod
    def check_required(cls, raw, context):
        if "rcv" in raw:
            return
        if "close" in raw and not raw.get("amt"):
            return
        raise MissingFieldError("rcv", context)

    @model_validator(mode="after")
    def check_receiver(self) -> PaymentTransaction:
        has_receiver = self.receiver is not None and not self.receiver.is_zero()
        is_close = self.close_remainder_to is not None and not self.close_remainder_to.is_zero()
        if not has_receiver and not (is_close and self.amount == 0):
            raise MissingFieldError("rcv", type(self).__name__)
        return self


@register_transaction_type
class AssetTransferTransaction(TransactionBase):
    """
    Moves units of an asset.

    A zero-amount transfer to oneself opts the account in to the asset.
    ``asset_sender`` is set only for clawback transfers.
    """

    transaction_type: ClassVar[TransactionType] = TransactionType.ASSET_TRANSFER
    required_fields = ("xaid",)

    asset_id: Uint64 = Field(default=0, alias="xaid")
    amount: Uint64 = Field(default=0, alias="aamt")
    receiver: Optional[Address] = Field(default=None, alias="arcv")
    asset_sender: Optional[Address] = Field(default=None, alias="asnd")
    close_remainder_to: Optional[Address] = Field(default=None, alias="aclose")


@register_transaction_type
class AssetConfigTransaction(TransactionBase):
    """Creates (``asset_id`` 0), reconfigures or destroys (no params) an asset."""

    transaction_type: ClassVar[TransactionType] = TransactionType.ASSET_CONFIG
    nested_fields = {"apar": AssetParams}

    asset_id: Uint64 = Field(default=0, alias="caid")
    params: Optional[AssetParams] = Field(default=None, alias="apar")


@register_transaction_type
class AssetFreezeTransaction(TransactionBase):
    """Freezes or unfreezes an account's holding of an asset."""

    transaction_type: ClassVar[TransactionType] = TransactionType.ASSET_FREEZE
    required_fields = ("faid", "fadd")

    asset_id: Uint64 = Field(default=0, alias="faid")
    freeze_target: Optional[Address] = Field(default=None, alias="fadd")
    frozen: StrictBool = Field(default=False, alias="afrz")


@register_transaction_type
class KeyRegistrationTransaction(TransactionBase):
    """Registers participation keys, or takes the account offline when empty."""

    transaction_type: ClassVar[TransactionType] = TransactionType.KEY_REGISTRATION

    vote_key: Annotated[Optional[StrictBytes], FixedSize(PUBLIC_KEY_LENGTH)] = Field(default=None, alias="votekey")
    selection_key: Annotated[Optional[StrictBytes], FixedSize(PUBLIC_KEY_LENGTH)] = Field(default=None, alias="selkey")
    state_proof_key: Annotated[Optional[StrictBytes], FixedSize(STATE_PROOF_KEY_LENGTH)] = Field(
        default=None, alias="sprfkey"
    )
    vote_first: Uint64 = Field(default=0, alias="votefst")
    vote_last: Uint64 = Field(default=0, alias="votelst")
    vote_key_dilution: Uint64 = Field(default=0, alias="votekd")
    non_participation: StrictBool = Field(default=False, alias="nonpart")


@register_transaction_type
class ApplicationCallTransaction(TransactionBase):
    """Creates (``app_id`` 0) or calls an application."""

    transaction_type: ClassVar[TransactionType] = TransactionType.APPLICATION_CALL
    nested_fields = {"apgs": StateSchema, "apls": StateSchema, "apbx": BoxReference}

    app_id: Uint64 = Field(default=0, alias="apid")
    on_complete: OnComplete = Field(default=OnComplete.NOOP, alias="apan")
    approval_program: StrictBytes = Field(default=b"", alias="apap")
    clear_state_program: StrictBytes = Field(default=b"", alias="apsu")
    app_args: Tuple[StrictBytes, ...] = Field(default=(), alias="apaa")
    accounts: Tuple[Address, ...] = Field(default=(), alias="apat")
    foreign_apps: Tuple[Uint64, ...] = Field(default=(), alias="apfa")
    foreign_assets: Tuple[Uint64, ...] = Field(default=(), alias="apas")
    global_state_schema: Optional[StateSchema] = Field(default=None, alias="apgs")
    local_state_schema: Optional[StateSchema] = Field(default=None, alias="apls")
    extra_program_pages: Uint32 = Field(default=0, alias="apep")
    boxes: Tuple[BoxReference, ...] = Field(default=(), alias="apbx")

    @field_validator("on_complete", mode="before")
    @classmethod
    def check_on_complete(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"on-completion action must be an integer, got {type(value).__name__}")
        return value


@register_transaction_type
class StateProofTransaction(TransactionBase):
    """
    Carries a state proof.

    The proof body is kept as the canonical tree it arrived in; checking it
    is a consensus concern.
    """

    transaction_type: ClassVar[TransactionType] = TransactionType.STATE_PROOF
    nested_fields = {"spmsg": StateProofMessage}

    state_proof_type: Uint64 = Field(default=0, alias="sptype")
    state_proof: Dict[Union[StrictStr, StrictInt], Any] = Field(default_factory=dict, alias="sp")
    message: Optional[StateProofMessage] = Field(default=None, alias="spmsg")


Transaction = Union[
    PaymentTransaction,
    AssetTransferTransaction,
    AssetConfigTransaction,
    AssetFreezeTransaction,
    KeyRegistrationTransaction,
    ApplicationCallTransaction,
    StateProofTransaction,
]


__all__ = [
    "TransactionBase",
    "PaymentTransaction",
    "AssetTransferTransaction",
    "AssetConfigTransaction",
    "AssetFreezeTransaction",
    "KeyRegistrationTransaction",
    "ApplicationCallTransaction",
    "StateProofTransaction",
    "Transaction",
]
