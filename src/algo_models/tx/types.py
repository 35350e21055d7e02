"""
Transaction type enumeration and the nested structures used by
transaction kinds.
"""

from enum import Enum, IntEnum
from typing import Annotated, Optional

from pydantic import Field, StrictBool, StrictBytes, StrictStr

from ..codec.canonical import FixedSize, Uint32, Uint64, WireModel
from ..constants import DIGEST_LENGTH
from ..runtime.address import Address


class TransactionType(str, Enum):
    """Transaction type tags as they appear under the ``type`` key."""
    PAYMENT = "pay"
    ASSET_TRANSFER = "axfer"
    ASSET_CONFIG = "acfg"
    ASSET_FREEZE = "afrz"
    KEY_REGISTRATION = "keyreg"
    APPLICATION_CALL = "appl"
    STATE_PROOF = "stpf"


class OnComplete(IntEnum):
    """Action taken after an application call's approval program runs."""
    NOOP = 0
    OPT_IN = 1
    CLOSE_OUT = 2
    CLEAR_STATE = 3
    UPDATE_APPLICATION = 4
    DELETE_APPLICATION = 5


class AssetParams(WireModel):
    """Parameters of an asset, set on creation and partly mutable afterwards."""

    total: Uint64 = Field(default=0, alias="t")
    decimals: Uint32 = Field(default=0, alias="dc")
    default_frozen: StrictBool = Field(default=False, alias="df")
    unit_name: StrictStr = Field(default="", alias="un")
    asset_name: StrictStr = Field(default="", alias="an")
    url: StrictStr = Field(default="", alias="au")
    metadata_hash: Annotated[Optional[StrictBytes], FixedSize(DIGEST_LENGTH)] = Field(default=None, alias="am")
    manager: Optional[Address] = Field(default=None, alias="m")
    reserve: Optional[Address] = Field(default=None, alias="r")
    freeze: Optional[Address] = Field(default=None, alias="f")
    clawback: Optional[Address] = Field(default=None, alias="c")


class StateSchema(WireModel):
    """Storage allotted to an application's global or local state."""

    num_uints: Uint64 = Field(default=0, alias="nui")
    num_byte_slices: Uint64 = Field(default=0, alias="nbs")


class BoxReference(WireModel):
    """Box an application call may access; index 0 is the called application."""

    app_index: Uint64 = Field(default=0, alias="i")
    name: StrictBytes = Field(default=b"", alias="n")


class StateProofMessage(WireModel):
    """Message attested by a state proof."""

    block_headers_commitment: StrictBytes = Field(default=b"", alias="b")
    voters_commitment: StrictBytes = Field(default=b"", alias="v")
    ln_proven_weight: Uint64 = Field(default=0, alias="P")
    first_attested_round: Uint64 = Field(default=0, alias="f")
    last_attested_round: Uint64 = Field(default=0, alias="l")


__all__ = [
    "TransactionType",
    "OnComplete",
    "AssetParams",
    "StateSchema",
    "BoxReference",
    "StateProofMessage",
]
