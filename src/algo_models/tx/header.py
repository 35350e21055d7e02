"""
Transaction header.

The header holds the fields every transaction kind shares. "Header" only
means these fields are common; on the wire they sit in the same flat map as
the kind-specific fields.
"""

from __future__ import annotations
from typing import Annotated, Optional

from pydantic import Field, StrictBytes, StrictStr, model_validator

from ..codec.canonical import FixedSize, Uint64, WireModel
from ..constants import DIGEST_LENGTH, LEASE_LENGTH, MAX_NOTE_SIZE
from ..runtime.address import Address
from ..runtime.errors import InvalidValidityWindowError, NoteTooLargeError


class TransactionHeader(WireModel):
    """Common fields present on every transaction kind."""

    required_fields = ("snd",)

    sender: Address = Field(alias="snd")
    fee: Uint64 = Field(default=0, alias="fee")
    first_valid: Uint64 = Field(default=0, alias="fv")
    last_valid: Uint64 = Field(default=0, alias="lv")
    genesis_id: StrictStr = Field(default="", alias="gen")
    genesis_hash: Annotated[Optional[StrictBytes], FixedSize(DIGEST_LENGTH)] = Field(default=None, alias="gh")
    note: StrictBytes = Field(default=b"", alias="note")
    lease: Annotated[Optional[StrictBytes], FixedSize(LEASE_LENGTH)] = Field(default=None, alias="lx")
    rekey_to: Optional[Address] = Field(default=None, alias="rekey")
    group: Annotated[Optional[StrictBytes], FixedSize(DIGEST_LENGTH)] = Field(default=None, alias="grp")

    @model_validator(mode="after")
    def check_header(self) -> TransactionHeader:
        if len(self.note) > MAX_NOTE_SIZE:
            raise NoteTooLargeError(len(self.note), MAX_NOTE_SIZE)
        if self.first_valid > self.last_valid:
            raise InvalidValidityWindowError(self.first_valid, self.last_valid)
        return self


__all__ = ["TransactionHeader"]
