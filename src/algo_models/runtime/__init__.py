"""Runtime helpers: address type and error model."""

from .address import (
    Address,
    ZERO_ADDRESS,
    derive_address,
    parse_address,
    encode_transaction_id,
    multisig_address,
    logic_address,
)
from .errors import AlgoModelsError, ErrorCode

__all__ = [
    "Address",
    "ZERO_ADDRESS",
    "derive_address",
    "parse_address",
    "encode_transaction_id",
    "multisig_address",
    "logic_address",
    "AlgoModelsError",
    "ErrorCode",
]
