"""
Algorand Models Error Model

This module provides the error handling framework for the codec, the
transaction model and the signature verifier. Every failure carries an
``ErrorCode`` plus minimal diagnostic context (field name, byte offset,
lengths) so callers never have to parse messages.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error kinds reported by this package."""

    # Success
    OK = 0

    # Wire format errors (100-199)
    TRUNCATED_INPUT = 100
    TRAILING_BYTES = 101
    UNSUPPORTED_TAG = 102

    # Transaction model errors (200-299)
    UNKNOWN_TRANSACTION_TYPE = 200
    MISSING_FIELD = 201
    NOTE_TOO_LARGE = 202
    INVALID_DIGEST_LENGTH = 203
    INVALID_VALIDITY_WINDOW = 204

    # Address errors (300-399)
    CHECKSUM_MISMATCH = 300
    MALFORMED_ADDRESS = 301

    # Envelope errors (400-499)
    AMBIGUOUS_OR_MISSING_SIGNATURE = 400

    # Verification outcomes (500-599)
    SIGNATURE_MISMATCH = 500
    THRESHOLD_NOT_MET = 501
    SENDER_MISMATCH = 502
    UNAUTHORIZED_LOGIC_SIG = 503

    # Signing errors (600-699)
    INVALID_KEY = 600
    INVALID_MULTISIG = 601
    INVALID_GROUP = 602


class AlgoModelsError(Exception):
    """
    Base class for all errors raised by this package.

    Not a ``ValueError`` subclass, so pydantic validators pass these
    errors through unwrapped.
    """

    default_code = ErrorCode.OK

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an error.

        Args:
            message: Error message
            code: Error code, defaults to the class's ``default_code``
            details: Diagnostic context (field name, offsets, lengths)
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "kind": self.code.name,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


# =============================================================================
# Decode errors
# =============================================================================

class DecodeError(AlgoModelsError):
    """Bytes could not be turned into a well-formed object."""


class TruncatedInputError(DecodeError):
    """Fewer bytes were available than a declared length requires."""

    default_code = ErrorCode.TRUNCATED_INPUT

    def __init__(self, message: str = "Input ended before a complete value was read",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.TRUNCATED_INPUT, details, cause)


class TrailingBytesError(DecodeError):
    """Bytes remained after a complete top-level value."""

    default_code = ErrorCode.TRAILING_BYTES

    def __init__(self, remaining: int, offset: int, cause: Optional[Exception] = None):
        super().__init__(
            f"{remaining} trailing byte(s) after value ending at offset {offset}",
            ErrorCode.TRAILING_BYTES,
            {"remaining": remaining, "offset": offset},
            cause,
        )
        self.remaining = remaining
        self.offset = offset


class UnsupportedTagError(DecodeError):
    """A type marker or map key is not one of the recognized kinds."""

    default_code = ErrorCode.UNSUPPORTED_TAG

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNSUPPORTED_TAG, details, cause)


class UnknownTransactionTypeError(DecodeError):
    """The ``type`` tag is missing, unregistered, or disagrees with the fields present."""

    default_code = ErrorCode.UNKNOWN_TRANSACTION_TYPE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNKNOWN_TRANSACTION_TYPE, details, cause)


class MissingFieldError(DecodeError):
    """A required wire key is absent."""

    default_code = ErrorCode.MISSING_FIELD

    def __init__(self, field: str, context: str = ""):
        where = f" in {context}" if context else ""
        super().__init__(
            f"Required field '{field}' is missing{where}",
            ErrorCode.MISSING_FIELD,
            {"field": field, "context": context} if context else {"field": field},
        )
        self.field = field


class NoteTooLargeError(DecodeError):
    """The transaction note exceeds the maximum size."""

    default_code = ErrorCode.NOTE_TOO_LARGE

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Note is {size} bytes, limit is {limit}",
            ErrorCode.NOTE_TOO_LARGE,
            {"field": "note", "size": size, "limit": limit},
        )


class InvalidDigestLengthError(DecodeError):
    """A fixed-size byte field has the wrong length."""

    default_code = ErrorCode.INVALID_DIGEST_LENGTH

    def __init__(self, field: str, expected: int, actual: int):
        super().__init__(
            f"Field '{field}' must be {expected} bytes, got {actual}",
            ErrorCode.INVALID_DIGEST_LENGTH,
            {"field": field, "expected": expected, "actual": actual},
        )
        self.field = field


class InvalidValidityWindowError(DecodeError):
    """First-valid round is after last-valid round."""

    default_code = ErrorCode.INVALID_VALIDITY_WINDOW

    def __init__(self, first_valid: int, last_valid: int):
        super().__init__(
            f"First valid round {first_valid} is after last valid round {last_valid}",
            ErrorCode.INVALID_VALIDITY_WINDOW,
            {"first_valid": first_valid, "last_valid": last_valid},
        )


class AmbiguousOrMissingSignatureError(DecodeError):
    """An envelope carries no signature, or more than one kind of signature."""

    default_code = ErrorCode.AMBIGUOUS_OR_MISSING_SIGNATURE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.AMBIGUOUS_OR_MISSING_SIGNATURE, details)


# =============================================================================
# Address errors
# =============================================================================

class AddressError(AlgoModelsError):
    """Address text could not be decoded."""


class ChecksumMismatchError(AddressError):
    """The address checksum does not match its public key."""

    default_code = ErrorCode.CHECKSUM_MISMATCH

    def __init__(self, address: str):
        super().__init__(
            "Address checksum does not match public key",
            ErrorCode.CHECKSUM_MISMATCH,
            {"address": address},
        )


class MalformedAddressError(AddressError):
    """The address has the wrong length or uses characters outside the alphabet."""

    default_code = ErrorCode.MALFORMED_ADDRESS

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MALFORMED_ADDRESS, details, cause)


# =============================================================================
# Verification errors
# =============================================================================

class VerificationError(AlgoModelsError):
    """
    A signature check failed.

    Only raised on request through ``VerificationResult.raise_for_invalid()``;
    the verifier itself reports failures as results.
    """

    default_code = ErrorCode.SIGNATURE_MISMATCH


# =============================================================================
# Signing errors
# =============================================================================

class SigningError(AlgoModelsError):
    """Base exception for building signatures."""


class Ed25519Error(SigningError):
    """Invalid Ed25519 key material."""

    default_code = ErrorCode.INVALID_KEY


class MultisigError(SigningError):
    """Invalid multisig account or incompatible partial signatures."""

    default_code = ErrorCode.INVALID_MULTISIG


class GroupError(SigningError):
    """Transactions cannot be grouped."""

    default_code = ErrorCode.INVALID_GROUP


__all__ = [
    "ErrorCode",
    "AlgoModelsError",
    "DecodeError",
    "TruncatedInputError",
    "TrailingBytesError",
    "UnsupportedTagError",
    "UnknownTransactionTypeError",
    "MissingFieldError",
    "NoteTooLargeError",
    "InvalidDigestLengthError",
    "InvalidValidityWindowError",
    "AmbiguousOrMissingSignatureError",
    "AddressError",
    "ChecksumMismatchError",
    "MalformedAddressError",
    "VerificationError",
    "SigningError",
    "Ed25519Error",
    "MultisigError",
    "GroupError",
]
