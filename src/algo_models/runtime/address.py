"""
Address Pydantic custom type for Algorand-style addresses.

An address is a 32-byte public key followed by a 4-byte checksum (the last
four bytes of the key's digest), rendered as unpadded upper-case base-32.
"""

import base64
import binascii
import re
from typing import Any, Iterable, Optional

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from ..codec.hashes import DigestFunction, sha512_256
from ..constants import (
    ADDRESS_LENGTH,
    CHECKSUM_LENGTH,
    DIGEST_LENGTH,
    LOGIC_PREFIX,
    MULTISIG_ADDR_PREFIX,
    PUBLIC_KEY_LENGTH,
)
from .errors import ChecksumMismatchError, MalformedAddressError

_BASE32_ALPHABET = re.compile(r"^[A-Z2-7]+$")


def _b32encode(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=")


def _b32decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 8)
    return base64.b32decode(text + padding)


class Address:
    """Custom Pydantic type for 32-byte public key addresses."""

    __slots__ = ("_public_key",)

    def __init__(self, public_key: bytes):
        if not isinstance(public_key, (bytes, bytearray)):
            raise MalformedAddressError(
                "Address public key must be bytes",
                {"type": type(public_key).__name__},
            )
        if len(public_key) != PUBLIC_KEY_LENGTH:
            raise MalformedAddressError(
                f"Address public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(public_key)}",
                {"expected": PUBLIC_KEY_LENGTH, "actual": len(public_key)},
            )
        self._public_key = bytes(public_key)

    @classmethod
    def from_public_key(cls, public_key: bytes) -> "Address":
        """Create an address from a 32-byte public key."""
        return cls(public_key)

    @classmethod
    def parse(cls, text: str, digest: Optional[DigestFunction] = None) -> "Address":
        """
        Decode address text and verify its checksum.

        Args:
            text: 58-character base-32 address
            digest: Digest primitive used for the checksum

        Returns:
            Address for the encoded public key

        Raises:
            MalformedAddressError: On wrong length or characters outside the alphabet
            ChecksumMismatchError: If the checksum does not match the key
        """
        if not isinstance(text, str):
            raise MalformedAddressError(
                "Address must be a string", {"type": type(text).__name__}
            )
        if len(text) != ADDRESS_LENGTH:
            raise MalformedAddressError(
                f"Address must be {ADDRESS_LENGTH} characters, got {len(text)}",
                {"expected": ADDRESS_LENGTH, "actual": len(text)},
            )
        if not _BASE32_ALPHABET.match(text):
            raise MalformedAddressError("Address contains characters outside the base-32 alphabet",
                                        {"address": text})
        try:
            raw = _b32decode(text)
        except binascii.Error as e:
            raise MalformedAddressError("Address is not valid base-32", {"address": text}, cause=e)

        public_key, checksum = raw[:PUBLIC_KEY_LENGTH], raw[PUBLIC_KEY_LENGTH:]
        address = cls(public_key)
        if address.checksum(digest) != checksum:
            raise ChecksumMismatchError(text)
        # Unused trailing bits of the last character must be zero
        if address.encode(digest) != text:
            raise MalformedAddressError("Address is not in canonical form", {"address": text})
        return address

    @property
    def public_key(self) -> bytes:
        """The 32-byte public key."""
        return self._public_key

    def checksum(self, digest: Optional[DigestFunction] = None) -> bytes:
        """Last four bytes of the public key digest."""
        return (digest or sha512_256)(self._public_key)[-CHECKSUM_LENGTH:]

    def encode(self, digest: Optional[DigestFunction] = None) -> str:
        """Render as 58-character base-32 text."""
        return _b32encode(self._public_key + self.checksum(digest))

    def is_zero(self) -> bool:
        """True for the all-zero key, which the wire format omits."""
        return not any(self._public_key)

    def __bytes__(self) -> bytes:
        return self._public_key

    def __str__(self) -> str:
        return self.encode()

    def __repr__(self) -> str:
        return f"Address('{self.encode()}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Address):
            return self._public_key == other._public_key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._public_key)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the Address."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
        )

    @classmethod
    def _validate(cls, value: Any) -> "Address":
        """Accept an Address, 32 raw key bytes or address text."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(bytes(value))
        if isinstance(value, str):
            return cls.parse(value)
        raise MalformedAddressError(
            f"Cannot build an address from {type(value).__name__}",
            {"type": type(value).__name__},
        )


ZERO_ADDRESS = Address(bytes(PUBLIC_KEY_LENGTH))


def derive_address(public_key: bytes) -> Address:
    """Derive the address for a public key; the checksum is computed on rendering."""
    return Address.from_public_key(public_key)


def parse_address(text: str, digest: Optional[DigestFunction] = None) -> Address:
    """Decode address text, rejecting bad checksums and malformed input."""
    return Address.parse(text, digest)


def encode_transaction_id(txid: bytes) -> str:
    """Render a 32-byte transaction id as unpadded base-32 text."""
    if len(txid) != DIGEST_LENGTH:
        raise MalformedAddressError(
            f"Transaction id must be {DIGEST_LENGTH} bytes, got {len(txid)}",
            {"expected": DIGEST_LENGTH, "actual": len(txid)},
        )
    return _b32encode(txid)


def multisig_address(version: int, threshold: int, public_keys: Iterable[bytes],
                     digest: Optional[DigestFunction] = None) -> Address:
    """
    Derive the address of a multisig account.

    Args:
        version: Multisig format version
        threshold: Signatures required
        public_keys: Ordered 32-byte member keys
        digest: Digest primitive, defaults to SHA-512/256

    Returns:
        Address of ``digest("MultisigAddr" || version || threshold || keys)``
    """
    preimage = MULTISIG_ADDR_PREFIX + bytes([version, threshold]) + b"".join(public_keys)
    return Address((digest or sha512_256)(preimage))


def logic_address(program: bytes, digest: Optional[DigestFunction] = None) -> Address:
    """Address controlled by a logic program: ``digest("Program" || program)``."""
    return Address((digest or sha512_256)(LOGIC_PREFIX + program))


__all__ = [
    "Address",
    "ZERO_ADDRESS",
    "derive_address",
    "parse_address",
    "encode_transaction_id",
    "multisig_address",
    "logic_address",
]
