"""
Capability interfaces for the external cryptographic primitives.

The verifier never resolves a global crypto backend; it is handed a
``SignatureScheme`` and a digest callable, so tests can substitute
deterministic fakes.
"""

from typing import Protocol, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..codec.hashes import DigestFunction, sha512_256
from ..constants import PUBLIC_KEY_LENGTH, SIGNATURE_LENGTH


@runtime_checkable
class SignatureScheme(Protocol):
    """Synchronous, reentrant sign/verify capability."""

    def sign(self, private_key: bytes, message: bytes) -> bytes:
        """Sign ``message`` with a raw private key."""
        ...

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """Return True if ``signature`` over ``message`` is valid for ``public_key``."""
        ...


class Ed25519Scheme:
    """Ed25519 via the ``cryptography`` package. Holds no state."""

    def sign(self, private_key: bytes, message: bytes) -> bytes:
        return CryptoEd25519PrivateKey.from_private_bytes(private_key).sign(message)

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        if len(public_key) != PUBLIC_KEY_LENGTH or len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            CryptoEd25519PublicKey.from_public_bytes(public_key).verify(signature, message)
        except (InvalidSignature, ValueError):
            return False
        return True

    def __repr__(self) -> str:
        return "Ed25519Scheme()"


def default_signature_scheme() -> SignatureScheme:
    """The Ed25519 scheme used when none is injected."""
    return Ed25519Scheme()


def default_digest() -> DigestFunction:
    """SHA-512/256, used when no digest is injected."""
    return sha512_256


__all__ = [
    "DigestFunction",
    "SignatureScheme",
    "Ed25519Scheme",
    "default_signature_scheme",
    "default_digest",
]
