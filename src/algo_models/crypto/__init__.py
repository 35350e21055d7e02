"""
Cryptographic primitives.

Provides Ed25519 keys and the injectable signature / digest capabilities.
"""

from .ed25519 import Ed25519KeyPair, Ed25519PublicKey, Ed25519PrivateKey
from .primitives import (
    DigestFunction,
    SignatureScheme,
    Ed25519Scheme,
    default_signature_scheme,
    default_digest,
)

__all__ = [
    "Ed25519KeyPair",
    "Ed25519PublicKey",
    "Ed25519PrivateKey",
    "DigestFunction",
    "SignatureScheme",
    "Ed25519Scheme",
    "default_signature_scheme",
    "default_digest",
]
