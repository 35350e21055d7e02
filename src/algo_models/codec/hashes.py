"""
Hash Functions

SHA-512/256 is the digest used for address checksums, transaction ids,
group ids and multisig/program addresses. Callers that need a different
primitive pass their own ``digest`` callable wherever one is accepted.
"""

from typing import Callable, Optional

from cryptography.hazmat.primitives import hashes

from ..constants import TX_PREFIX

DigestFunction = Callable[[bytes], bytes]


def sha512_256(input_bytes: bytes) -> bytes:
    """
    Compute the SHA-512/256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-512/256 hash as bytes (32 bytes)
    """
    h = hashes.Hash(hashes.SHA512_256())
    h.update(input_bytes)
    return h.finalize()


def hash_with_prefix(prefix: bytes, payload: bytes, digest: Optional[DigestFunction] = None) -> bytes:
    """
    Hash a payload under a domain separation prefix.

    Args:
        prefix: Domain prefix (e.g. ``b"TX"``)
        payload: Bytes to hash after the prefix
        digest: Digest primitive, defaults to SHA-512/256

    Returns:
        Digest of ``prefix || payload``
    """
    return (digest or sha512_256)(prefix + payload)


def transaction_hash(encoded_transaction: bytes, digest: Optional[DigestFunction] = None) -> bytes:
    """Digest of ``"TX" || encoded_transaction``; this is the transaction id."""
    return hash_with_prefix(TX_PREFIX, encoded_transaction, digest)


__all__ = [
    "DigestFunction",
    "sha512_256",
    "hash_with_prefix",
    "transaction_hash",
]
