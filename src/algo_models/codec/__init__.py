"""
Canonical Binary Codec Module

Encodes and decodes the MessagePack-based wire format with canonical
rules: minimal-width integers, byte-wise sorted map keys and no extension
types.

Key components:
- writer.py: canonical encoder for raw value trees
- reader.py: single-value decoder with truncation / trailing byte reporting
- canonical.py: field omission and typed wire models
- hashes.py: SHA-512/256 and domain-prefixed hashing helpers
"""

from .hashes import sha512_256, hash_with_prefix, transaction_hash
from .reader import DecodeResult, decode, decode_prefix
from .writer import canonicalize, encode

__all__ = [
    "DecodeResult",
    "decode",
    "decode_prefix",
    "encode",
    "canonicalize",
    "sha512_256",
    "hash_with_prefix",
    "transaction_hash",
]
