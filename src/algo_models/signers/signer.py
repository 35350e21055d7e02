"""
Signer interface and the Ed25519 signer.

A signer owns one key and produces Ed25519 signatures over the two signing
contexts: transactions (``"TX" || encode(txn)``) and logic programs
(``"TX" || program``).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging
from typing import Optional, Union

from ..constants import PROGRAM_SIGNING_PREFIX
from ..crypto.ed25519 import Ed25519KeyPair, Ed25519PrivateKey
from ..crypto.primitives import SignatureScheme, default_signature_scheme
from ..runtime.address import Address
from ..runtime.errors import Ed25519Error
from ..signatures import Ed25519Signature
from ..tx.codec import bytes_for_signing
from ..tx.signed import SignedTransaction
from ..tx.transaction import TransactionBase

logger = logging.getLogger(__name__)


class Signer(ABC):
    """
    Base signer interface.

    Subclasses provide the raw ``sign`` operation and the public key; the
    message construction for each signing context lives here.
    """

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        Args:
            message: Complete message including its domain prefix

        Returns:
            64-byte signature
        """
        pass

    @abstractmethod
    def get_public_key(self) -> bytes:
        """
        Get the public key bytes.

        Returns:
            32-byte public key
        """
        pass

    @property
    def address(self) -> Address:
        """Address of the signing key."""
        return Address(self.get_public_key())

    def sign_transaction(self, transaction: TransactionBase) -> SignedTransaction:
        """
        Sign a transaction directly.

        When the key's address differs from the sender (a rekeyed account)
        the envelope names it under ``sgnr``.

        Args:
            transaction: Transaction to sign

        Returns:
            Signed envelope carrying an Ed25519 signature
        """
        signature = Ed25519Signature(signature=self.sign(bytes_for_signing(transaction)))
        auth_address = None
        if self.address != transaction.sender:
            logger.debug(f"Signing for {transaction.sender} as rekeyed authorizer {self.address}")
            auth_address = self.address
        return SignedTransaction(transaction=transaction, signature=signature, auth_address=auth_address)

    def sign_program(self, program: bytes) -> bytes:
        """
        Sign a logic program to delegate this account's authority to it.

        Args:
            program: Compiled program bytes

        Returns:
            64-byte signature over ``"TX" || program``
        """
        return self.sign(PROGRAM_SIGNING_PREFIX + program)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.address}')"


class Ed25519Signer(Signer):
    """Ed25519 signer backed by a signature scheme."""

    def __init__(self, key: Union[Ed25519PrivateKey, Ed25519KeyPair, bytes],
                 signature_scheme: Optional[SignatureScheme] = None):
        """
        Initialize Ed25519 signer.

        Args:
            key: Private key, key pair or 32-byte private key seed
            signature_scheme: Signing primitive, defaults to Ed25519 via ``cryptography``

        Raises:
            Ed25519Error: If the key is invalid
        """
        if isinstance(key, Ed25519KeyPair):
            key = key.private_key
        elif isinstance(key, (bytes, bytearray)):
            key = Ed25519PrivateKey(bytes(key))
        elif not isinstance(key, Ed25519PrivateKey):
            raise Ed25519Error(f"Unsupported private key type: {type(key).__name__}")

        self.private_key = key
        self.public_key = key.public_key()
        self.signature_scheme = signature_scheme or default_signature_scheme()

    @classmethod
    def generate(cls) -> Ed25519Signer:
        """Create a signer for a new random key."""
        return cls(Ed25519PrivateKey.generate())

    def get_public_key(self) -> bytes:
        return self.public_key.to_bytes()

    def sign(self, message: bytes) -> bytes:
        return self.signature_scheme.sign(self.private_key.to_bytes(), message)


__all__ = [
    "Signer",
    "Ed25519Signer",
]
