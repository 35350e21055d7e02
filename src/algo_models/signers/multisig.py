"""
Multisig accounts and partial signature handling.

A multisig account is an ordered list of public keys plus a threshold.
Each signer fills its own slot; partially signed envelopes produced
independently are merged slot by slot.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from ..codec.hashes import DigestFunction
from ..constants import MULTISIG_VERSION, PROGRAM_SIGNING_PREFIX, PUBLIC_KEY_LENGTH
from ..runtime.address import Address, multisig_address
from ..runtime.errors import MultisigError
from ..signatures import MultisigSignature, MultisigSubsignature
from ..tx.codec import bytes_for_signing
from ..tx.signed import SignedTransaction
from ..tx.transaction import TransactionBase
from .signer import Signer

logger = logging.getLogger(__name__)


class MultisigAccount:
    """
    Threshold account over an ordered list of Ed25519 public keys.

    The order of keys is part of the account's identity: the same keys in a
    different order form a different address.
    """

    def __init__(self, version: int, threshold: int, public_keys: Sequence[bytes]):
        """
        Initialize multisig account.

        Args:
            version: Multisig format version, currently 1
            threshold: Number of valid signatures required
            public_keys: Ordered 32-byte public keys

        Raises:
            MultisigError: If the parameters cannot form an account
        """
        if version != MULTISIG_VERSION:
            raise MultisigError(f"Unsupported multisig version {version}")
        if not public_keys:
            raise MultisigError("Multisig account needs at least one public key")
        if threshold < 1 or threshold > len(public_keys):
            raise MultisigError(
                f"Threshold {threshold} outside 1..{len(public_keys)}",
                details={"threshold": threshold, "keys": len(public_keys)},
            )
        for i, key in enumerate(public_keys):
            if len(key) != PUBLIC_KEY_LENGTH:
                raise MultisigError(
                    f"Public key {i} must be {PUBLIC_KEY_LENGTH} bytes, got {len(key)}",
                    details={"index": i},
                )

        self.version = version
        self.threshold = threshold
        self.public_keys = tuple(bytes(key) for key in public_keys)

    @classmethod
    def from_signature(cls, multisig: MultisigSignature) -> MultisigAccount:
        """Recover the account described by a multisig signature."""
        return cls(multisig.version, multisig.threshold, multisig.public_keys)

    def address(self, digest: Optional[DigestFunction] = None) -> Address:
        """Address of the account."""
        return multisig_address(self.version, self.threshold, self.public_keys, digest)

    def blank_multisig(self) -> MultisigSignature:
        """Multisig structure with every slot unsigned."""
        return MultisigSignature(
            version=self.version,
            threshold=self.threshold,
            subsignatures=tuple(MultisigSubsignature(public_key=key) for key in self.public_keys),
        )

    def _slot_of(self, signer: Signer) -> int:
        public_key = signer.get_public_key()
        try:
            return self.public_keys.index(public_key)
        except ValueError:
            raise MultisigError(
                f"Signer {signer.address} is not a member of multisig account {self.address()}"
            ) from None

    def _sign(self, message: bytes, signer: Signer) -> MultisigSignature:
        slot = self._slot_of(signer)
        subsignatures = list(self.blank_multisig().subsignatures)
        subsignatures[slot] = MultisigSubsignature(public_key=self.public_keys[slot], signature=signer.sign(message))
        return MultisigSignature(version=self.version, threshold=self.threshold, subsignatures=tuple(subsignatures))

    def sign_transaction(self, transaction: TransactionBase, signer: Signer) -> SignedTransaction:
        """
        Produce a partially signed envelope carrying one member's signature.

        Args:
            transaction: Transaction to sign
            signer: Member of the account

        Returns:
            Signed envelope whose multisig has only the signer's slot filled

        Raises:
            MultisigError: If the signer's key is not in the account
        """
        multisig = self._sign(bytes_for_signing(transaction), signer)
        address = self.address()
        auth_address = address if address != transaction.sender else None
        logger.debug(f"Member {signer.address} signed multisig for {address}")
        return SignedTransaction(transaction=transaction, signature=multisig, auth_address=auth_address)

    def sign_program(self, program: bytes, signer: Signer) -> MultisigSignature:
        """One member's signature over a logic program, in a multisig structure."""
        return self._sign(PROGRAM_SIGNING_PREFIX + program, signer)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MultisigAccount):
            return False
        return (self.version, self.threshold, self.public_keys) == (
            other.version, other.threshold, other.public_keys
        )

    def __hash__(self) -> int:
        return hash((self.version, self.threshold, self.public_keys))

    def __repr__(self) -> str:
        return f"MultisigAccount(version={self.version}, threshold={self.threshold}, keys={len(self.public_keys)})"


def merge_multisigs(multisigs: Sequence[MultisigSignature]) -> MultisigSignature:
    """
    Combine multisig structures over the same account slot by slot.

    Args:
        multisigs: Partial multisigs with identical version, threshold and keys

    Returns:
        Multisig carrying every signature found in any input

    Raises:
        MultisigError: If the accounts differ or a slot carries two different signatures
    """
    if not multisigs:
        raise MultisigError("Nothing to merge")

    first = multisigs[0]
    account = MultisigAccount.from_signature(first)
    merged: List[Optional[bytes]] = [sub.signature for sub in first.subsignatures]

    for other in multisigs[1:]:
        if MultisigAccount.from_signature(other) != account:
            raise MultisigError("Cannot merge multisigs of different accounts")
        for slot, sub in enumerate(other.subsignatures):
            if sub.signature is None:
                continue
            if merged[slot] is not None and merged[slot] != sub.signature:
                raise MultisigError(
                    f"Conflicting signatures for multisig slot {slot}",
                    details={"slot": slot},
                )
            merged[slot] = sub.signature

    return MultisigSignature(
        version=account.version,
        threshold=account.threshold,
        subsignatures=tuple(
            MultisigSubsignature(public_key=key, signature=sig)
            for key, sig in zip(account.public_keys, merged)
        ),
    )


def merge_multisig_transactions(signed_transactions: Sequence[SignedTransaction]) -> SignedTransaction:
    """
    Merge partially signed copies of one multisig transaction.

    Args:
        signed_transactions: Envelopes over the same transaction, each carrying a multisig

    Returns:
        Envelope whose multisig holds the union of all signatures

    Raises:
        MultisigError: If fewer than two envelopes are given, an envelope is not a
            multisig, or the transactions, authorizers or accounts differ
    """
    if len(signed_transactions) < 2:
        raise MultisigError("Merging needs at least two signed transactions")

    first = signed_transactions[0]
    encoded = first.transaction.encode()
    for stxn in signed_transactions:
        if not isinstance(stxn.signature, MultisigSignature):
            raise MultisigError(f"Cannot merge a '{stxn.signature_kind}' signature as multisig")
        if stxn.transaction.encode() != encoded:
            raise MultisigError("Cannot merge signatures over different transactions")
        if stxn.auth_address != first.auth_address:
            raise MultisigError("Cannot merge signatures with different authorizers")

    merged = merge_multisigs([stxn.signature for stxn in signed_transactions])
    logger.debug(f"Merged {len(signed_transactions)} partial multisigs, {merged.signature_count} slots signed")
    return SignedTransaction(transaction=first.transaction, signature=merged, auth_address=first.auth_address)


__all__ = [
    "MultisigAccount",
    "merge_multisigs",
    "merge_multisig_transactions",
]
