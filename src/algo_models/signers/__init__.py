"""
Signing and verification.

Signers build signature material for the three envelope variants; the
verifier checks it with injected primitives.
"""

from .signer import Signer, Ed25519Signer
from .multisig import MultisigAccount, merge_multisigs, merge_multisig_transactions
from .logicsig import LogicSigAccount
from .verifier import VerificationResult, Verifier, verify_signed_transaction

__all__ = [
    "Signer",
    "Ed25519Signer",
    "MultisigAccount",
    "merge_multisigs",
    "merge_multisig_transactions",
    "LogicSigAccount",
    "VerificationResult",
    "Verifier",
    "verify_signed_transaction",
]
