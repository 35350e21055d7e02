"""
Signed transaction verification.

The verifier is handed its signature and digest primitives instead of
resolving a crypto backend itself. It holds no other state, so one instance
may verify any number of envelopes concurrently.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..codec.hashes import DigestFunction
from ..constants import MULTISIG_VERSION, PROGRAM_SIGNING_PREFIX
from ..crypto.primitives import SignatureScheme, default_digest, default_signature_scheme
from ..runtime.address import Address, logic_address
from ..runtime.errors import ErrorCode, VerificationError
from ..signatures import Ed25519Signature, LogicSignature, MultisigSignature
from ..tx.codec import bytes_for_signing
from ..tx.signed import SignedTransaction

logger = logging.getLogger(__name__)


class VerificationResult(BaseModel):
    """
    Outcome of verifying a signed transaction.

    A failed check is a successful verification call with ``valid`` False;
    it is never raised unless ``raise_for_invalid`` is called.
    """

    model_config = ConfigDict(frozen=True)

    valid: bool
    reason: Optional[ErrorCode] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def ok(cls) -> VerificationResult:
        return cls(valid=True)

    @classmethod
    def invalid(cls, reason: ErrorCode, **details: Any) -> VerificationResult:
        return cls(valid=False, reason=reason, details=details)

    def __bool__(self) -> bool:
        return self.valid

    def raise_for_invalid(self) -> None:
        """
        Raise if the check failed.

        Raises:
            VerificationError: Carrying the failure reason as its code
        """
        if not self.valid:
            raise VerificationError(
                f"Verification failed: {self.reason.name}",
                code=self.reason,
                details=dict(self.details),
            )


class Verifier:
    """Checks the signature material of signed transactions."""

    def __init__(self, signature_scheme: Optional[SignatureScheme] = None,
                 digest: Optional[DigestFunction] = None):
        """
        Initialize verifier.

        Args:
            signature_scheme: Verify primitive, defaults to Ed25519
            digest: Digest used to derive multisig and program addresses,
                defaults to SHA-512/256
        """
        self.signature_scheme = signature_scheme or default_signature_scheme()
        self.digest = digest or default_digest()

    def verify(self, signed: SignedTransaction) -> VerificationResult:
        """
        Verify the signature of a signed transaction.

        Args:
            signed: Decoded envelope; it is not modified

        Returns:
            ``VerificationResult.ok()`` or an invalid result naming the reason
        """
        authorizer = signed.authorizer
        signature = signed.signature

        if isinstance(signature, Ed25519Signature):
            result = self._verify_single(authorizer, bytes_for_signing(signed.transaction), signature.signature)
        elif isinstance(signature, MultisigSignature):
            result = self._verify_multisig(authorizer, bytes_for_signing(signed.transaction), signature)
        elif isinstance(signature, LogicSignature):
            result = self._verify_logic(authorizer, signature)
        else:
            raise TypeError(f"Unsupported signature type: {type(signature).__name__}")

        if result.valid:
            logger.debug(f"Verified '{signed.signature_kind}' signature for {authorizer}")
        else:
            logger.debug(f"Rejected '{signed.signature_kind}' signature for {authorizer}: {result.reason.name}")
        return result

    def _verify_single(self, authorizer: Address, message: bytes, signature: bytes) -> VerificationResult:
        if self.signature_scheme.verify(authorizer.public_key, message, signature):
            return VerificationResult.ok()
        return VerificationResult.invalid(ErrorCode.SIGNATURE_MISMATCH, address=str(authorizer))

    def _verify_multisig(self, authorizer: Address, message: bytes,
                         multisig: MultisigSignature) -> VerificationResult:
        key_count = len(multisig.subsignatures)
        if multisig.version != MULTISIG_VERSION or not 1 <= multisig.threshold <= key_count:
            return VerificationResult.invalid(
                ErrorCode.THRESHOLD_NOT_MET,
                version=multisig.version,
                threshold=multisig.threshold,
                keys=key_count,
            )

        derived = multisig.address(self.digest)
        if derived != authorizer:
            logger.debug(f"Multisig address {derived} does not match authorizer {authorizer}")
            return VerificationResult.invalid(
                ErrorCode.SENDER_MISMATCH, expected=str(authorizer), derived=str(derived)
            )

        # Slot order binds each signature to its key
        valid = sum(
            1 for sub in multisig.subsignatures
            if sub.signature is not None
            and self.signature_scheme.verify(sub.public_key, message, sub.signature)
        )
        if valid < multisig.threshold:
            return VerificationResult.invalid(
                ErrorCode.THRESHOLD_NOT_MET, valid=valid, threshold=multisig.threshold
            )
        return VerificationResult.ok()

    def _verify_logic(self, authorizer: Address, lsig: LogicSignature) -> VerificationResult:
        message = PROGRAM_SIGNING_PREFIX + lsig.program
        if lsig.signature is not None:
            return self._verify_single(authorizer, message, lsig.signature)
        if lsig.multisig is not None:
            return self._verify_multisig(authorizer, message, lsig.multisig)

        program_address = logic_address(lsig.program, self.digest)
        if program_address != authorizer:
            return VerificationResult.invalid(
                ErrorCode.UNAUTHORIZED_LOGIC_SIG,
                expected=str(authorizer),
                derived=str(program_address),
            )
        return VerificationResult.ok()

    def __repr__(self) -> str:
        return f"Verifier(signature_scheme={self.signature_scheme!r})"


def verify_signed_transaction(signed: SignedTransaction,
                              signature_scheme: Optional[SignatureScheme] = None,
                              digest: Optional[DigestFunction] = None) -> VerificationResult:
    """Verify with a one-off verifier; see ``Verifier.verify``."""
    return Verifier(signature_scheme, digest).verify(signed)


__all__ = [
    "VerificationResult",
    "Verifier",
    "verify_signed_transaction",
]
