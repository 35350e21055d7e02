"""
Logic signature accounts.

A program authorizes transactions either as its own escrow account (the
program address is the sender) or on behalf of an account that delegated
to it by signing the program bytes, singly or as a multisig.
"""

from __future__ import annotations
import logging
from typing import Optional, Sequence

from ..codec.hashes import DigestFunction
from ..runtime.address import Address, logic_address
from ..runtime.errors import MultisigError, SigningError
from ..signatures import LogicSignature, MultisigSignature
from ..tx.signed import SignedTransaction
from ..tx.transaction import TransactionBase
from .multisig import MultisigAccount, merge_multisigs
from .signer import Signer

logger = logging.getLogger(__name__)


class LogicSigAccount:
    """
    Program plus arguments, optionally delegated.

    Delegating returns a new account; instances are never changed in place.
    """

    def __init__(self, program: bytes, args: Sequence[bytes] = (),
                 signature: Optional[bytes] = None,
                 delegator: Optional[Address] = None,
                 multisig: Optional[MultisigSignature] = None):
        """
        Initialize logic signature account.

        Args:
            program: Compiled program bytes
            args: Program arguments
            signature: Delegating signature over the program
            delegator: Address that produced ``signature``
            multisig: Delegating multisig over the program
        """
        if not program:
            raise SigningError("Logic signature program must not be empty")
        if signature is not None and multisig is not None:
            raise SigningError("Logic signature cannot be delegated by both a key and a multisig")
        if signature is not None and delegator is None:
            raise SigningError("A delegating signature needs the delegator address")

        self.program = bytes(program)
        self.args = tuple(bytes(arg) for arg in args)
        self.signature = signature
        self.delegator = delegator
        self.multisig = multisig

    @property
    def is_delegated(self) -> bool:
        return self.signature is not None or self.multisig is not None

    def address(self, digest: Optional[DigestFunction] = None) -> Address:
        """
        Address this logic signature authorizes for.

        Returns:
            The delegating account's address when delegated, else the program's
            own escrow address
        """
        if self.signature is not None:
            return self.delegator
        if self.multisig is not None:
            return self.multisig.address(digest)
        return logic_address(self.program, digest)

    def program_address(self, digest: Optional[DigestFunction] = None) -> Address:
        """Escrow address of the program itself."""
        return logic_address(self.program, digest)

    def delegate(self, signer: Signer) -> LogicSigAccount:
        """
        Delegate a single-key account's authority to the program.

        Args:
            signer: Key of the delegating account

        Returns:
            New account carrying the delegating signature
        """
        logger.debug(f"{signer.address} delegating to program {self.program_address()}")
        return LogicSigAccount(
            self.program, self.args,
            signature=signer.sign_program(self.program),
            delegator=signer.address,
        )

    def delegate_multisig(self, account: MultisigAccount, signers: Sequence[Signer]) -> LogicSigAccount:
        """
        Delegate a multisig account's authority to the program.

        Signatures already present from an earlier delegation by the same
        account are kept.

        Args:
            account: Delegating multisig account
            signers: Members signing the program

        Returns:
            New account carrying the delegating multisig

        Raises:
            MultisigError: If no signers are given or a signer is not a member
        """
        if not signers:
            raise MultisigError("Multisig delegation needs at least one signer")

        partials = [account.sign_program(self.program, signer) for signer in signers]
        if self.multisig is not None:
            partials.insert(0, self.multisig)
        return LogicSigAccount(self.program, self.args, multisig=merge_multisigs(partials))

    def logic_signature(self) -> LogicSignature:
        """Envelope form of this account."""
        return LogicSignature(
            program=self.program,
            args=self.args,
            signature=self.signature,
            multisig=self.multisig,
        )

    def sign_transaction(self, transaction: TransactionBase) -> SignedTransaction:
        """
        Authorize a transaction with the logic signature.

        The envelope names the authorizer under ``sgnr`` when it differs from
        the sender.
        """
        authorizer = self.address()
        auth_address = authorizer if authorizer != transaction.sender else None
        return SignedTransaction(
            transaction=transaction,
            signature=self.logic_signature(),
            auth_address=auth_address,
        )

    def __repr__(self) -> str:
        kind = "delegated" if self.is_delegated else "escrow"
        return f"LogicSigAccount({kind}, address='{self.address()}')"


__all__ = ["LogicSigAccount"]
