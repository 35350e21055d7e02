"""
Algo Models - canonical transaction codec

This package decodes, encodes and verifies Algorand-style transactions and
signed transaction envelopes over the canonical MessagePack wire format.
"""

# Wire format
from .codec import *
from .codec.canonical import WireModel, is_zero_value, omit_zero_values

# Addresses and errors
from .runtime.address import *
from .runtime.errors import *

# Transactions and signature material
from .signatures import *
from .tx import *

# Signing and verification infrastructure
from .crypto import *
from .signers import *

__version__ = "0.1.0"
__all__ = [
    # Version
    "__version__",

    # Wire format
    "encode",
    "decode",
    "decode_prefix",
    "DecodeResult",
    "canonicalize",
    "WireModel",
    "is_zero_value",
    "omit_zero_values",
    "sha512_256",
    "hash_with_prefix",
    "transaction_hash",

    # Addresses
    "Address",
    "ZERO_ADDRESS",
    "derive_address",
    "parse_address",
    "encode_transaction_id",
    "multisig_address",
    "logic_address",

    # Errors
    "ErrorCode",
    "AlgoModelsError",
    "DecodeError",
    "TruncatedInputError",
    "TrailingBytesError",
    "UnsupportedTagError",
    "UnknownTransactionTypeError",
    "MissingFieldError",
    "NoteTooLargeError",
    "InvalidDigestLengthError",
    "InvalidValidityWindowError",
    "AmbiguousOrMissingSignatureError",
    "AddressError",
    "ChecksumMismatchError",
    "MalformedAddressError",
    "VerificationError",
    "SigningError",
    "Ed25519Error",
    "MultisigError",
    "GroupError",

    # Signatures
    "Ed25519Signature",
    "MultisigSubsignature",
    "MultisigSignature",
    "LogicSignature",
    "Signature",

    # Transactions
    "TransactionType",
    "OnComplete",
    "AssetParams",
    "StateSchema",
    "BoxReference",
    "StateProofMessage",
    "TransactionHeader",
    "TransactionBase",
    "PaymentTransaction",
    "AssetTransferTransaction",
    "AssetConfigTransaction",
    "AssetFreezeTransaction",
    "KeyRegistrationTransaction",
    "ApplicationCallTransaction",
    "StateProofTransaction",
    "Transaction",
    "SignedTransaction",
    "register_transaction_type",
    "lookup_transaction_type",
    "registered_transaction_types",
    "derive_transaction_type",
    "encode_transaction",
    "decode_transaction",
    "bytes_for_signing",
    "transaction_id",
    "transaction_id_string",
    "get_encoded_transaction_type",
    "encode_signed_transaction",
    "decode_signed_transaction",
    "attach_signature",
    "compute_group_id",
    "assign_group_id",

    # Crypto
    "Ed25519KeyPair",
    "Ed25519PublicKey",
    "Ed25519PrivateKey",
    "SignatureScheme",
    "Ed25519Scheme",

    # Signers and verification
    "Signer",
    "Ed25519Signer",
    "MultisigAccount",
    "merge_multisig_transactions",
    "LogicSigAccount",
    "VerificationResult",
    "Verifier",
    "verify_signed_transaction",
]
