"""
Signed envelope tests.

Envelope decoding, the exactly-one-signature rule, logic signature nesting
and re-encoding.
"""

import pytest

from algo_models.codec import decode, encode
from algo_models.runtime.errors import (
    AmbiguousOrMissingSignatureError,
    ErrorCode,
    InvalidDigestLengthError,
    MissingFieldError,
    UnsupportedTagError,
)
from algo_models.signatures import (
    Ed25519Signature,
    LogicSignature,
    MultisigSignature,
    MultisigSubsignature,
)
from algo_models.tx import (
    PaymentTransaction,
    SignedTransaction,
    attach_signature,
    decode_signed_transaction,
    encode_signed_transaction,
    encode_transaction,
)

PROGRAM = bytes.fromhex("0620010181")


class TestReferenceEnvelope:
    """The canonical payment fixture inside a signature envelope."""

    def test_decode(self, signed_payment_fixture_bytes, payment_fixture_bytes):
        """Test the envelope decodes and the inner transaction re-encodes exactly."""
        signed = decode_signed_transaction(signed_payment_fixture_bytes)
        assert isinstance(signed.transaction, PaymentTransaction)
        assert signed.transaction.fee == 1000
        assert signed.transaction.amount == 200000
        assert isinstance(signed.signature, Ed25519Signature)
        assert signed.signature.signature == bytes(range(64))
        assert signed.signature_kind == "sig"
        assert encode_transaction(signed.transaction) == payment_fixture_bytes

    def test_reencode(self, signed_payment_fixture_bytes):
        signed = decode_signed_transaction(signed_payment_fixture_bytes)
        assert encode_signed_transaction(signed) == signed_payment_fixture_bytes

    def test_authorizer_defaults_to_sender(self, signed_payment_fixture_bytes, fixture_sender):
        signed = decode_signed_transaction(signed_payment_fixture_bytes)
        assert signed.auth_address is None
        assert signed.authorizer == fixture_sender

    def test_truncated(self, signed_payment_fixture_bytes):
        from algo_models.runtime.errors import TruncatedInputError
        with pytest.raises(TruncatedInputError):
            decode_signed_transaction(signed_payment_fixture_bytes[:-1])

    def test_attach_signature(self, payment_fixture_bytes, signed_payment_fixture_bytes):
        """Test wrapping encoded transaction bytes reproduces the envelope."""
        signature = Ed25519Signature(signature=bytes(range(64)))
        assert attach_signature(payment_fixture_bytes, signature) == signed_payment_fixture_bytes


class TestSignatureCount:
    """Exactly one of sig, msig and lsig."""

    def _envelope(self, payment_fixture_bytes):
        return {"txn": decode(payment_fixture_bytes)}

    def test_no_signature(self, payment_fixture_bytes):
        with pytest.raises(AmbiguousOrMissingSignatureError) as exc_info:
            decode_signed_transaction(encode(self._envelope(payment_fixture_bytes)))
        assert exc_info.value.code == ErrorCode.AMBIGUOUS_OR_MISSING_SIGNATURE

    def test_two_signatures(self, payment_fixture_bytes, alice):
        envelope = self._envelope(payment_fixture_bytes)
        envelope["sig"] = bytes(64)
        envelope["lsig"] = {"l": PROGRAM}
        with pytest.raises(AmbiguousOrMissingSignatureError) as exc_info:
            decode_signed_transaction(encode(envelope))
        assert exc_info.value.details["fields"] == ["sig", "lsig"]

    def test_missing_txn(self):
        with pytest.raises(MissingFieldError) as exc_info:
            decode_signed_transaction(encode({"sig": bytes(64)}))
        assert exc_info.value.field == "txn"

    def test_unknown_envelope_key(self, payment_fixture_bytes):
        envelope = self._envelope(payment_fixture_bytes)
        envelope["sig"] = bytes(64)
        envelope["hgi"] = True
        with pytest.raises(UnsupportedTagError):
            decode_signed_transaction(encode(envelope))

    def test_short_signature(self, payment_fixture_bytes):
        envelope = self._envelope(payment_fixture_bytes)
        envelope["sig"] = bytes(63)
        with pytest.raises(InvalidDigestLengthError) as exc_info:
            decode_signed_transaction(encode(envelope))
        assert exc_info.value.field == "sig"

    def test_envelope_not_a_map(self):
        with pytest.raises(UnsupportedTagError):
            decode_signed_transaction(encode(b"\x00" * 64))


class TestMultisigEnvelope:
    """Multisig signature structures."""

    def test_roundtrip_partial(self, make_payment, alice, bob):
        """Test unsigned slots keep their key and drop their signature."""
        multisig = MultisigSignature(
            version=1,
            threshold=2,
            subsignatures=(
                MultisigSubsignature(public_key=alice.public_key_bytes(), signature=b"\x01" * 64),
                MultisigSubsignature(public_key=bob.public_key_bytes()),
            ),
        )
        signed = SignedTransaction(transaction=make_payment(alice.address, bob.address), signature=multisig)
        encoded = encode_signed_transaction(signed)

        raw = decode(encoded)
        assert raw["msig"]["subsig"][1] == {"pk": bob.public_key_bytes()}
        assert raw["msig"]["v"] == 1

        decoded = decode_signed_transaction(encoded)
        assert decoded == signed
        assert decoded.signature.signature_count == 1

    def test_missing_threshold(self, payment_fixture_bytes, alice):
        envelope = {
            "txn": decode(payment_fixture_bytes),
            "msig": {"v": 1, "subsig": [{"pk": alice.public_key_bytes()}]},
        }
        with pytest.raises(MissingFieldError) as exc_info:
            decode_signed_transaction(encode(envelope))
        assert exc_info.value.field == "thr"

    def test_subsignature_needs_key(self, payment_fixture_bytes):
        envelope = {
            "txn": decode(payment_fixture_bytes),
            "msig": {"v": 1, "thr": 1, "subsig": [{"s": bytes(64)}]},
        }
        with pytest.raises(MissingFieldError) as exc_info:
            decode_signed_transaction(encode(envelope))
        assert exc_info.value.field == "pk"


class TestLogicSignatureEnvelope:
    """Logic signatures and their bounded nesting."""

    def test_escrow_roundtrip(self, make_payment, alice, bob):
        lsig = LogicSignature(program=PROGRAM, args=(b"\x01", b"arg"))
        signed = SignedTransaction(transaction=make_payment(alice.address, bob.address), signature=lsig)
        decoded = decode_signed_transaction(encode_signed_transaction(signed))
        assert decoded == signed
        assert not decoded.signature.is_delegated

    def test_delegated_roundtrip(self, make_payment, alice, bob):
        lsig = LogicSignature(program=PROGRAM, signature=b"\x02" * 64)
        signed = SignedTransaction(transaction=make_payment(alice.address, bob.address), signature=lsig)
        decoded = decode_signed_transaction(encode_signed_transaction(signed))
        assert decoded.signature.signature == b"\x02" * 64
        assert decoded.signature.is_delegated

    def test_both_inner_signatures(self, payment_fixture_bytes, alice):
        envelope = {
            "txn": decode(payment_fixture_bytes),
            "lsig": {
                "l": PROGRAM,
                "sig": b"\x01" * 64,
                "msig": {"v": 1, "thr": 1, "subsig": [{"pk": alice.public_key_bytes()}]},
            },
        }
        with pytest.raises(AmbiguousOrMissingSignatureError):
            decode_signed_transaction(encode(envelope))

    def test_nested_logic_signature_rejected(self, payment_fixture_bytes):
        """Test a logic signature cannot carry another logic signature."""
        envelope = {
            "txn": decode(payment_fixture_bytes),
            "lsig": {"l": PROGRAM, "lsig": {"l": PROGRAM}},
        }
        with pytest.raises(AmbiguousOrMissingSignatureError) as exc_info:
            decode_signed_transaction(encode(envelope))
        assert exc_info.value.details["fields"] == ["lsig"]

    def test_program_required(self, payment_fixture_bytes):
        envelope = {"txn": decode(payment_fixture_bytes), "lsig": {"arg": [b"\x01"]}}
        with pytest.raises(MissingFieldError) as exc_info:
            decode_signed_transaction(encode(envelope))
        assert exc_info.value.field == "l"


class TestAuthAddress:
    """Rekeyed accounts name their authorizer."""

    def test_sgnr_roundtrip(self, make_payment, alice, bob, carol):
        signed = SignedTransaction(
            transaction=make_payment(alice.address, bob.address),
            signature=Ed25519Signature(signature=bytes(64)),
            auth_address=carol.address,
        )
        encoded = encode_signed_transaction(signed)
        assert decode(encoded)["sgnr"] == carol.public_key_bytes()

        decoded = decode_signed_transaction(encoded)
        assert decoded.auth_address == carol.address
        assert decoded.authorizer == carol.address

    def test_sgnr_wrong_type(self, payment_fixture_bytes):
        envelope = {"txn": decode(payment_fixture_bytes), "sig": bytes(64), "sgnr": "text"}
        with pytest.raises(UnsupportedTagError):
            decode_signed_transaction(encode(envelope))
