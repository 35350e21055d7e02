"""
Field omission tests.

Zero-valued fields never reach the wire and absent keys decode to zero values.
"""

import pytest

from algo_models.codec import decode
from algo_models.codec.canonical import is_zero_value, omit_zero_values
from algo_models.runtime.address import ZERO_ADDRESS, Address
from algo_models.tx import (
    AssetConfigTransaction,
    AssetParams,
    KeyRegistrationTransaction,
    PaymentTransaction,
    decode_transaction,
    encode_transaction,
)
from algo_models.tx.types import OnComplete


class TestZeroValues:
    """The zero value of each field type."""

    @pytest.mark.parametrize("value", [0, b"", "", False, [], {}, (), None, ZERO_ADDRESS, OnComplete.NOOP])
    def test_zero(self, value):
        assert is_zero_value(value)

    @pytest.mark.parametrize("value", [1, b"\x00", "a", True, [0], {"a": 0}, OnComplete.OPT_IN])
    def test_not_zero(self, value):
        assert not is_zero_value(value)

    def test_all_zero_fixed_size_bytes(self):
        """Test all-zero bytes count as zero only for fixed-size fields."""
        assert is_zero_value(bytes(32), fixed_size=True)
        assert not is_zero_value(bytes(32))

    def test_omit_zero_values(self):
        assert omit_zero_values({"a": 0, "b": 1, "c": b"", "d": "x"}) == {"b": 1, "d": "x"}


class TestTransactionOmission:
    """Omission applied to typed transactions."""

    def test_zero_fields_not_emitted(self, make_payment, alice, bob):
        """Test zero-valued header and payment fields have no key on the wire."""
        txn = make_payment(alice.address, bob.address, amount=0, fee=0, note=b"")
        raw = decode(encode_transaction(txn))
        assert "amt" not in raw
        assert "fee" not in raw
        assert "note" not in raw
        assert "close" not in raw
        assert "lx" not in raw
        assert "grp" not in raw
        assert "rekey" not in raw
        assert set(raw) == {"fv", "gen", "gh", "lv", "rcv", "snd", "type"}

    def test_all_zero_lease_omitted(self, make_payment, alice, bob):
        """Test an all-zero lease is treated as absent."""
        txn = make_payment(alice.address, bob.address, lease=bytes(32))
        assert txn.header.lease is None
        assert "lx" not in decode(encode_transaction(txn))

    def test_zero_address_omitted(self, make_payment, alice, bob):
        """Test the zero address is treated as absent."""
        txn = make_payment(alice.address, bob.address, rekey_to=ZERO_ADDRESS)
        assert txn.header.rekey_to is None
        assert "rekey" not in decode(encode_transaction(txn))

    @pytest.mark.parametrize("field,key", [
        ("lease", "lx"),
        ("group", "grp"),
        ("genesis_hash", "gh"),
    ])
    def test_all_zero_digest_roundtrip(self, make_payment, alice, bob, field, key):
        """Test an all-zero digest survives encode and decode unchanged."""
        txn = make_payment(alice.address, bob.address, **{field: bytes(32)})
        assert getattr(txn.header, field) is None
        assert key not in decode(encode_transaction(txn))
        assert decode_transaction(encode_transaction(txn)) == txn

    @pytest.mark.parametrize("zero", [ZERO_ADDRESS, bytes(32)])
    def test_zero_rekey_roundtrip(self, make_payment, alice, bob, zero):
        """Test a zero rekey address survives encode and decode unchanged."""
        txn = make_payment(alice.address, bob.address, rekey_to=zero)
        assert decode_transaction(encode_transaction(txn)) == txn

    def test_zero_close_address_roundtrip(self, make_header, alice, bob):
        txn = PaymentTransaction(
            header=make_header(alice.address),
            receiver=bob.address,
            amount=5,
            close_remainder_to=ZERO_ADDRESS,
        )
        assert txn.close_remainder_to is None
        assert decode_transaction(encode_transaction(txn)) == txn

    def test_all_zero_digest_on_wire_decodes_as_absent(self, payment_fixture_bytes):
        """Test an explicit all-zero genesis hash decodes to the same transaction as an absent one."""
        from algo_models.codec import encode
        raw = decode(payment_fixture_bytes)
        raw["gh"] = bytes(32)
        txn = decode_transaction(encode(raw))
        assert txn.header.genesis_hash is None
        assert decode_transaction(encode_transaction(txn)) == txn

    def test_required_zero_key_still_rejected(self):
        """Test normalization leaves required fixed-size keys to the missing-field check."""
        from algo_models.runtime.errors import MissingFieldError
        from algo_models.signatures import MultisigSubsignature
        with pytest.raises(MissingFieldError) as exc_info:
            MultisigSubsignature(public_key=bytes(32))
        assert exc_info.value.field == "pk"

    def test_absent_keys_decode_to_zero(self, make_payment, alice, bob):
        """Test decoding a map without optional keys yields zero values."""
        txn = decode_transaction(encode_transaction(make_payment(alice.address, bob.address, amount=0, fee=0)))
        assert isinstance(txn, PaymentTransaction)
        assert txn.amount == 0
        assert txn.fee == 0
        assert txn.header.note == b""
        assert txn.header.lease is None
        assert txn.close_remainder_to is None

    def test_empty_nested_structure_omitted(self, make_header, alice):
        """Test a nested map holding only zero values is dropped with its key."""
        txn = AssetConfigTransaction(header=make_header(alice.address), asset_id=7, params=AssetParams())
        raw = decode(encode_transaction(txn))
        assert "apar" not in raw
        assert raw["caid"] == 7

    def test_nested_structure_omits_zero_fields(self, make_header, alice):
        """Test omission applies inside nested maps."""
        params = AssetParams(total=1000, unit_name="TOK", manager=alice.address)
        txn = AssetConfigTransaction(header=make_header(alice.address), params=params)
        raw = decode(encode_transaction(txn))
        assert raw["apar"] == {"m": alice.address.public_key, "t": 1000, "un": "TOK"}
        assert "caid" not in raw

    def test_false_flag_omitted(self, make_header, alice):
        """Test a false boolean is left out; a true one is written."""
        offline = KeyRegistrationTransaction(header=make_header(alice.address))
        assert "nonpart" not in decode(encode_transaction(offline))

        nonpart = KeyRegistrationTransaction(header=make_header(alice.address), non_participation=True)
        assert decode(encode_transaction(nonpart))["nonpart"] is True

    def test_explicit_zero_on_wire_decodes(self, payment_fixture_bytes):
        """Test a non-canonical explicit zero entry still decodes to the zero value."""
        from algo_models.codec import encode
        raw = decode(payment_fixture_bytes)
        raw["note"] = b""
        txn = decode_transaction(encode(raw))
        assert txn.header.note == b""
        assert "note" not in decode(encode_transaction(txn))

    def test_canonical_determinism(self, make_header, alice, bob):
        """Test field assignment order does not change the encoding."""
        first = PaymentTransaction(header=make_header(alice.address), receiver=bob.address, amount=5)
        second = PaymentTransaction(amount=5, receiver=bob.address, header=make_header(alice.address))
        assert encode_transaction(first) == encode_transaction(second)
        assert first.raw_id() == second.raw_id()

    def test_address_fields_written_as_raw_keys(self, make_payment, alice, bob):
        """Test addresses travel as 32-byte keys, not text."""
        raw = decode(encode_transaction(make_payment(alice.address, bob.address)))
        assert raw["snd"] == alice.address.public_key
        assert Address(raw["rcv"]) == bob.address
