"""
Address codec tests.

Derivation, checksum validation, canonical text form and the multisig and
program address derivations.
"""

import base64
import hashlib

import pytest

from algo_models.codec.hashes import sha512_256
from algo_models.runtime.address import (
    ZERO_ADDRESS,
    Address,
    derive_address,
    encode_transaction_id,
    logic_address,
    multisig_address,
    parse_address,
)
from algo_models.runtime.errors import ChecksumMismatchError, ErrorCode, MalformedAddressError

ZERO_ADDRESS_TEXT = "AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAY5HFKQ"


def _render(raw: bytes) -> str:
    return base64.b32encode(raw).decode("ascii").rstrip("=")


class TestDerivation:
    """Key to text."""

    def test_zero_address_text(self):
        """Test the all-zero key renders to the well-known zero address."""
        assert str(ZERO_ADDRESS) == ZERO_ADDRESS_TEXT
        assert ZERO_ADDRESS.is_zero()

    def test_text_shape(self, alice):
        """Test derived text is 58 upper-case base-32 characters."""
        text = str(derive_address(alice.public_key_bytes()))
        assert len(text) == 58
        assert text == text.upper()
        assert "=" not in text

    def test_checksum_is_digest_tail(self, alice):
        """Test the checksum is the last four bytes of the key digest."""
        key = alice.public_key_bytes()
        address = derive_address(key)
        assert address.checksum() == sha512_256(key)[-4:]
        assert str(address) == _render(key + sha512_256(key)[-4:])

    def test_wrong_key_length(self):
        """Test keys must be exactly 32 bytes."""
        with pytest.raises(MalformedAddressError):
            derive_address(b"\x01" * 31)


class TestParsing:
    """Text to key."""

    @pytest.mark.parametrize("seed", [b"", b"a", b"alice", b"\xff" * 40])
    def test_checksum_law(self, seed):
        """Test parse inverts derive for arbitrary keys."""
        key = hashlib.sha256(seed).digest()
        assert parse_address(str(derive_address(key))).public_key == key

    def test_flipped_checksum_bits_rejected(self, alice):
        """Test flipping any single checksum bit fails with a checksum mismatch."""
        key = alice.public_key_bytes()
        raw = key + derive_address(key).checksum()
        for bit in range(32):
            tampered = bytearray(raw)
            tampered[32 + bit // 8] ^= 1 << (bit % 8)
            with pytest.raises(ChecksumMismatchError) as exc_info:
                parse_address(_render(bytes(tampered)))
            assert exc_info.value.code == ErrorCode.CHECKSUM_MISMATCH

    def test_flipped_key_bit_rejected(self, alice):
        """Test changing the key under a fixed checksum fails too."""
        key = bytearray(alice.public_key_bytes())
        checksum = derive_address(bytes(key)).checksum()
        key[0] ^= 0x01
        with pytest.raises(ChecksumMismatchError):
            parse_address(_render(bytes(key) + checksum))

    @pytest.mark.parametrize("text", [
        "",
        "AAAA",
        ZERO_ADDRESS_TEXT + "A",
        ZERO_ADDRESS_TEXT[:-1],
    ])
    def test_wrong_length(self, text):
        with pytest.raises(MalformedAddressError) as exc_info:
            parse_address(text)
        assert exc_info.value.code == ErrorCode.MALFORMED_ADDRESS

    @pytest.mark.parametrize("text", [
        ZERO_ADDRESS_TEXT.lower(),
        ZERO_ADDRESS_TEXT[:-1] + "1",
        ZERO_ADDRESS_TEXT[:-1] + "=",
    ])
    def test_bad_alphabet(self, text):
        """Test characters outside A-Z2-7 are malformed."""
        with pytest.raises(MalformedAddressError):
            parse_address(text)

    def test_non_string_rejected(self):
        with pytest.raises(MalformedAddressError):
            parse_address(b"not text")

    def test_parse_with_injected_digest(self, alice):
        """Test the checksum digest is swappable."""
        def fake_digest(data):
            return hashlib.sha256(data).digest()

        key = alice.public_key_bytes()
        text = Address(key).encode(fake_digest)
        assert parse_address(text, fake_digest).public_key == key
        with pytest.raises(ChecksumMismatchError):
            parse_address(text)


class TestAddressValue:
    """Equality, hashing and pydantic integration."""

    def test_equality_by_key(self, alice, bob):
        assert Address(alice.public_key_bytes()) == alice.address
        assert alice.address != bob.address
        assert len({alice.address, Address(alice.public_key_bytes()), bob.address}) == 2

    def test_not_equal_to_text(self, alice):
        """Test an address never equals its text or its bytes."""
        assert alice.address != str(alice.address)
        assert alice.address != alice.public_key_bytes()

    def test_bytes_and_repr(self, alice):
        assert bytes(alice.address) == alice.public_key_bytes()
        assert repr(alice.address) == f"Address('{alice.address}')"

    def test_pydantic_accepts_text_and_bytes(self, make_header, alice):
        """Test model fields accept address text or raw key bytes."""
        from_text = make_header(str(alice.address))
        from_bytes = make_header(alice.public_key_bytes())
        assert from_text.sender == from_bytes.sender == alice.address

    def test_pydantic_rejects_bad_text(self, make_header):
        with pytest.raises(ChecksumMismatchError):
            make_header(ZERO_ADDRESS_TEXT[:-2] + "AA")


class TestDerivedAddresses:
    """Transaction ids, multisig and program addresses."""

    def test_transaction_id_text(self):
        text = encode_transaction_id(bytes(32))
        assert len(text) == 52
        assert set(text) == {"A"}

    def test_transaction_id_length_checked(self):
        with pytest.raises(MalformedAddressError):
            encode_transaction_id(bytes(31))

    def test_multisig_address_preimage(self, alice, bob):
        """Test the multisig address hashes prefix, version, threshold and ordered keys."""
        keys = [alice.public_key_bytes(), bob.public_key_bytes()]
        expected = sha512_256(b"MultisigAddr" + bytes([1, 2]) + keys[0] + keys[1])
        assert multisig_address(1, 2, keys).public_key == expected

    def test_multisig_address_order_sensitive(self, alice, bob):
        keys = [alice.public_key_bytes(), bob.public_key_bytes()]
        assert multisig_address(1, 1, keys) != multisig_address(1, 1, list(reversed(keys)))
        assert multisig_address(1, 1, keys) != multisig_address(1, 2, keys)

    def test_logic_address_preimage(self):
        program = bytes.fromhex("0620010181")
        assert logic_address(program).public_key == sha512_256(b"Program" + program)
