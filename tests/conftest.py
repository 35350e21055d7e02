"""
Test bootstrap:
- Put src/ on sys.path so the package imports without installation
- Deterministic key pairs, network constants and the canonical payment fixture
"""
import sys
import pathlib
import pytest

SRC = pathlib.Path(__file__).resolve().parent.parent / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from algo_models.crypto.ed25519 import Ed25519KeyPair  # noqa: E402
from algo_models.runtime.address import Address  # noqa: E402
from algo_models.signers.signer import Ed25519Signer  # noqa: E402
from algo_models.tx.header import TransactionHeader  # noqa: E402
from algo_models.tx.transaction import PaymentTransaction  # noqa: E402

TESTNET_GENESIS_ID = "testnet-v1.0"
TESTNET_GENESIS_HASH = bytes.fromhex("4863b518a4b3c84ec810f22d4f1081cb0f71f059a7ac20dec62f7f70e5093a22")
FIXTURE_SENDER = bytes.fromhex("c1111928e21329b378410d6a2f0773e0eb19df1581a0b904cb8e3dbbfe29bb38")
FIXTURE_RECEIVER = bytes.fromhex("fac0770ca8624569b2a537df9abb7b320d263bab47c6ff4932caca39262ff286")

# Payment of 200000 with fee 1000, keys in canonical order:
# amt fee fv gen gh lv rcv snd type
PAYMENT_FIXTURE_HEX = (
    "89"
    "a3616d74" "ce00030d40"
    "a3666565" "cd03e8"
    "a26676" "ce02ce8ffb"
    "a367656e" "ac746573746e65742d76312e30"
    "a26768" "c420" + TESTNET_GENESIS_HASH.hex() +
    "a26c76" "ce02ce93e3"
    "a3726376" "c420" + FIXTURE_RECEIVER.hex() +
    "a3736e64" "c420" + FIXTURE_SENDER.hex() +
    "a474797065" "a3706179"
)


@pytest.fixture
def payment_fixture_bytes():
    """Canonical encoding of the reference payment transaction."""
    return bytes.fromhex(PAYMENT_FIXTURE_HEX)


@pytest.fixture
def signed_payment_fixture_bytes(payment_fixture_bytes):
    """The reference payment wrapped in an envelope with a 64-byte signature."""
    signature = bytes(range(64))
    return (
        bytes.fromhex("82")
        + bytes.fromhex("a3736967") + bytes.fromhex("c440") + signature
        + bytes.fromhex("a374786e") + payment_fixture_bytes
    )


@pytest.fixture
def alice():
    return Ed25519KeyPair.from_seed("alice")


@pytest.fixture
def bob():
    return Ed25519KeyPair.from_seed("bob")


@pytest.fixture
def carol():
    return Ed25519KeyPair.from_seed("carol")


@pytest.fixture
def alice_signer(alice):
    return Ed25519Signer(alice)


@pytest.fixture
def bob_signer(bob):
    return Ed25519Signer(bob)


@pytest.fixture
def carol_signer(carol):
    return Ed25519Signer(carol)


@pytest.fixture
def make_header():
    """Factory for headers on the test network."""
    def _make(sender, **overrides):
        fields = {
            "sender": sender,
            "fee": 1000,
            "first_valid": 47091707,
            "last_valid": 47092707,
            "genesis_id": TESTNET_GENESIS_ID,
            "genesis_hash": TESTNET_GENESIS_HASH,
        }
        fields.update(overrides)
        return TransactionHeader(**fields)
    return _make


@pytest.fixture
def make_payment(make_header):
    """Factory for payment transactions on the test network."""
    def _make(sender, receiver, amount=200000, **header_overrides):
        return PaymentTransaction(
            header=make_header(sender, **header_overrides),
            receiver=receiver,
            amount=amount,
        )
    return _make


@pytest.fixture
def fixture_sender():
    return Address(FIXTURE_SENDER)


@pytest.fixture
def fixture_receiver():
    return Address(FIXTURE_RECEIVER)
