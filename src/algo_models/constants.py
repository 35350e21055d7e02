"""Protocol constants: domain prefixes and fixed sizes."""

# Domain separation prefixes
TX_PREFIX = b"TX"
TX_GROUP_PREFIX = b"TG"
MULTISIG_ADDR_PREFIX = b"MultisigAddr"
LOGIC_PREFIX = b"Program"

# Logic programs are signed under the same prefix as transactions
PROGRAM_SIGNING_PREFIX = TX_PREFIX

# Sizes in bytes
PUBLIC_KEY_LENGTH = 32
CHECKSUM_LENGTH = 4
SIGNATURE_LENGTH = 64
DIGEST_LENGTH = 32
LEASE_LENGTH = 32
STATE_PROOF_KEY_LENGTH = 64
MAX_NOTE_SIZE = 1024

# Text lengths
ADDRESS_LENGTH = 58
TRANSACTION_ID_LENGTH = 52

MULTISIG_VERSION = 1
MAX_GROUP_SIZE = 16

MAX_UINT64 = 2 ** 64 - 1
MIN_INT64 = -(2 ** 63)
