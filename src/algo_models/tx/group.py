"""
Atomic transaction groups.

A group id commits to the ordered ids of its member transactions, each
computed with the group field cleared.
"""

import logging
from typing import List, Optional, Sequence

from ..codec import writer
from ..codec.hashes import DigestFunction, hash_with_prefix
from ..constants import DIGEST_LENGTH, MAX_GROUP_SIZE, TX_GROUP_PREFIX
from ..runtime.errors import GroupError
from .transaction import TransactionBase

logger = logging.getLogger(__name__)


def _without_group(transaction: TransactionBase) -> TransactionBase:
    if transaction.header.group is None:
        return transaction
    header = transaction.header.model_copy(update={"group": None})
    return transaction.model_copy(update={"header": header})


def compute_group_id(transactions: Sequence[TransactionBase],
                     digest: Optional[DigestFunction] = None) -> bytes:
    """
    Compute the id of a transaction group.

    Args:
        transactions: Members in group order
        digest: Digest primitive, defaults to SHA-512/256

    Returns:
        Digest of ``"TG" || encode({"txlist": [id_1, ..., id_n]})``

    Raises:
        GroupError: If the group is empty or larger than the protocol allows
    """
    if not transactions:
        raise GroupError("Cannot compute the id of an empty group")
    if len(transactions) > MAX_GROUP_SIZE:
        raise GroupError(
            f"Group of {len(transactions)} transactions exceeds the maximum of {MAX_GROUP_SIZE}",
            details={"size": len(transactions), "limit": MAX_GROUP_SIZE},
        )

    ids = [_without_group(txn).raw_id(digest) for txn in transactions]
    group_id = hash_with_prefix(TX_GROUP_PREFIX, writer.encode({"txlist": ids}), digest)
    if len(group_id) != DIGEST_LENGTH:
        raise GroupError(
            f"Group digest must be {DIGEST_LENGTH} bytes, got {len(group_id)}",
            details={"expected": DIGEST_LENGTH, "actual": len(group_id)},
        )
    logger.debug(f"Computed group id over {len(ids)} transactions")
    return group_id


def assign_group_id(transactions: Sequence[TransactionBase],
                    digest: Optional[DigestFunction] = None) -> List[TransactionBase]:
    """
    Return copies of the transactions with their group field set.

    The inputs are left untouched.
    """
    group_id = compute_group_id(transactions, digest)
    result = []
    for txn in transactions:
        header = txn.header.model_copy(update={"group": group_id})
        result.append(txn.model_copy(update={"header": header}))
    return result


__all__ = ["compute_group_id", "assign_group_id"]
