"""
Block commitments - index-keyed trees over a block's transactions.

Two modes, both delegating tree math to MerkleTree:

- Receipt commitment: one leaf per receipt (ReceiptRecord.to_leaf()).
  Selects a receipt by its transactionIndex, default position 0.
- Hash commitment: one leaf per transaction hash (identifier_leaf()),
  plus one synthetic leaf for the block's transactionsRoot appended last.
  Selects a leaf by hash, default position 0.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from txproof.core.merkle import MerkleTree
from txproof.core.records import ReceiptRecord, identifier_leaf, normalize_hash
from txproof.crypto import bytes_to_hex
from txproof.utils.logger import get_logger

logger = get_logger("commitment")

ReceiptInput = Union[ReceiptRecord, Dict[str, Any], None]


# =============================================================================
# Commitment Results
# =============================================================================


@dataclass(frozen=True)
class ReceiptCommitment:
    """
    Root and proof for one receipt of a block.

    Attributes:
        root: Merkle root over all receipts
        proof: Sibling digests for the selected receipt
        leaf: Serialized receipt blob that was committed
        position: Leaf position of the selected receipt
    """
    root: bytes
    proof: Tuple[bytes, ...]
    leaf: bytes
    position: int

    def verify(self) -> bool:
        return MerkleTree.verify(self.leaf, self.proof, self.root)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": bytes_to_hex(self.root),
            "proof": [bytes_to_hex(p) for p in self.proof],
            "leaf": self.leaf.decode(),
            "position": self.position,
        }


@dataclass(frozen=True)
class HashCommitment:
    """
    Root and proof for one transaction hash of a block.

    Attributes:
        root: Merkle root over identifier leaves
        proof: Sibling digests for the selected hash
        leaf: Pre-hashed identifier leaf (32 bytes)
        position: Leaf position of the selected hash
    """
    root: bytes
    proof: Tuple[bytes, ...]
    leaf: bytes
    position: int

    def verify(self) -> bool:
        return MerkleTree.verify(self.leaf, self.proof, self.root)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": bytes_to_hex(self.root),
            "proof": [bytes_to_hex(p) for p in self.proof],
            "leaf": bytes_to_hex(self.leaf),
            "position": self.position,
        }


# =============================================================================
# Receipt Commitment
# =============================================================================


def collect_receipts(receipts: Iterable[ReceiptInput]) -> List[ReceiptRecord]:
    """
    Normalize receipts into records, in input order.

    Receipts the node did not return (None) are skipped.
    """
    records = []
    for position, receipt in enumerate(receipts):
        if receipt is None:
            logger.warning(f"Receipt at position {position} missing, skipping")
            continue
        if not isinstance(receipt, ReceiptRecord):
            receipt = ReceiptRecord.from_rpc(receipt)
        records.append(receipt)
    return records


def _build_receipt_tree(records: List[ReceiptRecord]) -> MerkleTree:
    if not records:
        raise ValueError("No receipts to commit")
    return MerkleTree.build([r.to_leaf() for r in records])


def receipt_tree(receipts: Iterable[ReceiptInput]) -> MerkleTree:
    """Build a tree committing to full receipt records."""
    return _build_receipt_tree(collect_receipts(receipts))


def receipt_commitment(
    receipts: Iterable[ReceiptInput],
    index: Optional[int] = None,
) -> ReceiptCommitment:
    """
    Commit to a block's receipts and extract one proof.

    Args:
        receipts: Receipts in block order (records, RPC dicts, or None)
        index: transactionIndex of the receipt to prove (default: first)

    Returns:
        ReceiptCommitment for the selected receipt
    """
    records = collect_receipts(receipts)
    tree = _build_receipt_tree(records)

    position = 0
    if index is not None:
        for i, record in enumerate(records):
            if record.index == index:
                position = i
                break
        else:
            raise LookupError(f"No receipt with transaction index {index}")

    logger.info(
        f"Committed {len(records)} receipts, root={bytes_to_hex(tree.root)[:18]}..., "
        f"position={position}"
    )
    return ReceiptCommitment(
        root=tree.root,
        proof=tree.proofs[position],
        leaf=records[position].to_leaf(),
        position=position,
    )


# =============================================================================
# Hash Commitment
# =============================================================================


def hash_leaves(
    tx_hashes: Sequence[Union[str, bytes]],
    transactions_root: Union[str, bytes],
) -> Tuple[List[str], List[bytes]]:
    """
    Build identifier leaves for a block.

    Returns:
        (normalized hashes, leaves), transactions_root last in both
    """
    identifiers = [normalize_hash(h) for h in tx_hashes]
    identifiers.append(normalize_hash(transactions_root))
    return identifiers, [identifier_leaf(h) for h in identifiers]


def hash_commitment(
    tx_hashes: Sequence[Union[str, bytes]],
    transactions_root: Union[str, bytes],
    tx_hash: Optional[Union[str, bytes]] = None,
) -> HashCommitment:
    """
    Commit to a block's transaction hashes and extract one proof.

    Args:
        tx_hashes: Transaction hashes in block order
        transactions_root: Block header transactionsRoot, appended as last leaf
        tx_hash: Hash to prove (default: first leaf)

    Returns:
        HashCommitment for the selected hash
    """
    identifiers, leaves = hash_leaves(tx_hashes, transactions_root)

    position = 0
    if tx_hash is not None:
        target = normalize_hash(tx_hash)
        try:
            position = identifiers.index(target)
        except ValueError:
            raise LookupError(f"Transaction hash {target} not found") from None

    tree = MerkleTree.build(leaves)

    logger.info(
        f"Committed {len(leaves)} identifiers, root={bytes_to_hex(tree.root)[:18]}..., "
        f"position={position}"
    )
    return HashCommitment(
        root=tree.root,
        proof=tree.proofs[position],
        leaf=leaves[position],
        position=position,
    )
