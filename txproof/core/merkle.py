"""
Keccak-256 Merkle tree for block-level commitments.

Conceptual Background:
---------------------
A Merkle tree commits to an ordered list of leaf blobs with a single 32-byte
root, and gives each leaf a proof of O(log n) sibling digests that lets a
third party check membership without the full list.

Layout:
------
The tree is a flat heap array, not a graph of node objects:
- node 0 is the root
- node i has children 2i+1 and 2i+2
- the last L slots (L-1 .. 2L-2) hold the leaf digests, where L is the
  leaf count rounded up to a power of two

Leaves past the input length are padded with the empty blob. Their digests
take part in the tree but they never get an exposed proof.

Pair Hashing:
------------
Internal nodes use combine(a, b), which sorts the two digests before
hashing. combine is commutative, so a proof only carries sibling digests,
never a left/right flag. The ordered pair is serialized as compact JSON
(two arrays of 32 integers) before hashing; changing that encoding changes
every root.

Properties:
----------
- Build: O(L) hashes
- Prove: O(log L) per leaf
- Verify: O(log L)
"""

import json
from typing import List, Sequence, Tuple

from txproof.crypto import DIGEST_SIZE, is_valid_digest, keccak256
from txproof.utils.logger import get_logger
from txproof.utils.validation import validate_hash

logger = get_logger("merkle")


# =============================================================================
# Hashing Primitives
# =============================================================================

# Placeholder blob for padding leaves
EMPTY_LEAF = b""


def leaf_digest(blob: bytes) -> bytes:
    """Hash a raw leaf blob into its tree node value."""
    return keccak256(blob)


def sort_hash_pair(first: bytes, second: bytes) -> Tuple[bytes, bytes]:
    """Order two digests so the byte-lexicographically smaller one comes first."""
    if first < second:
        return first, second
    return second, first


def encode_pair(first: bytes, second: bytes) -> bytes:
    """Serialize an ordered digest pair as a compact JSON 2-tuple of byte arrays."""
    return json.dumps([list(first), list(second)], separators=(",", ":")).encode()


def combine(a: bytes, b: bytes) -> bytes:
    """
    Hash two child digests into their parent.

    The pair is sorted first, so combine(a, b) == combine(b, a).
    """
    return keccak256(encode_pair(*sort_hash_pair(a, b)))


# =============================================================================
# Heap Addressing
# =============================================================================


def padded_size(n: int) -> int:
    """Smallest power of two >= n."""
    if n < 1:
        raise ValueError(f"Leaf count must be positive, got {n}")
    return 1 << (n - 1).bit_length()


def sibling(v: int) -> int:
    """Index of the other child under the same parent."""
    return v - 1 if v % 2 == 0 else v + 1


def parent(v: int) -> int:
    """Index of the parent node."""
    return (v - 1) // 2


# =============================================================================
# Merkle Tree
# =============================================================================


class MerkleTree:
    """
    Immutable Merkle tree built once from a fixed leaf list.

    Attributes:
        root: 32-byte root digest
        proofs: One proof per input leaf, in input order
        leaf_count: Number of input leaves (n)
        padded_size: Leaf slots in the tree (L, power of two)
    """

    __slots__ = ("_nodes", "_root", "_proofs", "_leaf_count", "_padded_size")

    def __init__(self, nodes: List[bytes], leaf_count: int):
        self._nodes = tuple(nodes)
        self._leaf_count = leaf_count
        self._padded_size = (len(nodes) + 1) // 2
        self._root = self._nodes[0]
        self._proofs = tuple(self._path(i) for i in range(leaf_count))

    @classmethod
    def build(cls, leaves: Sequence[bytes]) -> "MerkleTree":
        """
        Build a tree over an ordered list of leaf blobs.

        Args:
            leaves: Non-empty sequence of byte blobs

        Returns:
            MerkleTree with root and per-leaf proofs
        """
        n = len(leaves)
        if n == 0:
            raise ValueError("Cannot build a Merkle tree from an empty leaf list")
        for i, leaf in enumerate(leaves):
            if not isinstance(leaf, (bytes, bytearray)):
                raise TypeError(f"Leaf {i} must be bytes, got {type(leaf).__name__}")

        size = padded_size(n)
        first_leaf = size - 1
        nodes = [EMPTY_LEAF] * (2 * size - 1)

        for j in range(size):
            blob = bytes(leaves[j]) if j < n else EMPTY_LEAF
            nodes[first_leaf + j] = leaf_digest(blob)

        # Children sit at higher indices, so walk internal nodes downward
        for i in range(first_leaf - 1, -1, -1):
            nodes[i] = combine(nodes[2 * i + 1], nodes[2 * i + 2])

        tree = cls(nodes, n)
        logger.debug(
            f"Built Merkle tree: leaves={n}, padded={size}, root={tree.root.hex()[:16]}..."
        )
        return tree

    def _path(self, index: int) -> Tuple[bytes, ...]:
        """Collect sibling digests from leaf `index` up to the root."""
        path = []
        v = self._padded_size - 1 + index
        while v > 0:
            path.append(self._nodes[sibling(v)])
            v = parent(v)
        return tuple(path)

    @property
    def root(self) -> bytes:
        """Get the Merkle root."""
        return self._root

    @property
    def proofs(self) -> Tuple[Tuple[bytes, ...], ...]:
        """All proofs, proofs[i] belongs to leaf i."""
        return self._proofs

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

    @property
    def padded_size(self) -> int:
        return self._padded_size

    @property
    def depth(self) -> int:
        """Proof length shared by every leaf (log2 of padded size)."""
        return self._padded_size.bit_length() - 1

    def proof(self, index: int) -> List[bytes]:
        """
        Get the proof for one leaf.

        Args:
            index: Position of the leaf in the input list

        Returns:
            Sibling digests in leaf-to-root order
        """
        if not 0 <= index < self._leaf_count:
            raise IndexError(f"Leaf index {index} out of range [0, {self._leaf_count})")
        return list(self._proofs[index])

    def verify_leaf(self, leaf: bytes, index: int) -> bool:
        """Check `leaf` against this tree's root using the proof at `index`."""
        return self.verify(leaf, self.proof(index), self._root)

    @staticmethod
    def verify(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
        """
        Verify a Merkle proof.

        Args:
            leaf: The raw leaf blob being proven
            proof: Sibling digests in leaf-to-root order
            root: Expected root digest

        Returns:
            True if the proof recomputes the root

        Raises:
            TypeError: If leaf, root or a sibling is not bytes
        """
        if not isinstance(leaf, (bytes, bytearray)):
            raise TypeError(f"Leaf must be bytes, got {type(leaf).__name__}")
        if not isinstance(root, (bytes, bytearray)):
            raise TypeError(f"Root must be bytes, got {type(root).__name__}")

        current = leaf_digest(bytes(leaf))

        for i, sibling_hash in enumerate(proof):
            if not isinstance(sibling_hash, (bytes, bytearray)):
                raise TypeError(f"Proof element {i} must be bytes, got {type(sibling_hash).__name__}")
            if not is_valid_digest(sibling_hash):
                return False
            current = combine(current, bytes(sibling_hash))

        return current == bytes(root)

    def __len__(self) -> int:
        return self._leaf_count

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={self._leaf_count}, root=0x{self._root.hex()})"


def build(leaves: Sequence[bytes]) -> MerkleTree:
    """Build a Merkle tree over `leaves`."""
    return MerkleTree.build(leaves)


def verify(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
    """Verify that `leaf` is committed under `root` by `proof`."""
    return MerkleTree.verify(leaf, proof, root)


# =============================================================================
# Proof Encoding
# =============================================================================


def encode_proof(proof: Sequence[bytes]) -> bytes:
    """Concatenate proof digests; each is fixed width so no delimiters."""
    for i, digest in enumerate(proof):
        valid, err = validate_hash(digest, f"proof[{i}]")
        if not valid:
            raise ValueError(err)
    return b"".join(bytes(d) for d in proof)


def decode_proof(data: bytes) -> List[bytes]:
    """Split a concatenated proof back into digests."""
    if len(data) % DIGEST_SIZE != 0:
        raise ValueError(
            f"Encoded proof length {len(data)} is not a multiple of {DIGEST_SIZE}"
        )
    return [bytes(data[i:i + DIGEST_SIZE]) for i in range(0, len(data), DIGEST_SIZE)]
