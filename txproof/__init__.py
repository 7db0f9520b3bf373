"""
txproof - Merkle commitments over Ethereum transaction data

Builds a single root over an ordered list of leaf blobs and a compact
inclusion proof per leaf:
- Keccak-256 tree with commutative (sorted) pair hashing
- Heap-array layout padded to a power of two
- Receipt and transaction-hash leaf sources
"""

from txproof.core.merkle import MerkleTree, build, verify, leaf_digest, combine

__version__ = "0.1.0"

__all__ = [
    "MerkleTree",
    "build",
    "verify",
    "leaf_digest",
    "combine",
]
