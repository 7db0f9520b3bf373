"""Merkle tree engine, leaf sources and block commitments"""
from txproof.core.merkle import (
    MerkleTree,
    build,
    verify,
    leaf_digest,
    combine,
    sort_hash_pair,
    padded_size,
    encode_proof,
    decode_proof,
)
from txproof.core.records import ReceiptRecord, identifier_leaf
from txproof.core.commitment import (
    ReceiptCommitment,
    HashCommitment,
    receipt_tree,
    receipt_commitment,
    hash_commitment,
)
from txproof.core.config import ProofConfig, load_config

__all__ = [
    "MerkleTree",
    "build",
    "verify",
    "leaf_digest",
    "combine",
    "sort_hash_pair",
    "padded_size",
    "encode_proof",
    "decode_proof",
    "ReceiptRecord",
    "identifier_leaf",
    "ReceiptCommitment",
    "HashCommitment",
    "receipt_tree",
    "receipt_commitment",
    "hash_commitment",
    "ProofConfig",
    "load_config",
]
