"""
Cryptographic primitives for txproof.

This module provides:
- Hashing functions (Keccak-256, SHA-256)
- Hex conversion helpers

Design Notes:
-------------
Keccak-256 is the Ethereum variant (pre-standard padding), not NIST SHA3-256.
It is used for every Merkle tree node.

SHA-256 is used only when a caller commits to identifiers instead of full
records: each identifier is pre-hashed with SHA-256 before it becomes a leaf.
"""

import hashlib

from Crypto.Hash import keccak


# =============================================================================
# Constants
# =============================================================================

# Width of every digest produced here
DIGEST_SIZE = 32


# =============================================================================
# Hashing
# =============================================================================


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.
    
    Used for: identifier leaves (transaction hashes pre-hashed before commit).
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).
    
    Used for: Merkle leaves and internal nodes.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


def is_valid_digest(value: bytes) -> bool:
    """Check that a value is a 32-byte digest."""
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_SIZE


__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "keccak256",
    "bytes_to_hex",
    "hex_to_bytes",
    "is_valid_digest",
]
