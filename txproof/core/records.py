"""
Leaf sources - canonical byte forms for committed records.

Two conventions feed the Merkle tree:

1. Object commitment: the leaf is the compact JSON of a receipt projection
   (ReceiptRecord), fields in a fixed order.
2. Identifier commitment: the leaf is SHA-256 of the JSON-encoded hash
   string. The tree re-hashes it with Keccak-256 like any other blob, so
   these leaves are hashed twice; existing commitments depend on that.

Nothing here talks to a node. Receipts arrive as JSON-RPC result objects
(dicts with camelCase keys and hex quantities) fetched by the caller.
"""

import json
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from txproof.crypto import bytes_to_hex, sha256
from txproof.utils.validation import (
    MAX_ADDRESS_SIZE,
    MAX_BLOOM_SIZE,
    MAX_HASH_SIZE,
    validate_hex_string,
    validate_integer,
)


# =============================================================================
# Constants
# =============================================================================

ZERO_HASH = "0x" + "00" * MAX_HASH_SIZE


# =============================================================================
# Helpers
# =============================================================================


def _quantity(value: Any, name: str) -> int:
    """Decode a JSON-RPC quantity (hex string or int)."""
    if isinstance(value, str):
        try:
            value = int(value, 16) if value[:2] in ("0x", "0X") else int(value)
        except ValueError:
            raise ValueError(f"{name} is not a valid quantity: {value!r}") from None
    valid, err = validate_integer(value, name)
    if not valid:
        raise ValueError(err)
    return value


def _hex(value: Any, name: str, expected_bytes: int) -> str:
    """Check a hex field and return it lowercase with 0x prefix."""
    if isinstance(value, (bytes, bytearray)):
        value = bytes_to_hex(bytes(value))
    valid, err = validate_hex_string(value, name, expected_bytes)
    if not valid:
        raise ValueError(err)
    return "0x" + value[2:].lower() if value[:2] in ("0x", "0X") else "0x" + value.lower()


def normalize_hash(value: Union[str, bytes]) -> str:
    """Lowercase 0x-prefixed form of a 32-byte hash."""
    return _hex(value, "hash", MAX_HASH_SIZE)


def canonical_json(value: Any) -> str:
    """Compact JSON with sorted keys."""
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


# =============================================================================
# Receipt Projection
# =============================================================================


class ReceiptRecord(BaseModel):
    """
    Canonical projection of a transaction receipt.

    Field order is part of the commitment: to_leaf() serializes fields in
    declaration order.

    Attributes:
        tx_hash: JSON-encoded transaction hash (the quoted string)
        index: Position of the transaction in its block
        logs: One compact JSON string per log entry
        from_: Sender address (serialized as "from")
        to: Recipient address, empty for contract creation
        block_hash: Hash of the containing block
        root: Post-transaction state root, zero hash if absent
        logs_bloom: 256-byte bloom filter as hex
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tx_hash: str
    index: int = Field(ge=0)
    logs: List[str] = Field(default_factory=list)
    from_: str = Field(alias="from")
    to: str = ""
    block_hash: str
    root: str = ZERO_HASH
    logs_bloom: str

    @field_validator("from_")
    @classmethod
    def _check_sender(cls, v: str) -> str:
        return _hex(v, "from", MAX_ADDRESS_SIZE)

    @field_validator("to")
    @classmethod
    def _check_recipient(cls, v: str) -> str:
        if v == "":
            return v
        return _hex(v, "to", MAX_ADDRESS_SIZE)

    @field_validator("block_hash", "root")
    @classmethod
    def _check_hash(cls, v: str, info) -> str:
        return _hex(v, info.field_name, MAX_HASH_SIZE)

    @field_validator("logs_bloom")
    @classmethod
    def _check_bloom(cls, v: str) -> str:
        return _hex(v, "logs_bloom", MAX_BLOOM_SIZE)

    @classmethod
    def from_rpc(cls, receipt: Dict[str, Any]) -> "ReceiptRecord":
        """
        Project an eth_getTransactionReceipt result.

        Args:
            receipt: Receipt object as returned by a JSON-RPC node

        Returns:
            ReceiptRecord ready to serialize
        """
        if not isinstance(receipt, dict):
            raise ValueError(f"Receipt must be an object, got {type(receipt).__name__}")

        missing = [
            key for key in ("transactionHash", "transactionIndex", "from", "blockHash", "logsBloom")
            if receipt.get(key) is None
        ]
        if missing:
            raise ValueError(f"Receipt missing required field(s): {', '.join(missing)}")

        return cls(
            tx_hash=json.dumps(normalize_hash(receipt["transactionHash"])),
            index=_quantity(receipt["transactionIndex"], "transactionIndex"),
            logs=[canonical_json(log) for log in receipt.get("logs") or []],
            from_=receipt["from"],
            to=receipt.get("to") or "",
            block_hash=receipt["blockHash"],
            root=receipt.get("root") or ZERO_HASH,
            logs_bloom=receipt["logsBloom"],
        )

    @property
    def transaction_hash(self) -> str:
        """Plain 0x-prefixed transaction hash."""
        return json.loads(self.tx_hash)

    def to_leaf(self) -> bytes:
        """Serialize to the leaf blob committed by the tree."""
        return self.model_dump_json(by_alias=True).encode()


# =============================================================================
# Identifier Leaves
# =============================================================================


def identifier_leaf(tx_hash: Union[str, bytes]) -> bytes:
    """
    Pre-hash a transaction hash into a 32-byte leaf.

    The hash is normalized to lowercase 0x hex, JSON-encoded (quoted),
    then SHA-256 hashed.
    """
    return sha256(json.dumps(normalize_hash(tx_hash)).encode())
