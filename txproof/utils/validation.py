"""
Input Validation - sanity checks for externally supplied data.

Validators return (is_valid, error_message) so callers decide whether
to raise, skip, or report.
"""

import string
from typing import Tuple, Any, Optional

from txproof.crypto import DIGEST_SIZE

# =============================================================================
# Constants
# =============================================================================

MAX_ADDRESS_SIZE = 20
MAX_HASH_SIZE = DIGEST_SIZE
MAX_BLOOM_SIZE = 256

MIN_INDEX = 0
MAX_INDEX = 2**64 - 1

HEX_DIGITS = frozenset(string.hexdigits)


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.
    
    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        max_length: Maximum allowed length
        
    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"
    
    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"
    
    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"
    
    return True, ""


def validate_hash(hash_value: Any, name: str = "hash") -> Tuple[bool, str]:
    """Validate a digest value."""
    return validate_bytes(hash_value, name, expected_length=MAX_HASH_SIZE)


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_INDEX,
    max_val: int = MAX_INDEX,
) -> Tuple[bool, str]:
    """Validate integer within bounds."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"
    
    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"
    
    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"
    
    return True, ""


def validate_array(
    data: Any,
    name: str,
    max_length: Optional[int] = None,
    min_length: int = 0,
) -> Tuple[bool, str]:
    """
    Validate array/list input.
    
    Args:
        data: Data to validate
        name: Field name for errors
        max_length: Maximum allowed length (None for unbounded)
        min_length: Minimum required length
        
    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (list, tuple)):
        return False, f"{name} must be list/tuple, got {type(data).__name__}"
    
    if len(data) < min_length:
        return False, f"{name} must have at least {min_length} item(s), got {len(data)}"
    
    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"
    
    return True, ""


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate a hex string (with or without 0x prefix).
    
    Args:
        value: Value to validate
        name: Field name
        expected_bytes: Expected byte length when decoded
        
    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"
    
    hex_str = value[2:] if value[:2] in ("0x", "0X") else value
    
    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"
    
    # bytes.fromhex skips whitespace, so check characters directly
    if any(c not in HEX_DIGITS for c in hex_str):
        return False, f"{name} contains invalid hex characters"
    
    if expected_bytes is not None:
        actual_bytes = len(hex_str) // 2
        if actual_bytes != expected_bytes:
            return False, f"{name} must be {expected_bytes} bytes, got {actual_bytes}"
    
    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_hash",
    "validate_integer",
    "validate_array",
    "validate_hex_string",
    "MAX_ADDRESS_SIZE",
    "MAX_HASH_SIZE",
    "MAX_BLOOM_SIZE",
]
