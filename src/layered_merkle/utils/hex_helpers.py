"""
Hex String and Field Element Utilities

This module provides helpers for the textual hash formats the tree works
with: decimal field elements (as leaves are usually supplied) and
0x-prefixed hex strings (as hash outputs are produced).
"""

from typing import Optional

HEX_DIGITS = "0123456789abcdefABCDEF"


def normalize_hex(hex_str: str, expected_bytes: Optional[int] = None) -> str:
    """
    Normalize a hex string to lowercase with an even number of digits.

    Args:
        hex_str: The hex string to normalize (should start with '0x')
        expected_bytes: Optional expected byte length for validation

    Returns:
        Normalized hex string; strings without the '0x' prefix are
        returned unchanged

    Raises:
        ValueError: If the hex string contains invalid characters or has
            the wrong length

    Examples:
        >>> normalize_hex("0x123")
        "0x0123"
        >>> normalize_hex("0xABCD")
        "0xabcd"
    """
    if not isinstance(hex_str, str) or not hex_str.startswith("0x"):
        return hex_str

    hex_part = hex_str[2:]

    if not hex_part or not all(c in HEX_DIGITS for c in hex_part):
        raise ValueError(f"Invalid hex string: {hex_str}")

    # Pad to even length
    if len(hex_part) % 2 == 1:
        hex_part = "0" + hex_part

    normalized = "0x" + hex_part.lower()

    if expected_bytes is not None:
        actual_bytes = len(hex_part) // 2
        if actual_bytes != expected_bytes:
            raise ValueError(f"Expected {expected_bytes} bytes, got {actual_bytes} bytes")

    return normalized


def parse_field_element(value: str) -> int:
    """
    Parse a field element given as a decimal or 0x-prefixed hex string.

    Args:
        value: Decimal digits ("1234") or hex ("0x04d2")

    Returns:
        The non-negative integer value

    Raises:
        ValueError: If the string is neither form, or is negative

    Examples:
        >>> parse_field_element("1234")
        1234
        >>> parse_field_element("0x04d2")
        1234
    """
    if not isinstance(value, str):
        raise ValueError(f"Field element must be a string, got {type(value).__name__}")

    text = value.strip()
    if text.startswith(("0x", "0X")):
        return int(normalize_hex("0x" + text[2:]), 16)
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"Invalid field element: {value!r}")
    return int(text)


def field_element_to_bytes(value: int, width: int = 32) -> bytes:
    """
    Encode a field element as fixed-width big-endian bytes.

    Raises:
        ValueError: If the value does not fit in `width` bytes
    """
    if value < 0 or value.bit_length() > width * 8:
        raise ValueError(f"Field element does not fit in {width} bytes")
    return value.to_bytes(width, "big")


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """
    Convert bytes to a hex string.

    Examples:
        >>> bytes_to_hex(b'\\x12\\x34')
        "0x1234"
        >>> bytes_to_hex(b'\\x12\\x34', prefix=False)
        "1234"
    """
    hex_str = data.hex()
    return f"0x{hex_str}" if prefix else hex_str


def shorten_hash(value: str, keep: int = 10) -> str:
    """Abbreviate a long hash for display, keeping both ends."""
    if len(value) <= keep * 2 + 3:
        return value
    return f"{value[:keep]}...{value[-keep:]}"
