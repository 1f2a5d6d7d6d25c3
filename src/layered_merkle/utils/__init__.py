"""
Utility Functions

This package provides hex string and field element helpers used by the hash
functions and the display code.
"""

from .hex_helpers import (
    normalize_hex,
    parse_field_element,
    field_element_to_bytes,
    bytes_to_hex,
    shorten_hash,
)

__all__ = [
    'normalize_hex',
    'parse_field_element',
    'field_element_to_bytes',
    'bytes_to_hex',
    'shorten_hash',
]
