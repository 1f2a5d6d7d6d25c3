"""
Combine Functions

Concrete two-input hash functions that can be injected into a MerkleTree.
The tree itself only relies on the contract: a pure, deterministic
function of two hash strings that raises HashError when it cannot hash its
inputs.

- sha256_combine: field elements in (decimal or hex), 0x-hex digest out
- concat_combine: "a-b" string joining, for examples and demos
"""

from hashlib import sha256
from typing import Dict

from .merkle import CombineFn, HashError
from .utils import bytes_to_hex, field_element_to_bytes, parse_field_element

# Width in bytes of a field element fed into the hash
FIELD_ELEMENT_BYTES = 32


def sha256_combine(left: str, right: str) -> str:
    """
    Hash two field elements into one with SHA-256.

    Each input is parsed as a decimal or 0x-prefixed hex field element and
    encoded as 32 big-endian bytes; the digest of the 64-byte concatenation
    is returned as a 0x-prefixed lowercase hex string, which is itself a
    valid input for further combining.

    Args:
        left: Left field element
        right: Right field element

    Returns:
        0x-prefixed 32-byte hex digest

    Raises:
        HashError: If either input is not a valid 32-byte field element
    """
    try:
        left_bytes = field_element_to_bytes(parse_field_element(left), FIELD_ELEMENT_BYTES)
        right_bytes = field_element_to_bytes(parse_field_element(right), FIELD_ELEMENT_BYTES)
    except ValueError as e:
        raise HashError(f"Cannot hash inputs: {e}", left=left, right=right) from e

    return bytes_to_hex(sha256(left_bytes + right_bytes).digest())


def concat_combine(left: str, right: str) -> str:
    """Join two hashes with a dash. Not a hash; useful for reading tree shapes."""
    return f"{left}-{right}"


HASHERS: Dict[str, CombineFn] = {
    "sha256": sha256_combine,
    "concat": concat_combine,
}


def get_combine(name: str) -> CombineFn:
    """
    Look up a combine function by name.

    Raises:
        ValueError: If no combine function is registered under `name`
    """
    try:
        return HASHERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown hasher: {name}. Available: {', '.join(sorted(HASHERS))}"
        ) from None


class CountingCombine:
    """
    Wrap a combine function and count how often it is called.

    Examples:
        >>> counter = CountingCombine(concat_combine)
        >>> counter("a", "b")
        'a-b'
        >>> counter.calls
        1
    """

    def __init__(self, combine: CombineFn):
        self.combine = combine
        self.calls = 0

    def __call__(self, left: str, right: str) -> str:
        self.calls += 1
        return self.combine(left, right)

    def reset(self) -> None:
        self.calls = 0
