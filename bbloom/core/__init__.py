"""
Core functionality for bbloom.
"""

from bbloom.core.base import MembershipFilter
from bbloom.core.double_hasher import DoubleHasher
from bbloom.core.hash import (
    HashBuilder,
    SeededHasher,
    blake2b_64,
    fnv1a_64,
    key_to_bytes,
    make_hash_pair,
)

__all__ = [
    # Base classes
    "MembershipFilter",
    # Hashing
    "HashBuilder",
    "SeededHasher",
    "DoubleHasher",
    "make_hash_pair",
    # Utility functions
    "blake2b_64",
    "fnv1a_64",
    "key_to_bytes",
]
