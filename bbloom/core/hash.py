"""
Hashing functions for bbloom.

This module provides the 64-bit digest functions used to pick bit positions,
and the hash builders that wrap them behind a single ``hash_one`` call.
These functions are optimized for distribution quality, not cryptographic security.
"""

import hashlib
import random
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

MASK_64 = 0xFFFFFFFFFFFFFFFF

DEFAULT_HASH_ALGORITHM = "blake2b"

# Prefix for keys that are neither text nor bytes
NON_TEXT_TAG = b"\x00"


def key_to_bytes(key: Any) -> bytes:
    """
    Convert a key to the byte sequence that gets hashed.

    Byte sequences are used as-is and strings are UTF-8 encoded. Anything
    else is encoded from repr() behind a NUL tag byte, so the integer 123
    and the string "123" hash differently.

    Keys are compared by their repr(), not by __eq__/__hash__: two equal
    objects whose class keeps the default repr() (which includes the object
    id) hash differently. Give such keys a value-based __repr__, or convert
    them to bytes before inserting.

    Args:
        key: The key to convert.

    Returns:
        The bytes representing the key.
    """
    if isinstance(key, bytes):
        return key
    if isinstance(key, (bytearray, memoryview)):
        return bytes(key)
    if isinstance(key, str):
        return key.encode("utf-8")
    return NON_TEXT_TAG + repr(key).encode("utf-8")


def blake2b_64(key: Any, seed: int = 0) -> int:
    """
    Keyed BLAKE2b truncated to a 64-bit digest.

    The seed is used as the BLAKE2b key, so different seeds give unrelated
    hash functions over the same input.

    Args:
        key: The key to hash (will be converted to bytes if not already)
        seed: Optional seed for the hash

    Returns:
        64-bit hash value
    """
    seed_bytes = (seed & MASK_64).to_bytes(8, "little")
    digest = hashlib.blake2b(key_to_bytes(key), digest_size=8, key=seed_bytes)
    return int.from_bytes(digest.digest(), "little")


def fnv1a_64(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of FNV-1a hash (64-bit variant).

    FNV-1a is a simple but effective non-cryptographic hash function.
    It is much slower than blake2b_64 in CPython but has no dependency on hashlib.

    Args:
        key: The key to hash (will be converted to bytes if not already)
        seed: Optional seed value (modifies the initial hash value)

    Returns:
        64-bit hash value
    """
    FNV_PRIME = 0x100000001B3
    FNV_OFFSET_BASIS = 0xCBF29CE484222325

    h = (FNV_OFFSET_BASIS ^ seed) & MASK_64

    for byte in key_to_bytes(key):
        h ^= byte
        h = (h * FNV_PRIME) & MASK_64

    return h


HASH_ALGORITHMS: Dict[str, Callable[[Any, int], int]] = {
    "blake2b": blake2b_64,
    "fnv1a": fnv1a_64,
}


class HashBuilder(Protocol):
    """Protocol for anything that turns a key into a 64-bit digest."""

    def hash_one(self, key: Any) -> int:
        """Return an unsigned 64-bit digest of key."""
        ...


class SeededHasher:
    """
    A hash builder bound to one seed and one digest function.

    The digest of a key is fixed for the lifetime of the instance. Two
    instances created without an explicit seed draw their seeds independently,
    which is what a Bloom filter needs for its two base hashes.

    Example:
        hasher = SeededHasher(seed=7)
        hasher.hash_one(b"key") == hasher.hash_one(b"key")  # True
    """

    def __init__(self, seed: Optional[int] = None, algorithm: str = DEFAULT_HASH_ALGORITHM):
        """
        Initialize a new hash builder.

        Args:
            seed: Seed for the digest function. None draws a random 64-bit seed.
            algorithm: Name of the digest function ("blake2b" or "fnv1a").

        Raises:
            ValueError: If the algorithm is not known.
        """
        if algorithm not in HASH_ALGORITHMS:
            raise ValueError(
                f"Unknown hash algorithm {algorithm!r}, "
                f"expected one of {sorted(HASH_ALGORITHMS)}"
            )

        self._seed = (seed if seed is not None else random.getrandbits(64)) & MASK_64
        self._algorithm = algorithm
        self._hash_func = HASH_ALGORITHMS[algorithm]

    def hash_one(self, key: Any) -> int:
        return self._hash_func(key, self._seed)

    @property
    def seed(self) -> int:
        """Get the seed this builder hashes with."""
        return self._seed

    @property
    def algorithm(self) -> str:
        """Get the name of the digest function."""
        return self._algorithm

    def __repr__(self) -> str:
        return f"SeededHasher(seed={self._seed:#x}, algorithm={self._algorithm!r})"


def make_hash_pair(
    seed: Optional[int] = None, algorithm: str = DEFAULT_HASH_ALGORITHM
) -> Tuple[SeededHasher, SeededHasher]:
    """
    Create two independently seeded hash builders.

    Args:
        seed: Optional seed. The same seed always gives the same pair;
              None gives a pair with random seeds.
        algorithm: Name of the digest function used by both builders.

    Returns:
        A tuple of two hash builders.
    """
    if seed is None:
        return SeededHasher(algorithm=algorithm), SeededHasher(algorithm=algorithm)

    rng = random.Random(seed)
    seed_1 = rng.getrandbits(64)
    seed_2 = rng.getrandbits(64)
    # Equal seeds would make h1 == h2 for every key
    while seed_2 == seed_1:
        seed_2 = rng.getrandbits(64)

    return (
        SeededHasher(seed_1, algorithm=algorithm),
        SeededHasher(seed_2, algorithm=algorithm),
    )
