"""
Double hashing for bbloom.

Derives an unbounded sequence of hash values from two base digests, so a
filter with k hash functions only ever computes two real hashes per key.

References:
    - Kirsch, A. and Mitzenmacher, M. (2006). Less Hashing, Same Performance:
      Building a Better Bloom Filter. ESA 2006, 456-467.
"""

from typing import Any, Iterator

from bbloom.core.hash import MASK_64, HashBuilder


class DoubleHasher(Iterator[int]):
    """
    Iterator over the double-hashing sequence of a single key.

    Index 0 yields h1, index 1 yields h2 and every later index i yields
    h1 + i * h2 modulo 2**64. The sequence never ends; callers take the
    first k values with itertools.islice.

    Example:
        hasher = DoubleHasher("apple", builder_1, builder_2)
        positions = [h % m for h in itertools.islice(hasher, k)]
    """

    __slots__ = ("h1", "h2", "i")

    def __init__(self, key: Any, builder_1: HashBuilder, builder_2: HashBuilder):
        """
        Hash the key once with each builder.

        Args:
            key: The key to hash.
            builder_1: Builder producing the first base digest.
            builder_2: Builder producing the second base digest.
        """
        self.h1 = builder_1.hash_one(key)
        self.h2 = builder_2.hash_one(key)
        self.i = 0

    def __iter__(self) -> "DoubleHasher":
        return self

    def __next__(self) -> int:
        i = self.i
        if i == 0:
            value = self.h1
        elif i == 1:
            value = self.h2
        else:
            value = (self.h1 + i * self.h2) & MASK_64

        self.i = i + 1
        return value
