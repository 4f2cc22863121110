"""
Bloom Filter implementation for bbloom.

This module provides a fixed-capacity Bloom Filter, a space-efficient
probabilistic data structure used for testing set membership with tunable
false positive rates and no false negatives, plus the helpers that size it
for a target false positive probability.

References:
    - Bloom, B. H. (1970). Space/time trade-offs in hash coding with allowable errors.
      Communications of the ACM, 13(7), 422-426.
"""

import array
import itertools
import logging
import math
import sys
from typing import Any, Dict, Iterator, Optional, Tuple, TypeVar

from bbloom.core.base import MembershipFilter
from bbloom.core.double_hasher import DoubleHasher
from bbloom.core.hash import HashBuilder, make_hash_pair

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Type for the keys being tested


def optimal_required_bits(p: float, n: int) -> int:
    """
    Calculate the optimal bit array size for a target false positive rate.

    Formula: m = ceil(-(n * ln(p)) / (ln(2)^2))

    Args:
        p: Target false positive probability.
        n: Expected number of inserted items.

    Returns:
        Optimal bit array size m.
    """
    ln_2 = math.log(2)
    m = -(n * math.log(p)) / (ln_2 * ln_2)
    return math.ceil(m)


def optimal_number_of_hash_functions(m: int, n: int) -> int:
    """
    Calculate the optimal number of hash functions.

    Formula: k = ceil((m / n) * ln(2))

    Args:
        m: Bit array size.
        n: Expected number of inserted items.

    Returns:
        Optimal number of hash functions k.
    """
    k = m / n * math.log(2)
    return math.ceil(k)


def _check_fpp_and_items(p: float, n: int) -> None:
    """Raise if p is outside (0, 1] or n is not a positive integer."""
    if not isinstance(n, int):
        raise TypeError(f"Expected number of items must be an integer, got {n!r}")
    if n < 1:
        raise ValueError("Expected number of items must be at least 1")
    if not (0 < p <= 1):
        raise ValueError(f"False positive rate must be in (0, 1], got {p!r}")


class BloomFilter(MembershipFilter[T]):
    """
    Fixed-capacity Bloom Filter for set membership testing.

    A Bloom filter is a space-efficient probabilistic data structure used to test
    whether an element is a member of a set. False positives are possible, but
    false negatives are not; a query returns either "possibly in set" or
    "definitely not in set".

    The filter holds m bits and touches k of them per key. The k positions
    come from a DoubleHasher over two independently seeded hash builders.

    Example:
        # Create a filter with 0.01% false positive rate for 64 items
        bloom = BloomFilter.from_fpp(0.0001, 64)

        bloom.insert("a")  # True, newly inserted
        bloom.insert("a")  # False, already possibly present

        bloom.contains("a")  # True
        bloom.contains("c")  # False (almost certainly)
    """

    def __init__(
        self,
        m: int,
        k: int,
        hashers: Optional[Tuple[HashBuilder, HashBuilder]] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize a Bloom filter with an explicit size.

        Args:
            m: Size of the bit array.
            k: Number of hash functions.
            hashers: Optional pair of hash builders. When omitted, a pair is
                     created from seed.
            seed: Optional seed for the generated hash builders. None gives
                  random, per-instance seeds.

        Raises:
            TypeError: If m or k is not an integer.
            ValueError: If m or k is less than 1.
        """
        super().__init__()

        if not isinstance(m, int) or not isinstance(k, int):
            raise TypeError(f"Bit size and hash count must be integers, got {m!r}, {k!r}")
        if m < 1:
            raise ValueError("Bit array length must be at least 1")
        if k < 1:
            raise ValueError("Number of hash functions must be at least 1")

        self._bit_size = m
        self._hash_count = k
        self._hashers = hashers if hashers is not None else make_hash_pair(seed)

        # Set only through from_fpp()
        self._expected_items: Optional[int] = None
        self._false_positive_rate: Optional[float] = None

        # 'B' typecode gives unsigned char, 8 bits per entry
        num_bytes = (m + 7) // 8
        self._bytes = array.array("B", bytes(num_bytes))

        # Keys that newly set at least one bit
        self._count = 0

        logger.debug("Created BloomFilter with m=%d bits, k=%d hashes", m, k)

    @classmethod
    def from_fpp(
        cls,
        p: float,
        n: int,
        hashers: Optional[Tuple[HashBuilder, HashBuilder]] = None,
        seed: Optional[int] = None,
    ) -> "BloomFilter[T]":
        """
        Create a Bloom filter sized for a target false positive probability.

        The optimal size of the bit array m and number of hash functions k are
        calculated from p and n. See "Optimal number of hash functions":
        https://en.wikipedia.org/wiki/Bloom_filter#Optimal_number_of_hash_functions

        Args:
            p: Target false positive probability, in (0, 1].
            n: Expected number of inserted items, at least 1.
            hashers: Optional pair of hash builders.
            seed: Optional seed for the generated hash builders.

        Returns:
            A new, empty BloomFilter.

        Raises:
            TypeError: If n is not an integer.
            ValueError: If p is outside (0, 1] or n is less than 1.
        """
        _check_fpp_and_items(p, n)

        # p == 1 gives m == 0; one bit is the smallest usable filter
        m = max(1, optimal_required_bits(p, n))
        k = max(1, optimal_number_of_hash_functions(m, n))

        instance = cls(m, k, hashers=hashers, seed=seed)
        instance._expected_items = n
        instance._false_positive_rate = p
        return instance

    def _get_bit_positions(self, key: T) -> Iterator[int]:
        """
        Generate the k bit positions for a key.

        Args:
            key: The key to hash.

        Returns:
            Iterator over k bit positions, lazily computed.
        """
        m = self._bit_size
        hasher = DoubleHasher(key, self._hashers[0], self._hashers[1])
        return (h % m for h in itertools.islice(hasher, self._hash_count))

    def _set_bit(self, position: int) -> None:
        self._bytes[position >> 3] |= 1 << (position & 7)

    def _test_bit(self, position: int) -> bool:
        return bool(self._bytes[position >> 3] & (1 << (position & 7)))

    def insert(self, key: T) -> bool:
        """
        Add a key to the Bloom filter.

        Sets every one of the key's k bits. The return value tells whether the
        key was new: True if at least one bit was unset before, False if all
        were already set (a likely duplicate, or a false positive).

        Args:
            key: The key to add to the filter.

        Returns:
            True if the key was newly inserted, False otherwise.
        """
        self._items_processed += 1
        return self._mark(key)

    def _mark(self, key: T) -> bool:
        """Set the key's bits and count it if any was unset, without counting the call."""
        newly_set = False
        for position in self._get_bit_positions(key):
            if not self._test_bit(position):
                self._set_bit(position)
                newly_set = True

        if newly_set:
            self._count += 1

        return newly_set

    def contains(self, key: T) -> bool:
        """
        Test if a key might be in the set.

        Remember that false positives can occur: True only means the key is
        possibly present. False means it is definitely not present.

        Args:
            key: The key to test.

        Returns:
            True if the key might be in the set, False if definitely not in the set.
        """
        for position in self._get_bit_positions(key):
            if not self._test_bit(position):
                return False
        return True

    def capacity(self) -> int:
        """Return the size of the bit array m."""
        return self._bit_size

    def __len__(self) -> int:
        return self._count

    @property
    def bit_size(self) -> int:
        """Size of the bit array m."""
        return self._bit_size

    @property
    def hash_count(self) -> int:
        """Number of hash functions k."""
        return self._hash_count

    @property
    def expected_items(self) -> Optional[int]:
        """Target capacity n given to from_fpp(), or None."""
        return self._expected_items

    @property
    def false_positive_rate(self) -> Optional[float]:
        """Target false positive probability given to from_fpp(), or None."""
        return self._false_positive_rate

    @property
    def hashers(self) -> Tuple[HashBuilder, HashBuilder]:
        """The pair of hash builders this filter hashes with."""
        return self._hashers

    def set_bits(self) -> int:
        """Count the bits that are set to 1."""
        return sum(bin(byte).count("1") for byte in self._bytes)

    def fill_ratio(self) -> float:
        """Fraction of the bit array that is set."""
        return self.set_bits() / self._bit_size

    def false_positive_probability(self) -> float:
        """
        Estimate the current false positive probability from the fill ratio.

        FPP ~= (fraction of bits set)^k. This reflects the current state,
        not the target rate.

        Returns:
            Current estimated false positive probability.
        """
        fpp = self.fill_ratio() ** self._hash_count
        return max(0.0, min(fpp, 1.0))

    def estimate_cardinality(self) -> int:
        """
        Estimate the number of unique items in the filter from its fill ratio.

        Uses n ~= -m * ln(1 - X/m) / k where X is the number of set bits.
        The estimate degrades as the filter saturates.

        Returns:
            Estimated number of unique items.
        """
        set_bits = self.set_bits()
        if set_bits == 0:
            return 0
        if set_bits >= self._bit_size:
            # Saturated, the formula diverges
            return self._items_processed

        estimate = -self._bit_size * math.log(1.0 - set_bits / self._bit_size) / self._hash_count
        return min(max(0, int(round(estimate))), self._items_processed)

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        return super().estimate_size() + sys.getsizeof(self._bytes)

    def error_bounds(self) -> Dict[str, Any]:
        """
        Calculate the theoretical error bounds for this Bloom filter.

        Uses (1 - e^(-k*n/m))^k with n the number of newly inserted keys.

        Returns:
            A dictionary with error bound information specific to the filter.
        """
        bounds = super().error_bounds()

        if self._false_positive_rate is not None:
            bounds["target_fpp"] = self._false_positive_rate

        if self._count > 0:
            fill = 1.0 - math.exp(-(self._hash_count * self._count) / self._bit_size)
            bounds["current_theoretical_fpp"] = min(fill**self._hash_count, 1.0)
            bounds["theoretical_fill_ratio"] = fill

        return bounds

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the Bloom filter.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats = super().get_stats()

        set_bits = self.set_bits()
        stats.update(
            {
                "expected_items": self._expected_items,
                "false_positive_rate": self._false_positive_rate,
                "bit_size": self._bit_size,
                "hash_count": self._hash_count,
                "set_bits": set_bits,
                "fill_ratio": set_bits / self._bit_size,
                "estimated_unique_items": self.estimate_cardinality(),
                "current_fpp": self.false_positive_probability(),
            }
        )

        if self._count > 0:
            stats["bits_per_item"] = self._bit_size / self._count

        return stats

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(m={self._bit_size}, k={self._hash_count}, "
            f"n={self._count})"
        )
