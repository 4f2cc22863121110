"""
Scalable Bloom Filter implementation for bbloom.

A Scalable Bloom Filter adapts to the number of items inserted while holding
a target false positive probability. It keeps a list of fixed Bloom filters:
when the newest one reaches its capacity a larger one with a tighter false
positive target is appended, and only the newest one receives inserts.

References:
    - Almeida, P. S., Baquero, C., Preguica, N., and Hutchison, D. (2007).
      Scalable Bloom Filters. Information Processing Letters, 101(6), 255-261.
"""

import logging
import random
from typing import Any, Dict, List, Optional, Tuple, TypeVar

from bbloom.algorithms.bloom.base import BloomFilter, _check_fpp_and_items
from bbloom.core.base import MembershipFilter

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Type for the keys being tested

# growth factor s: each new layer holds s times the capacity so far
GROWTH_FACTOR = 2
# tightening ratio r: each new layer targets r times the previous fpp
TIGHTENING_RATIO = 0.85


class ScalableBloomFilter(MembershipFilter[T]):
    """
    Scalable Bloom Filter that grows with the number of inserted items.

    The compounded false positive probability stays below
    p / (1 - r) for tightening ratio r, no matter how many layers get added.

    Example:
        # Start with room for 1000 items at a 0.1% false positive rate
        sbf = ScalableBloomFilter(0.001, 1000)

        for i in range(100_000):
            sbf.insert(f"user-{i}")  # grows as needed

        sbf.contains("user-42")  # True
        sbf.layer_count  # number of fixed filters created so far
    """

    def __init__(
        self,
        p: float,
        n: int,
        growth_factor: int = GROWTH_FACTOR,
        tightening_ratio: float = TIGHTENING_RATIO,
        seed: Optional[int] = None,
    ):
        """
        Initialize a new Scalable Bloom filter with a single layer.

        Args:
            p: Target false positive probability of the first layer, in (0, 1].
            n: Expected number of items for the first layer, at least 1.
            growth_factor: Capacity multiplier s for each new layer.
            tightening_ratio: False positive multiplier r for each new layer.
            seed: Optional seed making every layer's hashers reproducible.
                  None gives random hashers.

        Raises:
            TypeError: If n or growth_factor is not an integer.
            ValueError: If any parameter is out of range.
        """
        super().__init__()

        _check_fpp_and_items(p, n)
        if not isinstance(growth_factor, int):
            raise TypeError(f"Growth factor must be an integer, got {growth_factor!r}")
        if growth_factor < 1:
            raise ValueError("Growth factor must be at least 1")
        if not (0 < tightening_ratio < 1):
            raise ValueError(
                f"Tightening ratio must be between 0 and 1, got {tightening_ratio!r}"
            )

        self._growth_factor = growth_factor
        self._tightening_ratio = tightening_ratio
        self._seed = seed
        self._seed_rng = random.Random(seed) if seed is not None else None

        self._filters: List[BloomFilter[T]] = [self._new_layer(p, n)]
        self._total_capacity = n
        self._last_fpp = p
        self._count = 0

    def _new_layer(self, p: float, n: int) -> BloomFilter[T]:
        """Create a fixed filter, seeded from this filter's seed stream if any."""
        layer_seed = self._seed_rng.getrandbits(64) if self._seed_rng is not None else None
        return BloomFilter.from_fpp(p, n, seed=layer_seed)

    def _needs_growth(self) -> bool:
        return self._count >= self._total_capacity

    def _grow(self) -> None:
        """Append a layer with s times the total capacity and r times the last fpp."""
        p = self._last_fpp * self._tightening_ratio
        n = self._total_capacity * self._growth_factor

        layer = self._new_layer(p, n)
        self._filters.append(layer)

        self._total_capacity += n
        self._last_fpp = p

        logger.debug(
            "Added layer %d: capacity=%d, fpp=%g, m=%d, k=%d (total capacity %d)",
            len(self._filters),
            n,
            p,
            layer.bit_size,
            layer.hash_count,
            self._total_capacity,
        )

    def insert(self, key: T) -> bool:
        """
        Insert a key into the newest layer, growing first if it is full.

        A key already present in an older layer can still be newly inserted
        into the current one; only the current layer's load drives growth.

        Args:
            key: The key to insert.

        Returns:
            True if the key was newly marked in the current layer, False if
            it was already possibly present there.
        """
        self._items_processed += 1

        if self._needs_growth():
            self._grow()

        inserted = self._filters[-1].insert(key)
        if inserted:
            self._count += 1

        return inserted

    def contains(self, key: T) -> bool:
        """
        Test if a key might be in any layer.

        Args:
            key: The key to test.

        Returns:
            True if the key might be in the set, False if definitely not in the set.
        """
        return any(layer.contains(key) for layer in self._filters)

    def contains_or_insert(self, key: T) -> bool:
        """
        Test for a key and insert it if it is absent.

        Gives the same answer, and leaves the same state, as contains()
        followed by insert() when that returned False, while testing the
        current layer only once.

        Args:
            key: The key to test and possibly insert.

        Returns:
            True if the key was possibly present already, False if it was
            newly inserted.
        """
        # With a single layer, that layer is the one checked up front
        older = self._filters[:-1] or self._filters
        if any(layer.contains(key) for layer in older):
            return True

        # A pending growth would move the insert to a fresh layer
        if len(self._filters) > 1 and self._needs_growth():
            if self._filters[-1].contains(key):
                return True

        if self._needs_growth():
            self._grow()

        # Marking tells whether the current layer already held the key;
        # only a real insert is counted as one
        current = self._filters[-1]
        if not current._mark(key):
            return True

        current._items_processed += 1
        self._items_processed += 1
        self._count += 1
        return False

    def __len__(self) -> int:
        return self._count

    @property
    def filters(self) -> Tuple[BloomFilter[T], ...]:
        """The layers, in the order they were created."""
        return tuple(self._filters)

    @property
    def layer_count(self) -> int:
        """Number of layers created so far."""
        return len(self._filters)

    @property
    def total_capacity(self) -> int:
        """Sum of the target capacities of all layers."""
        return self._total_capacity

    @property
    def last_fpp(self) -> float:
        """False positive target of the newest layer."""
        return self._last_fpp

    @property
    def growth_factor(self) -> int:
        """Capacity multiplier s applied when a layer is added."""
        return self._growth_factor

    @property
    def tightening_ratio(self) -> float:
        """False positive multiplier r applied when a layer is added."""
        return self._tightening_ratio

    def false_positive_bound(self) -> float:
        """
        Upper bound on the compounded false positive probability.

        This is the sum of the per-layer targets, which converges because
        the tightening ratio is below 1.
        """
        return min(1.0, sum(layer.false_positive_rate or 0.0 for layer in self._filters))

    def false_positive_probability(self) -> float:
        """
        Estimate the current false positive probability from the layers' fill ratios.

        A key is a false positive if any layer reports it, so the layer
        estimates compound as 1 - prod(1 - p_i).

        Returns:
            Current estimated false positive probability.
        """
        miss = 1.0
        for layer in self._filters:
            miss *= 1.0 - layer.false_positive_probability()
        return 1.0 - miss

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of all layers in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        return super().estimate_size() + sum(layer.estimate_size() for layer in self._filters)

    def error_bounds(self) -> Dict[str, Any]:
        bounds = super().error_bounds()
        bounds["false_positive_bound"] = self.false_positive_bound()
        return bounds

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the filter and each of its layers.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats = super().get_stats()

        stats.update(
            {
                "layer_count": len(self._filters),
                "total_capacity": self._total_capacity,
                "last_fpp": self._last_fpp,
                "growth_factor": self._growth_factor,
                "tightening_ratio": self._tightening_ratio,
                "current_fpp": self.false_positive_probability(),
                "layers": [
                    {
                        "expected_items": layer.expected_items,
                        "false_positive_rate": layer.false_positive_rate,
                        "bit_size": layer.bit_size,
                        "hash_count": layer.hash_count,
                        "unique_items": len(layer),
                        "fill_ratio": layer.fill_ratio(),
                    }
                    for layer in self._filters
                ],
            }
        )

        return stats

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(layers={len(self._filters)}, "
            f"total_capacity={self._total_capacity}, n={self._count})"
        )
