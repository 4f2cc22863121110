"""
Bloom Filter implementations for bbloom.

This module provides Bloom Filter implementations for efficient set membership testing
with bounded memory usage.

This includes:
- BloomFilter: Fixed-capacity Bloom filter for membership testing
- ScalableBloomFilter: Layered Bloom filter that grows with the number of items
"""

from bbloom.algorithms.bloom.base import (
    BloomFilter,
    optimal_number_of_hash_functions,
    optimal_required_bits,
)
from bbloom.algorithms.bloom.scalable import (
    GROWTH_FACTOR,
    TIGHTENING_RATIO,
    ScalableBloomFilter,
)

__all__ = [
    "BloomFilter",
    "ScalableBloomFilter",
    "optimal_required_bits",
    "optimal_number_of_hash_functions",
    "GROWTH_FACTOR",
    "TIGHTENING_RATIO",
]
