"""
bbloom - Bloom filters for Python

bbloom answers "definitely absent" or "possibly present" for a stream of keys
using a fraction of the memory an exact set would need. It provides a
fixed-capacity Bloom filter and a Scalable Bloom Filter that grows with the
number of inserted items while holding a target false positive probability.
"""

import logging

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from bbloom.algorithms.bloom import (
    BloomFilter,
    ScalableBloomFilter,
    optimal_number_of_hash_functions,
    optimal_required_bits,
)
from bbloom.core.base import MembershipFilter
from bbloom.core.hash import HashBuilder, SeededHasher, make_hash_pair

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core base classes
    "MembershipFilter",
    "HashBuilder",
    "SeededHasher",
    "make_hash_pair",
    # Algorithm implementations
    "BloomFilter",
    "ScalableBloomFilter",
    "optimal_required_bits",
    "optimal_number_of_hash_functions",
]
