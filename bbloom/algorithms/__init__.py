"""
Algorithm implementations for bbloom.
"""

from bbloom.algorithms.bloom import BloomFilter, ScalableBloomFilter

__all__ = [
    "BloomFilter",
    "ScalableBloomFilter",
]
