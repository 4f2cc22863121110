"""
Unit tests for the Scalable Bloom Filter implementation.
"""

import random
import unittest

from bbloom.algorithms.bloom.base import BloomFilter
from bbloom.algorithms.bloom.scalable import (
    GROWTH_FACTOR,
    TIGHTENING_RATIO,
    ScalableBloomFilter,
)


def snapshot(sbf):
    """Capture everything that insert can change."""
    return (
        len(sbf),
        sbf.items_processed,
        sbf.total_capacity,
        sbf.last_fpp,
        [
            (layer.bit_size, len(layer), layer.items_processed, layer._bytes.tobytes())
            for layer in sbf.filters
        ],
    )


class TestScalableBloomFilter(unittest.TestCase):
    """Test cases for Scalable Bloom Filter."""

    def test_init(self):
        """Test initialization with valid and invalid parameters."""
        sbf = ScalableBloomFilter(0.01, 128)
        self.assertEqual(sbf.layer_count, 1)
        self.assertEqual(sbf.total_capacity, 128)
        self.assertEqual(sbf.last_fpp, 0.01)
        self.assertEqual(sbf.growth_factor, GROWTH_FACTOR)
        self.assertEqual(sbf.tightening_ratio, TIGHTENING_RATIO)
        self.assertEqual(len(sbf), 0)
        self.assertTrue(sbf.is_empty())

        layer = sbf.filters[0]
        self.assertIsInstance(layer, BloomFilter)
        self.assertEqual(layer.capacity(), 1227)
        self.assertEqual(layer.hash_count, 7)

        with self.assertRaises(ValueError):
            ScalableBloomFilter(0, 10)
        with self.assertRaises(ValueError):
            ScalableBloomFilter(1.5, 10)
        with self.assertRaises(ValueError):
            ScalableBloomFilter(0.01, 0)
        with self.assertRaises(ValueError):
            ScalableBloomFilter(0.01, 10, growth_factor=0)
        with self.assertRaises(TypeError):
            ScalableBloomFilter(0.01, 10, growth_factor=1.5)
        with self.assertRaises(ValueError):
            ScalableBloomFilter(0.01, 10, tightening_ratio=1.0)

    def test_growth_trigger(self):
        """Test that the fifth key into a four-item filter adds a second layer."""
        sbf = ScalableBloomFilter(0.0001, 4, seed=1)

        for key in ["a", "b", "c", "d"]:
            self.assertTrue(sbf.insert(key))
        self.assertEqual(sbf.layer_count, 1)

        self.assertTrue(sbf.insert("e"))
        self.assertEqual(sbf.layer_count, 2)
        self.assertEqual(len(sbf), 5)

        second = sbf.filters[1]
        self.assertEqual(second.expected_items, 4 * 2)
        self.assertAlmostEqual(second.false_positive_rate, 0.0001 * 0.85)
        self.assertEqual(sbf.total_capacity, 4 + 8)
        self.assertAlmostEqual(sbf.last_fpp, 0.0001 * 0.85)

        # Only the newest layer took the fifth key
        self.assertEqual(len(sbf.filters[0]), 4)
        self.assertEqual(len(second), 1)

    def test_geometric_growth(self):
        """Test capacities and targets across several growths."""
        sbf = ScalableBloomFilter(0.01, 10, seed=2)
        for i in range(200):
            sbf.insert(f"item-{i}")

        capacities = [layer.expected_items for layer in sbf.filters]
        self.assertEqual(capacities[:4], [10, 20, 60, 180])
        self.assertEqual(sbf.total_capacity, sum(capacities))

        for older, newer in zip(sbf.filters, sbf.filters[1:]):
            self.assertAlmostEqual(
                newer.false_positive_rate, older.false_positive_rate * TIGHTENING_RATIO
            )

        self.assertLessEqual(len(sbf), sbf.total_capacity)

    def test_custom_growth_parameters(self):
        """Test non-default growth factor and tightening ratio."""
        sbf = ScalableBloomFilter(0.01, 5, growth_factor=4, tightening_ratio=0.5, seed=3)
        for i in range(6):
            sbf.insert(f"item-{i}")

        self.assertEqual(sbf.layer_count, 2)
        self.assertEqual(sbf.filters[1].expected_items, 20)
        self.assertAlmostEqual(sbf.last_fpp, 0.005)
        self.assertEqual(sbf.total_capacity, 25)

    def test_no_false_negatives(self):
        """Test that every inserted key is found across many growths."""
        sbf = ScalableBloomFilter(0.001, 16)
        keys = [f"key-{i}" for i in range(5000)]
        for key in keys:
            sbf.insert(key)

        self.assertGreater(sbf.layer_count, 1)
        missing = [key for key in keys if not sbf.contains(key)]
        self.assertEqual(missing, [], "False negatives detected!")

    def test_false_positive_bound(self):
        """Test that the empirical rate stays below the compounded bound."""
        p = 0.01
        sbf = ScalableBloomFilter(p, 100, seed=4)
        for i in range(3000):
            sbf.insert(f"item-{i}")

        n_tests = 10000
        false_positives = sum(1 for i in range(n_tests) if sbf.contains(f"other-{i}"))

        bound = sbf.false_positive_bound()
        self.assertLess(bound, p / (1 - TIGHTENING_RATIO))
        self.assertLessEqual(false_positives / n_tests, bound * 1.5)

    def test_duplicate_insert(self):
        """Test the duplicate signal within the current layer."""
        sbf = ScalableBloomFilter(0.0001, 64, seed=5)
        self.assertTrue(sbf.insert("b"))
        self.assertFalse(sbf.insert("b"))
        self.assertEqual(len(sbf), 1)
        self.assertEqual(sbf.items_processed, 2)

    def test_duplicate_across_layers(self):
        """Test that a key in an older layer is inserted again into the current one."""
        sbf = ScalableBloomFilter(0.0001, 2, seed=6)
        sbf.insert("old")
        sbf.insert("filler")
        sbf.insert("trigger")  # grows

        self.assertEqual(sbf.layer_count, 2)
        self.assertTrue(sbf.filters[0].contains("old"))
        self.assertTrue(sbf.insert("old"))
        self.assertTrue(sbf.filters[1].contains("old"))

    def test_contains_or_insert(self):
        """Test basic contains_or_insert results."""
        sbf = ScalableBloomFilter(0.0001, 64, seed=7)

        self.assertFalse(sbf.contains_or_insert("a"))
        self.assertTrue(sbf.contains("a"))
        self.assertTrue(sbf.contains_or_insert("a"))
        self.assertEqual(len(sbf), 1)

    def test_contains_or_insert_single_layer(self):
        """Test that the only layer is checked up front."""
        sbf = ScalableBloomFilter(0.0001, 64, seed=8)
        sbf.insert("x")
        before = snapshot(sbf)

        self.assertTrue(sbf.contains_or_insert("x"))
        self.assertEqual(snapshot(sbf), before)

    def test_contains_or_insert_key_in_current_layer(self):
        """Test a key held only by the current layer leaves every counter alone."""
        left = ScalableBloomFilter(0.0001, 2, seed=1)
        right = ScalableBloomFilter(0.0001, 2, seed=1)
        for key in ["a", "b", "c"]:
            left.insert(key)
            right.insert(key)
        self.assertEqual(left.layer_count, 2)

        expected = right.contains("c")
        if not expected:
            right.insert("c")

        self.assertTrue(left.contains_or_insert("c"))
        self.assertEqual(expected, True)
        self.assertEqual(left.items_processed, 3)
        self.assertEqual(left.get_stats()["items_processed"], right.get_stats()["items_processed"])
        self.assertEqual(snapshot(left), snapshot(right))

    def test_contains_or_insert_counts_real_inserts(self):
        """Test that a new key counts as one processed item."""
        sbf = ScalableBloomFilter(0.0001, 64, seed=13)
        self.assertFalse(sbf.contains_or_insert("new"))
        self.assertEqual(sbf.items_processed, 1)
        self.assertEqual(sbf.filters[-1].items_processed, 1)
        self.assertEqual(len(sbf), 1)

    def test_contains_or_insert_equivalence(self):
        """Test equivalence with contains followed by a conditional insert."""
        rng = random.Random(99)
        keys = [f"key-{rng.randrange(300)}" for _ in range(2000)]

        left = ScalableBloomFilter(0.01, 8, seed=9)
        right = ScalableBloomFilter(0.01, 8, seed=9)

        for key in keys:
            expected = right.contains(key)
            if not expected:
                right.insert(key)

            self.assertEqual(left.contains_or_insert(key), expected, key)
            self.assertEqual(snapshot(left), snapshot(right), key)

        self.assertGreater(left.layer_count, 1)

    def test_contains_or_insert_at_growth_boundary(self):
        """Test a key held by the full current layer does not trigger a growth."""
        sbf = ScalableBloomFilter(0.0001, 1, seed=10)
        sbf.insert("a")
        sbf.insert("b")  # second layer, capacity 2, total 3
        sbf.insert("c")  # fills it
        self.assertEqual(sbf.layer_count, 2)
        self.assertEqual(len(sbf), sbf.total_capacity)

        before = snapshot(sbf)
        self.assertTrue(sbf.contains_or_insert("c"))
        self.assertEqual(snapshot(sbf), before)

        self.assertFalse(sbf.contains_or_insert("d"))
        self.assertEqual(sbf.layer_count, 3)

    def test_seeded_filters_are_reproducible(self):
        """Test that the same seed gives the same layers."""
        sbf1 = ScalableBloomFilter(0.01, 10, seed=11)
        sbf2 = ScalableBloomFilter(0.01, 10, seed=11)
        for i in range(100):
            sbf1.insert(i)
            sbf2.insert(i)

        self.assertEqual(snapshot(sbf1), snapshot(sbf2))

    def test_get_stats(self):
        """Test the statistics dictionary."""
        sbf = ScalableBloomFilter(0.01, 10, seed=12)
        for i in range(25):
            sbf.insert(f"item-{i}")

        stats = sbf.get_stats()
        self.assertEqual(stats["type"], "ScalableBloomFilter")
        self.assertEqual(stats["layer_count"], sbf.layer_count)
        self.assertEqual(stats["total_capacity"], sbf.total_capacity)
        self.assertEqual(len(stats["layers"]), sbf.layer_count)
        self.assertEqual(sum(layer["unique_items"] for layer in stats["layers"]), len(sbf))
        self.assertGreater(stats["memory_bytes"], sum(len(f._bytes) for f in sbf.filters))
        self.assertIn("false_positive_bound", stats)
        self.assertGreaterEqual(stats["current_fpp"], 0.0)
        self.assertLessEqual(stats["current_fpp"], 1.0)


if __name__ == "__main__":
    unittest.main()
