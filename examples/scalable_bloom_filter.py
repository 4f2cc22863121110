"""
Scalable Bloom Filter Demo for bbloom.

This example streams far more items into a Scalable Bloom Filter than its
initial capacity and shows how it adds layers to keep the false positive
rate bounded. It also uses contains_or_insert() to deduplicate a stream.
"""

import logging
import random

from bbloom import ScalableBloomFilter


def demonstrate_growth():
    """Insert items and watch the layers appear."""
    print("\n=== Scalable Bloom Filter Growth Demo ===")

    sbf = ScalableBloomFilter(0.001, 100, seed=1)
    checkpoints = {100, 1000, 10000, 50000}

    for i in range(1, 50001):
        sbf.insert(f"user-{i}")
        if i in checkpoints:
            print(
                f"  {i:>6,} items: {sbf.layer_count} layers, "
                f"total capacity {sbf.total_capacity:,}, "
                f"memory {sbf.estimate_size():,} bytes"
            )

    probes = 20000
    false_positives = sum(1 for i in range(probes) if sbf.contains(f"visitor-{i}"))
    print(f"\nObserved FPP: {false_positives / probes:.5f}")
    print(f"Compounded bound: {sbf.false_positive_bound():.5f}")

    print("\nLayers:")
    for layer in sbf.get_stats()["layers"]:
        print(
            f"  capacity={layer['expected_items']:>6,} "
            f"fpp={layer['false_positive_rate']:.6f} "
            f"bits={layer['bit_size']:>7,} k={layer['hash_count']} "
            f"fill={layer['fill_ratio']:.1%}"
        )


def demonstrate_deduplication():
    """Drop repeated events from a stream with contains_or_insert()."""
    print("\n=== Stream Deduplication Demo ===")

    rng = random.Random(7)
    events = [f"event-{rng.randrange(5000)}" for _ in range(20000)]

    seen = ScalableBloomFilter(0.0001, 500, seed=2)
    unique = [event for event in events if not seen.contains_or_insert(event)]

    print(f"  Stream length: {len(events):,}")
    print(f"  Exact distinct events: {len(set(events)):,}")
    print(f"  Events passed through: {len(unique):,}")
    print(f"  Layers used: {seen.layer_count}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    demonstrate_growth()
    demonstrate_deduplication()
