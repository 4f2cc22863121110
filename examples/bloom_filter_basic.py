"""
Basic Bloom Filter Demo for bbloom.

This example demonstrates how to use the fixed-capacity Bloom Filter
for space-efficient set membership testing. It highlights its probabilistic
nature (false positives), its guarantee of no false negatives and the
"newly inserted" signal returned by insert().
"""

import logging

from bbloom import BloomFilter


def demonstrate_basic_usage():
    """Demonstrate Bloom Filter initialization, inserting, and checking."""
    print("\n=== Basic Bloom Filter Demo ===")

    # Expecting ~10,000 items with a 1% (0.01) false positive rate
    bf = BloomFilter.from_fpp(0.01, 10000, seed=42)

    print("Bloom Filter parameters:")
    print(f"  Expected items: {bf.expected_items:,}")
    print(f"  Target false positive rate: {bf.false_positive_rate:.1%}")
    print(f"  Calculated filter size (bits): {bf.capacity():,} bits")
    print(f"  Calculated number of hashes: {bf.hash_count}")
    print(f"  Estimated memory usage: {bf.estimate_size():,} bytes")

    print("\nInserting items into the filter...")
    items_to_add = ["apple", "banana", "cherry", "date", "fig", "banana"]
    for item in items_to_add:
        new = bf.insert(item)
        print(f"  insert('{item}') -> {'new' if new else 'already possibly present'}")

    print(f"\nFilter state: {bf.items_processed} inserts, {len(bf)} unique items.")

    print("\nChecking membership:")
    print("  (Note: 'False' means DEFINITELY NOT present)")
    print("  (Note: 'True' means POSSIBLY present - could be a false positive)")
    for item in ["apple", "fig", "orange", "pear"]:
        print(f"  '{item}' in filter? {item in bf}")


def demonstrate_fpp_and_fill_ratio():
    """Show how fill ratio affects the actual False Positive Probability."""
    print("\n=== FPP vs. Fill Ratio Demo ===")

    n = 1000
    target_fpp = 0.05
    bf = BloomFilter.from_fpp(target_fpp, n, seed=123)
    print(f"Filter initialized for {n} items, target FPP: {target_fpp:.1%}")

    added = 0
    for step_target in [int(n * 0.1), int(n * 0.5), n, int(n * 1.5), n * 2]:
        for i in range(added, step_target):
            bf.insert(f"item_{i}")
        added = step_target

        probes = 10000
        false_positives = sum(1 for i in range(probes) if bf.contains(f"probe_{i}"))
        print(f"\nAfter adding {added} items:")
        print(f"  Filter fill ratio: {bf.fill_ratio():.2%}")
        print(f"  Estimated current FPP: {bf.false_positive_probability():.4f}")
        print(f"  Observed FPP: {false_positives / probes:.4f}")
        print(f"  Estimated cardinality: {bf.estimate_cardinality()}")

    print("\nNote: As the filter fills beyond its expected capacity,")
    print("the actual false positive probability climbs above the target rate.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    demonstrate_basic_usage()
    demonstrate_fpp_and_fill_ratio()
