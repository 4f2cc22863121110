"""
Base classes and interfaces for bbloom filters.

This module defines the abstract base class that both the fixed and the
scalable Bloom filter implement, so they can be used interchangeably
wherever only membership testing is needed. It also provides the hooks
used for statistics and memory estimation.
"""

import abc
import sys
from typing import Any, Dict, Generic, TypeVar

T = TypeVar("T")  # Type for the keys being tested


class MembershipFilter(Generic[T], abc.ABC):
    """
    Abstract base class for probabilistic set-membership structures.

    A membership filter answers "definitely absent" or "possibly present".
    Keys can only be inserted, never removed. Implementations must never
    report a false negative for a key that was inserted.
    """

    def __init__(self) -> None:
        # Every insert call, duplicates included
        self._items_processed = 0

    @abc.abstractmethod
    def insert(self, key: T) -> bool:
        """
        Insert a key into the filter.

        Args:
            key: The key to insert.

        Returns:
            True if the key was newly marked, False if it was already
            possibly present.
        """
        pass

    @abc.abstractmethod
    def contains(self, key: T) -> bool:
        """
        Test whether a key might be in the filter.

        Args:
            key: The key to test.

        Returns:
            True if the key might be present, False if it is definitely absent.
        """
        pass

    @abc.abstractmethod
    def __len__(self) -> int:
        """Number of keys that were newly marked by insert."""
        pass

    def update(self, key: T) -> bool:
        """
        Stream-style alias of insert().

        Args:
            key: The next key from the stream.

        Returns:
            The result of insert().
        """
        return self.insert(key)

    def query(self, key: T, *args: Any, **kwargs: Any) -> bool:
        """Convenience alias of contains()."""
        return self.contains(key)

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]

    def is_empty(self) -> bool:
        """
        Check if nothing has been inserted yet.

        Returns:
            True if the filter is empty, False otherwise.
        """
        return len(self) == 0

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Derived classes add the size of their own storage.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        return size

    def error_bounds(self) -> Dict[str, Any]:
        """
        Get the theoretical error bounds for this filter.

        The base implementation returns an empty dictionary.
        """
        return {}

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the filter.

        Derived classes should call super().get_stats() and add their own
        entries.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "unique_items": len(self),
            "memory_bytes": self.estimate_size(),
        }

        error_bounds = self.error_bounds()
        if error_bounds:
            stats.update(error_bounds)

        return stats

    @property
    def items_processed(self) -> int:
        """Get the total number of insert calls, duplicates included."""
        return self._items_processed
