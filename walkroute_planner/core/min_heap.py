"""Binary min-heap with true decrease-key.

Items are (identity, priority) pairs. Identities are opaque hashables (grid
node ids in practice), so the heap keeps an identity -> array position index
and updates it on every swap, append and pop. decrease_key() finds the item
through that index instead of assuming identity equals position.
"""

from collections.abc import Hashable
from typing import Generic, TypeVar

from walkroute_planner.errors import EmptyQueueError

K = TypeVar("K", bound=Hashable)


class MinHeap(Generic[K]):
    """Priority queue over (identity, priority) pairs.

    Example:
        heap = MinHeap()
        heap.insert("a", 5.0)
        heap.insert("b", 3.0)
        heap.decrease_key("a", 1.0)
        heap.extract_min()  # ("a", 1.0)
    """

    def __init__(self) -> None:
        self._heap: list[tuple[K, float]] = []
        self._positions: dict[K, int] = {}

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, identity: object) -> bool:
        return identity in self._positions

    def is_empty(self) -> bool:
        return not self._heap

    def priority_of(self, identity: K) -> float:
        """Current priority of a queued identity (raises KeyError if absent)."""
        return self._heap[self._positions[identity]][1]

    def peek(self) -> tuple[K, float]:
        """Return the minimum item without removing it."""
        if not self._heap:
            raise EmptyQueueError("peek() on empty heap")
        return self._heap[0]

    def insert(self, identity: K, priority: float) -> None:
        """Add an identity with the given priority. O(log n).

        Raises:
            ValueError: If the identity is already queued.
        """
        if identity in self._positions:
            raise ValueError(f"{identity!r} is already in the heap")
        self._heap.append((identity, priority))
        self._positions[identity] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)

    def extract_min(self) -> tuple[K, float]:
        """Remove and return the item with the smallest priority. O(log n).

        Raises:
            EmptyQueueError: If the heap is empty.
        """
        if not self._heap:
            raise EmptyQueueError("extract_min() on empty heap")

        last_index = len(self._heap) - 1
        self._swap(0, last_index)
        identity, priority = self._heap.pop()
        del self._positions[identity]
        if self._heap:
            self._sift_down(0)
        return identity, priority

    def decrease_key(self, identity: K, new_priority: float) -> bool:
        """Lower an item's priority in place. O(log n).

        Args:
            identity: Queued identity
            new_priority: Must be strictly smaller than the current priority

        Returns:
            True if the priority was lowered, False if new_priority was not smaller (no-op).

        Raises:
            KeyError: If the identity is not queued.
        """
        index = self._positions[identity]
        if not new_priority < self._heap[index][1]:
            return False
        self._heap[index] = (identity, new_priority)
        self._sift_up(index)
        return True

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._positions[heap[i][0]] = i
        self._positions[heap[j][0]] = j

    def _sift_up(self, index: int) -> None:
        heap = self._heap
        while index > 0:
            parent = (index - 1) // 2
            if heap[index][1] < heap[parent][1]:
                self._swap(index, parent)
                index = parent
            else:
                break

    def _sift_down(self, index: int) -> None:
        heap = self._heap
        size = len(heap)
        while True:
            left = 2 * index + 1
            right = left + 1
            smallest = index
            if left < size and heap[left][1] < heap[smallest][1]:
                smallest = left
            if right < size and heap[right][1] < heap[smallest][1]:
                smallest = right
            if smallest == index:
                break
            self._swap(index, smallest)
            index = smallest
