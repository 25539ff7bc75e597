from __future__ import annotations

import heapq
from typing import Iterable, Iterator, List, Optional, Set


class FloorQueue:
    """Ordered set of requested floors, nearest-first in one travel direction.

    An ascending queue holds floors above the car and yields the lowest one
    first; a descending queue holds floors below and yields the highest first.
    Pressing a floor that is already queued is a no-op.
    """

    def __init__(self, descending: bool = False, floors: Iterable[int] = ()) -> None:
        self.descending = descending
        self._heap: List[int] = []
        self._members: Set[int] = set()
        for floor in floors:
            self.push(floor)

    def _key(self, floor: int) -> int:
        return -floor if self.descending else floor

    def push(self, floor: int) -> bool:
        if floor in self._members:
            return False
        self._members.add(floor)
        heapq.heappush(self._heap, self._key(floor))
        return True

    def peek(self) -> Optional[int]:
        if not self._heap:
            return None
        return self._key(self._heap[0])

    def pop(self) -> int:
        if not self._heap:
            raise IndexError("pop from an empty floor queue")
        floor = self._key(heapq.heappop(self._heap))
        self._members.discard(floor)
        return floor

    def head_is(self, floor: int) -> bool:
        return bool(self._heap) and self.peek() == floor

    def clear(self) -> None:
        self._heap.clear()
        self._members.clear()

    def to_list(self) -> List[int]:
        return sorted(self._members, reverse=self.descending)

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_list())

    def __contains__(self, floor: object) -> bool:
        return floor in self._members

    def __len__(self) -> int:
        return len(self._heap)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        order = "descending" if self.descending else "ascending"
        return f"FloorQueue({order}, {self.to_list()})"
