"""
Fixed-capacity FIFO history of (x, y) chart points.
"""
from collections import deque
from typing import Deque, Iterator, List, Optional, Tuple

Point = Tuple[float, float]


class HashrateHistory:
    # Append to the back, evict from the front; trim is explicit so paired
    # histories can be pushed independently and trimmed together.
    def __init__(self, capacity: int = 720):
        self.capacity: int = capacity
        self._points: Deque[Point] = deque()

    def push(self, point: Point) -> None:
        self._points.append((float(point[0]), float(point[1])))

    def trim(self, capacity: Optional[int] = None) -> int:
        # Pop oldest points until len <= capacity; returns how many were evicted.
        limit = self.capacity if capacity is None else capacity
        evicted = 0
        while len(self._points) > limit:
            self._points.popleft()
            evicted += 1
        return evicted

    def latest(self) -> float:
        return self._points[-1][1] if self._points else 0.0

    def points(self) -> List[Point]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __repr__(self) -> str:
        return f"HashrateHistory(len={len(self)}, capacity={self.capacity})"
