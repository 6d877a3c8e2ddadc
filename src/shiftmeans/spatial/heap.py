"""
Bounded max-heap of neighbour candidates keyed on squared distance.
"""

from typing import Any, List, Optional, Tuple
import heapq
import math


class DistKeeper:
    """Keeps the nearest candidates seen, up to an optional capacity.
    
    Candidates farther than ``radius_squared`` are never kept. Once the
    keeper is full the farthest candidate is evicted, and among candidates
    at equal distance the one offered last goes first, so ties resolve in
    offer order.
    """
    
    def __init__(self, radius_squared: float = math.inf, capacity: Optional[int] = None):
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.radius_squared = radius_squared
        self.capacity = capacity
        # Entries are (-distance, -sequence, item) so the heap top is the worst.
        self._heap: List[Tuple[float, int, Any]] = []
        self._sequence = 0
        
    def __len__(self) -> int:
        return len(self._heap)
        
    @property
    def full(self) -> bool:
        return self.capacity is not None and len(self._heap) >= self.capacity
        
    @property
    def max_distance(self) -> float:
        """Current pruning bound: the farthest kept distance once full."""
        if self.full:
            return -self._heap[0][0]
        return self.radius_squared
        
    def keep(self, item: Any, distance: float) -> bool:
        """Offer a candidate; returns whether it was kept."""
        if distance > self.radius_squared:
            return False
        entry = (-distance, -self._sequence, item)
        self._sequence += 1
        if not self.full:
            heapq.heappush(self._heap, entry)
            return True
        if distance < -self._heap[0][0]:
            heapq.heapreplace(self._heap, entry)
            return True
        return False
        
    def results(self) -> List[Tuple[Any, float]]:
        """Kept candidates ordered by distance, then offer order."""
        ordered = sorted(self._heap, key=lambda e: (-e[0], -e[1]))
        return [(item, -neg_dist) for neg_dist, _, item in ordered]
        
    def clear(self) -> None:
        self._heap = []
        self._sequence = 0
