#!/usr/bin/env python3

from typing import Iterable


class ObservationMask:
    """Triangles currently seen directly by the visibility side."""

    def __init__(self, indices: Iterable[int] = ()):
        self._observed = {int(i) for i in indices}

    def mark(self, triangle_index: int):
        self._observed.add(int(triangle_index))

    def unmark(self, triangle_index: int):
        self._observed.discard(int(triangle_index))

    def is_observed(self, triangle_index: int) -> bool:
        return int(triangle_index) in self._observed

    def update(self, indices: Iterable[int]):
        """Make the observed set exactly `indices`."""
        current = {int(i) for i in indices}
        for stale in self._observed - current:
            self.unmark(stale)
        for fresh in current - self._observed:
            self.mark(fresh)

    def clear(self):
        self._observed.clear()

    def __contains__(self, triangle_index):
        return self.is_observed(triangle_index)

    def __len__(self):
        return len(self._observed)

    def __iter__(self):
        return iter(sorted(self._observed))

    def __eq__(self, other):
        if not isinstance(other, ObservationMask):
            return NotImplemented
        return self._observed == other._observed

    def __repr__(self):
        return f"ObservationMask({sorted(self._observed)})"
