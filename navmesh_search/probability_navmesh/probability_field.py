#!/usr/bin/env python3

import math
from typing import Optional

import numpy as np

from probability_navmesh.mesh_topology import check_index


UNCERTAIN_PROBABILITY = 0.5


def _checked(value: float) -> float:
    value = float(value)
    if math.isnan(value):
        raise ValueError("Probability must be a number, got NaN")
    return min(1.0, max(0.0, value))


class ProbabilityField:
    """
    One occupancy belief per triangle, parallel to the mesh triangle list.

    Values are independent local beliefs in [0, 1], not a distribution, so
    nothing normalises them. Every write is clamped.
    """

    def __init__(self, count: int, initial=None):
        count = int(count)
        if initial is None:
            self._values = np.zeros(count)
            return

        initial = np.asarray(initial, dtype=float).reshape(-1)
        if len(initial) != count:
            raise ValueError(f"Expected {count} initial probabilities, got {len(initial)}")
        if np.isnan(initial).any():
            raise ValueError("Initial probabilities contain NaN")
        self._values = np.clip(initial, 0.0, 1.0)

    def __len__(self):
        return len(self._values)

    def __getitem__(self, triangle_index):
        return self.get(triangle_index)

    def __setitem__(self, triangle_index, value):
        self.set(triangle_index, value)

    @property
    def values(self) -> np.ndarray:
        """Read-only snapshot of every probability."""
        snapshot = self._values.copy()
        snapshot.flags.writeable = False
        return snapshot

    def get(self, triangle_index: int) -> float:
        return float(self._values[check_index(triangle_index, len(self._values))])

    def set(self, triangle_index: int, value: float):
        self._values[check_index(triangle_index, len(self._values))] = _checked(value)

    def set_all(self, value: float):
        self._values.fill(_checked(value))

    def reset(self):
        """Every triangle back to maximal uncertainty."""
        self.set_all(UNCERTAIN_PROBABILITY)

    def apply(self, delta: np.ndarray):
        """Add a per-triangle change in one commit and clamp the result."""
        delta = np.asarray(delta, dtype=float)
        if delta.shape != self._values.shape:
            raise ValueError(f"Delta shape {delta.shape} does not match field shape {self._values.shape}")
        np.clip(self._values + delta, 0.0, 1.0, out=self._values)

    def argmax(self) -> Optional[int]:
        """Most likely triangle, earliest index on ties, None for an empty field."""
        if len(self._values) == 0:
            return None
        return int(np.argmax(self._values))
