#!/usr/bin/env python3

from collections import Counter, defaultdict
import logging
import numbers
from typing import Optional, Sequence

import numpy as np
import trimesh


logger = logging.getLogger(__name__)


class TriangleIndexError(IndexError):
    """Raised when a triangle index falls outside [0, triangle_count)."""


def check_index(index: int, count: int) -> int:
    if isinstance(index, bool) or not isinstance(index, numbers.Integral):
        raise TypeError(f"Triangle index must be an integer, got {index!r}")
    index = int(index)
    if not 0 <= index < count:
        raise TriangleIndexError(
            f"Invalid triangle index {index}, must be between 0 and {count - 1}")
    return index


class MeshTopology:
    """
    Static triangulated surface with edge adjacency and point location.

    Triangle i spans the vertices at triangles[3i], triangles[3i+1] and
    triangles[3i+2]. Adjacency is decided on vertex positions, not on vertex
    indices, so independently indexed but coincident corners still connect.
    """

    def __init__(self, vertices, triangles, position_decimals: Optional[int] = None):
        self.vertices = np.asarray(vertices, dtype=float).reshape(-1, 3)
        indices = np.asarray(triangles, dtype=int).reshape(-1)
        count = len(indices) // 3
        # Trailing indices that do not make a whole triangle are ignored
        self.indices = indices[:count * 3].copy()
        self.triangles = self.indices.reshape(count, 3)
        self.position_decimals = position_decimals

        if len(self.indices) and (self.indices.min() < 0 or self.indices.max() >= len(self.vertices)):
            raise ValueError(
                f"Index buffer references vertices outside [0, {len(self.vertices)})")

        # One hashable key per corner slot of the index buffer
        positions = self.vertices[self.indices] if len(self.indices) else np.zeros((0, 3))
        if position_decimals is not None:
            positions = np.round(positions, position_decimals)
        self._slot_keys = [tuple(p) for p in positions.tolist()]

        # Position -> owning triangle of every corner slot at that position
        self._slots_at_position = defaultdict(list)
        for slot, key in enumerate(self._slot_keys):
            self._slots_at_position[key].append(slot // 3)
        self._neighbors = {}

        # X-Z projection of every triangle, used by locate
        plan = self.vertices[self.triangles][:, :, [0, 2]] if count else np.zeros((0, 3, 2))
        self._plan = plan

        if count == 0:
            logger.warning("Mesh has no triangles")
        else:
            logger.info(f"Built mesh topology: {len(self.vertices)} vertices, {count} triangles")

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh, position_decimals: Optional[int] = None) -> "MeshTopology":
        return cls(mesh.vertices, mesh.faces, position_decimals=position_decimals)

    def to_trimesh(self) -> trimesh.Trimesh:
        """Export the surface as a trimesh, keeping degenerate and duplicate faces."""
        return trimesh.Trimesh(
            vertices=self.vertices.copy(),
            faces=self.triangles.copy(),
            process=False,
        )

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def __len__(self):
        return self.triangle_count

    def vertices_of(self, triangle_index: int) -> tuple:
        """Return the three corner points of a triangle in their stored order."""
        triangle_index = check_index(triangle_index, self.triangle_count)
        i1, i2, i3 = self.triangles[triangle_index]
        return self.vertices[i1].copy(), self.vertices[i2].copy(), self.vertices[i3].copy()

    def centroid_of(self, triangle_index: int) -> np.ndarray:
        triangle_index = check_index(triangle_index, self.triangle_count)
        return self.vertices[self.triangles[triangle_index]].mean(axis=0)

    def neighbors_of(self, triangle_index: int) -> set:
        """
        Triangles sharing an edge with the given triangle.

        A candidate is a neighbour once it has corners on at least two distinct
        positions of this triangle's corners; a single shared corner is not
        enough, however many of the candidate's slots sit on it. Computed from
        the position index and memoised.
        """
        triangle_index = check_index(triangle_index, self.triangle_count)
        cached = self._neighbors.get(triangle_index)
        if cached is not None:
            return set(cached)

        own_positions = set(self._slot_keys[triangle_index * 3:triangle_index * 3 + 3])
        matches = Counter()
        for key in own_positions:
            matches.update(set(self._slots_at_position[key]))
        neighbors = frozenset(
            other for other, hits in matches.items()
            if hits >= 2 and other != triangle_index
        )
        self._neighbors[triangle_index] = neighbors
        return set(neighbors)

    def scan_neighbors_of(self, triangle_index: int) -> set:
        """
        Reference two-pass scan over the whole index buffer.

        The first matching corner flags a triangle as seen once, a match on a
        second position confirms it as a neighbour. O(triangles) per call.
        """
        triangle_index = check_index(triangle_index, self.triangle_count)
        own_positions = set(self._slot_keys[triangle_index * 3:triangle_index * 3 + 3])

        seen_once = set()
        confirmed = set()
        counted = set()
        for slot, key in enumerate(self._slot_keys):
            if key not in own_positions:
                continue
            other = slot // 3
            if other == triangle_index or (other, key) in counted:
                continue
            counted.add((other, key))
            if other not in seen_once:
                seen_once.add(other)
            else:
                confirmed.add(other)
        return confirmed

    def _containment(self, x: float, z: float) -> np.ndarray:
        """Boolean mask of triangles whose X-Z projection contains (x, z)."""
        p0 = self._plan[:, 0]
        p1 = self._plan[:, 1]
        p2 = self._plan[:, 2]

        s = p0[:, 1] * p2[:, 0] - p0[:, 0] * p2[:, 1] + (p2[:, 1] - p0[:, 1]) * x + (p0[:, 0] - p2[:, 0]) * z
        t = p0[:, 0] * p1[:, 1] - p0[:, 1] * p1[:, 0] + (p0[:, 1] - p1[:, 1]) * x + (p1[:, 0] - p0[:, 0]) * z
        area = (-p1[:, 1] * p2[:, 0] + p0[:, 1] * (p2[:, 0] - p1[:, 0])
                + p0[:, 0] * (p1[:, 1] - p2[:, 1]) + p1[:, 0] * p2[:, 1])

        same_sign = (s < 0) == (t < 0)
        positive = (area > 0) & (s >= 0) & (s + t <= area)
        negative = (area < 0) & (s <= 0) & (s + t >= area)
        return same_sign & (positive | negative)

    def locate(self, point: Sequence[float]) -> Optional[int]:
        """
        Index of the triangle containing the point, ignoring height.

        The test runs in the X-Z plane, so vertical walls and regions that
        overlap in plan are not told apart. Edges count as inside and the
        lowest matching index wins, which decides points on shared edges.
        Returns None when the point is off the mesh footprint.
        """
        if self.triangle_count == 0:
            return None
        x, z = float(point[0]), float(point[2])
        hits = np.flatnonzero(self._containment(x, z))
        if len(hits) == 0:
            return None
        return int(hits[0])

    def locate_many(self, points) -> list:
        return [self.locate(p) for p in np.asarray(points, dtype=float).reshape(-1, 3)]
