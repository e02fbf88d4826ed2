#!/usr/bin/env python3

import logging
from typing import Iterable, Optional

import numpy as np

from probability_navmesh.mesh_topology import MeshTopology
from probability_navmesh.observation_mask import ObservationMask
from probability_navmesh.probability_field import ProbabilityField


logger = logging.getLogger(__name__)

PRESENT = 1.0
ABSENT = 0.0


class ProbabilityNavMesh:
    """
    A navigation mesh with a probability layer on top of it.

    Holds the topology, one probability per triangle and the set of triangles
    currently observed. A host keeps one instance per tracked area and hands
    it to the visibility side, the diffusion engine and the goal chooser.
    """

    def __init__(self, topology: MeshTopology, initial=None):
        self.topology = topology
        self.field = ProbabilityField(topology.triangle_count, initial)
        self.observed = ObservationMask()

    @classmethod
    def from_buffers(cls, vertices, triangles, initial=None, position_decimals=None):
        return cls(MeshTopology(vertices, triangles, position_decimals=position_decimals), initial)

    def __len__(self):
        return len(self.field)

    def triangle_at(self, point) -> Optional[int]:
        return self.topology.locate(point)

    def reset(self):
        self.field.reset()

    def search_goal(self) -> Optional[np.ndarray]:
        """Centroid of the most likely triangle, None for an empty mesh."""
        best = self.field.argmax()
        if best is None:
            return None
        return self.topology.centroid_of(best)

    def confirm_present(self, point) -> Optional[int]:
        """Target seen at point: its cell becomes certain. Returns that cell."""
        triangle_index = self.topology.locate(point)
        if triangle_index is None:
            logger.debug(f"Sighting at {point} is off the mesh")
            return None
        self.field.set(triangle_index, PRESENT)
        return triangle_index

    def confirm_absent(self, indices: Optional[Iterable[int]] = None):
        """Target not in these cells, every observed cell by default."""
        for triangle_index in (self.observed if indices is None else indices):
            self.field.set(triangle_index, ABSENT)
