#!/usr/bin/env python3

import logging
from typing import Optional

import numpy as np
import trimesh

from probability_navmesh.config import ObserverParams
from probability_navmesh.navmesh import ProbabilityNavMesh


logger = logging.getLogger(__name__)


def rotate_about_up(direction: np.ndarray, degrees: float) -> np.ndarray:
    """Yaw a vector about +Y; positive angles turn +Z towards +X."""
    theta = np.radians(degrees)
    x, y, z = direction
    return np.array([
        x * np.cos(theta) + z * np.sin(theta),
        y,
        -x * np.sin(theta) + z * np.cos(theta),
    ])


class CellObserver:
    """
    Marks the triangles a pursuer can currently see.

    Rays fan out horizontally across the field of vision and are marched in
    fixed steps; every step is located on the mesh and the march stops at
    the first step that leaves it. When an obstacle mesh is given, each ray
    is also cut at its first hit.
    """

    def __init__(self, navmesh: ProbabilityNavMesh, params: Optional[ObserverParams] = None,
                 obstacles: Optional[trimesh.Trimesh] = None):
        self.navmesh = navmesh
        self.params = params or ObserverParams()
        self.obstacles = obstacles
        self.observation_counter = 0.0

    def ray_directions(self, forward) -> np.ndarray:
        forward = np.asarray(forward, dtype=float).copy()
        forward[1] = 0.0
        norm = np.linalg.norm(forward)
        forward = forward / norm if norm > 1e-6 else np.array([0.0, 0.0, 1.0])

        interval = self.params.field_of_vision / self.params.number_of_rays
        half_fov = self.params.field_of_vision / 2.0
        return np.array([
            rotate_about_up(forward, -half_fov + i * interval)
            for i in range(self.params.number_of_rays)
        ])

    def _obstacle_distances(self, origin: np.ndarray, directions: np.ndarray) -> np.ndarray:
        """Distance to the first obstacle along every ray, inf where nothing is hit."""
        distances = np.full(len(directions), np.inf)
        if self.obstacles is None or len(directions) == 0:
            return distances

        origins = np.tile(origin, (len(directions), 1))
        locations, index_ray, _ = self.obstacles.ray.intersects_location(
            ray_origins=origins, ray_directions=directions, multiple_hits=False)
        for location, ray in zip(locations, index_ray):
            distances[ray] = min(distances[ray], np.linalg.norm(location - origin))
        return distances

    def march(self, origin, direction, max_distance: float) -> list:
        """Triangles under the marched points of one ray, in marching order."""
        origin = np.asarray(origin, dtype=float)
        direction = np.asarray(direction, dtype=float)
        interval = self.params.march_interval

        cells = []
        distance = interval
        for _ in range(1, self.params.number_of_marches):
            if distance >= max_distance:
                break
            triangle_index = self.navmesh.topology.locate(origin + direction * distance)
            if triangle_index is None:
                break
            cells.append(triangle_index)
            distance += interval
        return cells

    def observe(self, origin, forward) -> set:
        """Sweep the field of vision and make the mask hold exactly what was seen."""
        origin = np.asarray(origin, dtype=float)
        directions = self.ray_directions(forward)
        reach = self.params.march_interval * self.params.number_of_marches
        cut_offs = np.minimum(self._obstacle_distances(origin, directions), reach)

        seen = set()
        for direction, max_distance in zip(directions, cut_offs):
            seen.update(self.march(origin, direction, max_distance))

        self.navmesh.observed.update(seen)
        logger.debug(f"Observed {len(seen)} triangles from {origin}")
        return seen

    def update(self, dt: float, origin, forward) -> bool:
        """Observe once every observation period. Returns True if it did."""
        self.observation_counter += dt
        if self.observation_counter > self.params.observation_period:
            self.observation_counter = 0.0
            self.observe(origin, forward)
            return True
        return False

    def can_see(self, origin, target) -> bool:
        """Whether target is within line-of-sight range and not behind an obstacle."""
        origin = np.asarray(origin, dtype=float)
        offset = np.asarray(target, dtype=float) - origin
        distance = np.linalg.norm(offset)
        if distance > self.params.max_los_distance:
            return False
        if distance < 1e-6:
            return True
        hit_distance = self._obstacle_distances(origin, (offset / distance)[None, :])[0]
        return hit_distance >= distance
