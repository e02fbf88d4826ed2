# tests/conftest.py

import matplotlib

matplotlib.use("Agg")

import pytest

from probability_navmesh.mesh_topology import MeshTopology
from probability_navmesh.navmesh import ProbabilityNavMesh
from probability_navmesh.simulate import grid_mesh


@pytest.fixture
def square_topology():
    """Two triangles sharing the edge (1,0,0)-(0,0,1)."""
    vertices = [(0, 0, 0), (1, 0, 0), (0, 0, 1), (1, 0, 1)]
    return MeshTopology(vertices, [0, 1, 2, 1, 3, 2])


@pytest.fixture
def fan_topology():
    """A centre triangle with one outer triangle on each of its edges.

    The outer triangles only touch each other at corners.
    """
    vertices = [
        (0, 0, 0),   # A
        (2, 0, 0),   # B
        (1, 0, 2),   # C
        (1, 0, -2),  # beyond AB
        (3, 0, 2),   # beyond BC
        (-1, 0, 2),  # beyond CA
    ]
    return MeshTopology(vertices, [0, 1, 2, 0, 3, 1, 1, 4, 2, 2, 5, 0])


@pytest.fixture
def grid_topology():
    return grid_mesh(6, 6)


@pytest.fixture
def square_navmesh(square_topology):
    return ProbabilityNavMesh(square_topology, initial=[1.0, 0.0])


@pytest.fixture
def fan_navmesh(fan_topology):
    return ProbabilityNavMesh(fan_topology, initial=[0.9, 0.0, 0.0, 0.0])
