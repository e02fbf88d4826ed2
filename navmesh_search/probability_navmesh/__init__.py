from probability_navmesh.config import DiffusionParams, ObserverParams
from probability_navmesh.diffusion import DiffusionEngine, EngineState
from probability_navmesh.mesh_topology import MeshTopology, TriangleIndexError
from probability_navmesh.navmesh import ProbabilityNavMesh
from probability_navmesh.observation_mask import ObservationMask
from probability_navmesh.probability_field import ProbabilityField

__all__ = [
    "DiffusionEngine",
    "DiffusionParams",
    "EngineState",
    "MeshTopology",
    "ObservationMask",
    "ObserverParams",
    "ProbabilityField",
    "ProbabilityNavMesh",
    "TriangleIndexError",
]
