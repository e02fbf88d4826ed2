#!/usr/bin/env python3
import argparse
import logging

import numpy as np
import trimesh

from probability_navmesh.config import DEFAULT_PARAMS_FILE, load_diffusion_params, load_observer_params
from probability_navmesh.diffusion import DiffusionEngine
from probability_navmesh.mesh_topology import MeshTopology
from probability_navmesh.navmesh import ProbabilityNavMesh
from probability_navmesh.observer import CellObserver
from probability_navmesh.plotting import plot_probability


logger = logging.getLogger(__name__)


def grid_mesh(rows: int, cols: int, cell_size: float = 1.0) -> MeshTopology:
    """
    Flat navigation mesh on the x - z plane, two triangles per grid cell.
    """
    xs = np.arange(cols + 1) * cell_size
    zs = np.arange(rows + 1) * cell_size
    vertices = np.array([[x, 0.0, z] for z in zs for x in xs])

    triangles = []
    for r in range(rows):
        for c in range(cols):
            a = r * (cols + 1) + c
            b = a + 1
            d = a + (cols + 1)
            e = d + 1
            triangles.extend([a, b, d, b, e, d])
    return MeshTopology(vertices, triangles)


def load_topology(mesh_file) -> MeshTopology:
    mesh = trimesh.load_mesh(mesh_file, process=False)
    return MeshTopology.from_trimesh(mesh)


def run(navmesh, engine, frames, dt, observer=None, pursuer=None, forward=None):
    steps = 0
    for _ in range(frames):
        if observer is not None and observer.update(dt, pursuer, forward):
            navmesh.confirm_absent()
        if engine.update(dt):
            steps += 1
    return steps


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Diffuse the last known target position across a navigation mesh and report where to search.')
    parser.add_argument('mesh_file', type=str, nargs='?', help='Mesh file readable by trimesh, a grid is generated if omitted')
    parser.add_argument('--grid', type=int, nargs=2, default=[10, 10], metavar=('ROWS', 'COLS'), help='Generated grid size')
    parser.add_argument('--cell-size', type=float, default=1.0, help='Generated grid cell size')
    parser.add_argument('--frames', type=int, default=600, help='Number of frames to simulate')
    parser.add_argument('--dt', type=float, default=1.0 / 60.0, help='Seconds per frame')
    parser.add_argument('--seed', type=float, nargs=2, default=None, metavar=('X', 'Z'), help='Last known target position')
    parser.add_argument('--pursuer', type=float, nargs=2, default=None, metavar=('X', 'Z'), help='Pursuer position, enables observation')
    parser.add_argument('--forward', type=float, nargs=2, default=[0.0, 1.0], metavar=('X', 'Z'), help='Pursuer facing direction')
    parser.add_argument('--params', type=str, default=DEFAULT_PARAMS_FILE, help='Parameter YAML file')
    parser.add_argument('--plot', action='store_true', help='Show the final probability field')
    parser.add_argument('--verbose', action='store_true', help='Log every diffusion step')
    args = parser.parse_args(argv)

    logging.basicConfig(
        format='%(asctime)s - %(levelname)s - %(message)s',
        level=logging.DEBUG if args.verbose else logging.INFO
    )

    if args.mesh_file:
        logger.info(f"Reading mesh file: {args.mesh_file}")
        topology = load_topology(args.mesh_file)
    else:
        topology = grid_mesh(args.grid[0], args.grid[1], args.cell_size)
    navmesh = ProbabilityNavMesh(topology)

    if navmesh.topology.triangle_count == 0:
        logger.error("Mesh has no triangles, nothing to simulate")
        return 1

    if args.seed is not None:
        seed = np.array([args.seed[0], 0.0, args.seed[1]])
    else:
        seed = navmesh.topology.vertices.mean(axis=0)
    seeded = navmesh.confirm_present(seed)
    if seeded is None:
        logger.error(f"Seed position {seed} is not on the mesh")
        return 1
    logger.info(f"Target last seen in triangle {seeded}")

    engine = DiffusionEngine(navmesh, load_diffusion_params(args.params))
    observer = pursuer = forward = None
    if args.pursuer is not None:
        observer = CellObserver(navmesh, load_observer_params(args.params))
        pursuer = np.array([args.pursuer[0], 0.0, args.pursuer[1]])
        forward = np.array([args.forward[0], 0.0, args.forward[1]])

    engine.start()
    steps = run(navmesh, engine, args.frames, args.dt, observer, pursuer, forward)
    engine.stop()

    best = navmesh.field.argmax()
    goal = navmesh.search_goal()
    logger.info(f"Ran {steps} diffusion steps over {args.frames} frames")
    print(f"Best guess: triangle {best} (p={navmesh.field.get(best):.3f}) at {np.round(goal, 3).tolist()}")

    if args.plot:
        plot_probability(navmesh)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
