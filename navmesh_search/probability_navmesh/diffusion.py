#!/usr/bin/env python3

from enum import Enum
import logging
from typing import Optional

import numpy as np

from probability_navmesh.config import DiffusionParams
from probability_navmesh.navmesh import ProbabilityNavMesh


logger = logging.getLogger(__name__)


class EngineState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


class DiffusionEngine:
    """
    Spreads probability from known cells into unobserved neighbours over time.

    Each step reads one snapshot of the field, accumulates every transfer in a
    delta buffer and commits it once, so the triangle visiting order never
    changes the outcome of a step. Observed triangles neither give nor receive
    mass. Donors stop giving once their own outflow would take them under the
    uncertain floor, while their neighbours still receive the share. Total
    mass is therefore not conserved: a confident cell decays towards
    uncertainty but not past it without new evidence.

    A log-odds occupancy update with a measurement model is the natural next
    step for this rule and is not implemented here.
    """

    def __init__(self, navmesh: ProbabilityNavMesh, params: Optional[DiffusionParams] = None):
        self.navmesh = navmesh
        self.params = params or DiffusionParams()
        self.state = EngineState.IDLE
        self.accumulator = 0.0
        self.step_count = 0
        if self.params.tick_period <= 0:
            logger.warning(f"Tick period is {self.params.tick_period}, the engine will never propagate")

    @property
    def is_active(self) -> bool:
        return self.state is EngineState.ACTIVE

    def start(self):
        if not self.is_active:
            logger.info("Diffusion started")
        self.state = EngineState.ACTIVE

    def stop(self):
        if self.is_active:
            logger.info(f"Diffusion stopped after {self.step_count} steps")
        self.state = EngineState.IDLE

    def update(self, dt: float) -> bool:
        """
        Advance the tick clock by one frame of dt seconds.

        When the accumulated time passes the tick period it wraps around
        (keeping the remainder, so uneven frame times do not drift) and
        exactly one step runs. Returns True if a step ran.
        """
        period = self.params.tick_period
        if not self.is_active or period <= 0:
            return False

        self.accumulator += dt
        if self.accumulator > period:
            self.accumulator %= period
            self.step()
            return True
        return False

    def step(self) -> np.ndarray:
        """Run one diffusion step and return the committed per-triangle change."""
        topology = self.navmesh.topology
        field = self.navmesh.field
        observed = self.navmesh.observed
        threshold = self.params.min_propagation_threshold
        floor = self.params.uncertain_floor
        flow_scale = self.params.flow_scale

        probabilities = field.values
        delta = np.zeros(len(probabilities))
        donors = 0

        for i, current in enumerate(probabilities):
            if observed.is_observed(i):
                continue
            if current < threshold:
                continue

            neighbors = sorted(n for n in topology.neighbors_of(i) if not observed.is_observed(n))
            if not neighbors:
                continue
            donors += 1

            for n in neighbors:
                neighbor_prob = probabilities[n]
                # Lower certainty next door means a higher flow rate
                flow_rate = (1.0 - neighbor_prob) * flow_scale
                excess = max(0.0, current - neighbor_prob)
                # Even split between neighbours before each one's own rate scales it
                share = excess * flow_rate / len(neighbors)

                delta[n] += share
                if current + delta[i] - share >= floor:
                    delta[i] -= share

        field.apply(delta)
        self.step_count += 1
        logger.debug(
            f"Step {self.step_count}: {donors} donors, "
            f"{delta[delta > 0].sum():.4f} received, {-delta[delta < 0].sum():.4f} given")
        return delta
