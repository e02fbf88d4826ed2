#!/usr/bin/env python3

from dataclasses import dataclass, fields
import os
from typing import Optional

import yaml


DEFAULT_PARAMS_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "params", "navmesh_params.yaml")


def load_params(file_path=DEFAULT_PARAMS_FILE) -> dict:
    with open(file_path, "r") as file:
        params = yaml.safe_load(file)
    return params or {}


def _from_section(cls, section: Optional[dict]):
    section = dict(section or {})
    known = {f.name for f in fields(cls)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**section)


@dataclass
class DiffusionParams:
    # Seconds between diffusion ticks, zero or less never ticks
    tick_period: float = 1.0
    # Cells below this probability do not donate
    min_propagation_threshold: float = 0.05
    # Donors cannot be pushed below this by their own outflow
    uncertain_floor: float = 0.5
    # Caps a single exchange at this share of the excess
    flow_scale: float = 0.5

    def __post_init__(self):
        self.tick_period = float(self.tick_period)
        self.min_propagation_threshold = float(self.min_propagation_threshold)
        self.uncertain_floor = float(self.uncertain_floor)
        self.flow_scale = float(self.flow_scale)
        if not 0.0 <= self.uncertain_floor <= 1.0:
            raise ValueError(f"uncertain_floor must be within [0, 1], got {self.uncertain_floor}")
        if not 0.0 <= self.flow_scale <= 1.0:
            raise ValueError(f"flow_scale must be within [0, 1], got {self.flow_scale}")

    @classmethod
    def from_dict(cls, section: Optional[dict]) -> "DiffusionParams":
        return _from_section(cls, section)


@dataclass
class ObserverParams:
    field_of_vision: float = 90.0
    number_of_rays: int = 8
    number_of_marches: int = 10
    march_interval: float = 0.1
    observation_period: float = 0.5
    max_los_distance: float = 15.0

    def __post_init__(self):
        self.number_of_rays = int(self.number_of_rays)
        self.number_of_marches = int(self.number_of_marches)
        if self.number_of_rays < 1:
            raise ValueError(f"number_of_rays must be at least 1, got {self.number_of_rays}")
        if self.march_interval <= 0:
            raise ValueError(f"march_interval must be positive, got {self.march_interval}")

    @classmethod
    def from_dict(cls, section: Optional[dict]) -> "ObserverParams":
        return _from_section(cls, section)


def load_diffusion_params(file_path=None) -> DiffusionParams:
    params = load_params(file_path or DEFAULT_PARAMS_FILE)
    return DiffusionParams.from_dict(params.get("diffusion"))


def load_observer_params(file_path=None) -> ObserverParams:
    params = load_params(file_path or DEFAULT_PARAMS_FILE)
    return ObserverParams.from_dict(params.get("observer"))
