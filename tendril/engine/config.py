"""Growth simulator tuning. Each simulator takes an optional instance of its config."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SurfaceConfig:
    """Shared field-building knobs for the environment-aware behaviors."""

    # Region extraction
    max_shapes: int = 80
    min_shape_area: float = 16.0

    # SDF grid
    sdf_resolution_min: int = 100
    sdf_resolution_max: int = 190

    # Density map
    density_resolution: int = 32


@dataclass
class PhysarumConfig:
    sensor_angle_deg: float = 25.0
    turn_rate: float = 0.62  # fraction of the sensor angle turned per step
    max_trail: int = 320  # sliding window of trail points per agent
    chunk_points: int = 42
    pheromone_decay: float = 0.986
    min_seeds: int = 14
    max_seeds: int = 60
    max_attractors: int = 24
    kill_radius: float = 1.5  # times the search radius, wraps back onto the ring
    density_jitter_threshold: float = 0.72


@dataclass
class BranchConfig:
    max_tree_strokes: int = 320
    base_angle_deg: float = 30.0
    spread_jitter_deg: float = 8.0
    length_shrink: float = 0.74
    size_shrink: float = 0.76
    max_seeds: int = 42
    min_seeds: int = 12
    kill_radius: float = 3.1
    extra_branch_min_generation: int = 4
    extra_branch_chance: float = 0.35


@dataclass
class FlowConfig:
    max_seeds: int = 90
    max_attractors: int = 20
    momentum: float = 0.72
    max_cell_visits: int = 3
    kill_radius_sq: float = 2.1  # squared-distance multiple of radius²
    curl_scale: float = 0.005
    curl_weight: float = 0.3


@dataclass
class VineConfig:
    tip_budget: int = 250
    max_global_iterations: int = 3000
    edge_threshold: float = 25.0
    edge_blend: float = 0.7
    avoid_radius: float = 18.0
    noise_scale: float = 0.008
    noise_strength: float = 0.38
    max_generation: int = 6
    size_shrink: float = 0.82
    momentum_steps: int = 12
    branch_cooldown: int = 8
    collision_factor: float = 1.5  # collision distance in step lengths
    color_grace_steps: float = 30.0  # color drift starts after this many step lengths
    kill_radius: float = 2.5
    detach_after_steps: int = 26
    collide_after_steps: int = 20
    max_fill_tips: int = 50
