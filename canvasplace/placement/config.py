"""Configuration record shared by all layout stages."""

from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import logging

import yaml

logger = logging.getLogger(__name__)

# Caller-facing option names used by the interaction layer
CAMEL_CASE_ALIASES = {
    "startX": "start_x",
    "startY": "start_y",
    "gridCellSize": "grid_cell_size",
    "maxSearchRadius": "max_search_radius",
    "maxSearchIterations": "max_search_iterations",
    "repulsionConstant": "repulsion_constant",
    "dampingFraction": "damping_fraction",
}


@dataclass
class LayoutConfig:
    """Configuration for packing, collision and drag interaction."""
    # Packing
    spacing: float = 40.0  # clearance added to each footprint
    start_x: float = 50.0  # scan offset inside the container
    start_y: float = 50.0
    grid_cell_size: float = 10.0  # occupancy grid resolution
    strategy: str = "occupancy"  # occupancy | grid | flow
    flow_edge_margin: float = 20.0  # extra right-edge slack before a flow row wraps

    # Adaptive padding: clamp(base + ratio * avg_size, min, max)
    padding_base: float = 20.0
    padding_ratio: float = 0.1
    min_padding: float = 20.0
    max_padding: float = 100.0

    # Position search (on release)
    max_search_radius: float = 2000.0
    max_search_iterations: int = 100
    search_step_ratio: float = 0.1  # ring step as a fraction of max(width, height)
    search_directions: int = 8  # samples per ring
    search_ring_rotation: float = 0.5  # radians added per ring

    # Repulsion (while dragging)
    repulsion_constant: float = 150.0
    damping_fraction: float = 0.5
    degenerate_push: float = 50.0  # push magnitude for coincident centers
    min_repulsion_strength: float = 0.0  # neighbors at or below this are ignored
    min_nudge: float = 0.0  # per-step nudges at or below this are dropped

    def validate(self) -> 'LayoutConfig':
        """Check option ranges, raising ValueError on the first bad value."""
        if self.grid_cell_size <= 0:
            raise ValueError(f"grid_cell_size must be positive, got {self.grid_cell_size}")
        if self.spacing < 0:
            raise ValueError(f"spacing must be non-negative, got {self.spacing}")
        if not 0 < self.damping_fraction <= 1:
            raise ValueError(
                f"damping_fraction must be in (0, 1], got {self.damping_fraction}"
            )
        if self.max_search_iterations <= 0:
            raise ValueError(
                f"max_search_iterations must be positive, got {self.max_search_iterations}"
            )
        if self.max_search_radius <= 0:
            raise ValueError(
                f"max_search_radius must be positive, got {self.max_search_radius}"
            )
        if self.search_directions <= 0:
            raise ValueError(
                f"search_directions must be positive, got {self.search_directions}"
            )
        if self.min_padding > self.max_padding:
            raise ValueError(
                f"min_padding ({self.min_padding}) exceeds max_padding ({self.max_padding})"
            )
        if self.strategy not in ("occupancy", "grid", "flow"):
            raise ValueError(f"Unknown layout strategy: {self.strategy}")
        return self

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'LayoutConfig':
        """Build a config from snake_case or camelCase option names."""
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}
        unknown = []
        for key, value in (data or {}).items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name not in known:
                unknown.append(key)
                continue
            values[name] = value

        if unknown:
            raise ValueError(f"Unknown layout options: {sorted(unknown)}")

        if "max_search_iterations" in values:
            values["max_search_iterations"] = int(values["max_search_iterations"])
        if "search_directions" in values:
            values["search_directions"] = int(values["search_directions"])

        config = cls(**values).validate()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Layout config: %s", config.to_dict())
        return config

    @classmethod
    def from_file(cls, path: Path) -> 'LayoutConfig':
        """Load a config from a YAML (or JSON) file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Layout config must be a mapping: {path}")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
