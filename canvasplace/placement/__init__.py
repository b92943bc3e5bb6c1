"""Layout engine: distribution, packing, collision and drag repulsion."""

from .config import LayoutConfig
from .collision import (
    CollisionInfo,
    calculate_adaptive_padding,
    check_collision,
    find_colliding_pairs,
)
from .force_directed import (
    DragSession,
    DragStep,
    RepulsionEngine,
    RepulsionForce,
    calculate_repulsion,
)
from .legalizer import (
    LegalizationResult,
    PositionSearch,
    SearchResult,
    find_valid_position,
    resolve_overlaps,
)
from .packer import (
    FlowPacker,
    GridPacker,
    LayoutStrategy,
    OccupancyPacker,
    PackingResult,
    PlacementOutcome,
    pack_items,
)
from .distributor import CategoryDistributor, DistributionResult, distribute_by_category
from .layout import LayoutReport, populate_canvas

__all__ = [
    "LayoutConfig",
    "CollisionInfo",
    "calculate_adaptive_padding",
    "check_collision",
    "find_colliding_pairs",
    "DragSession",
    "DragStep",
    "RepulsionEngine",
    "RepulsionForce",
    "calculate_repulsion",
    "LegalizationResult",
    "PositionSearch",
    "SearchResult",
    "find_valid_position",
    "resolve_overlaps",
    "FlowPacker",
    "GridPacker",
    "LayoutStrategy",
    "OccupancyPacker",
    "PackingResult",
    "PlacementOutcome",
    "pack_items",
    "CategoryDistributor",
    "DistributionResult",
    "distribute_by_category",
    "LayoutReport",
    "populate_canvas",
]
