"""
Magnetic Repulsion While Dragging

Computes a continuous, distance-based push between a dragged item and its
same-container neighbors. Each interactive step is a fresh force
computation applied as a one-shot positional nudge: there is no velocity
state and nothing carries over between steps or gestures.

Force model:
- repulsion radius = half-diagonal(mover) + half-diagonal(neighbor) + padding
- strength = 1 - distance / radius inside the radius, 0 outside
- magnitude = strength^2 * repulsion_constant, pointing from neighbor to mover
- coincident centers get a fixed push in a direction derived from the ids
"""

import hashlib
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..canvas.abstraction import Canvas, Item
from ..patterns import LayoutTables, get_tables
from .collision import calculate_adaptive_padding
from .config import LayoutConfig
from .legalizer import PositionSearch, SearchResult

logger = logging.getLogger(__name__)


def _deterministic_angle(key: str) -> float:
    """Map a string key to a reproducible angle in [0, 2*pi).

    Uses MD5 so the same pair of items always separates the same way.
    """
    h = hashlib.md5(key.encode()).hexdigest()
    return int(h[:8], 16) / 0xFFFFFFFF * 2 * math.pi


@dataclass(frozen=True)
class RepulsionForce:
    """Push applied to the mover by one neighbor."""
    push_x: float = 0.0
    push_y: float = 0.0
    strength: float = 0.0  # 0 (out of range) .. 1 (touching centers)
    degenerate: bool = False  # centers coincided
    source: str = ""  # neighbor id

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.push_x * self.push_x + self.push_y * self.push_y)


@dataclass
class DragStep:
    """Positional nudge for one interactive step."""
    dx: float = 0.0
    dy: float = 0.0
    strength: float = 0.0  # strongest neighbor strength this step
    neighbors: List[str] = field(default_factory=list)  # ids that pushed

    @property
    def is_zero(self) -> bool:
        return self.dx == 0.0 and self.dy == 0.0

    def apply_to(self, x: float, y: float) -> Tuple[float, float]:
        return (x + self.dx, y + self.dy)


class RepulsionEngine:
    """Pairwise repulsion between a moving item and its neighbors."""

    def __init__(self, config: Optional[LayoutConfig] = None,
                 tables: Optional[LayoutTables] = None):
        self.config = config or LayoutConfig()
        self.tables = tables or get_tables()

    def repulsion(self, mover: Item, neighbor: Item,
                  all_items: Optional[Iterable[Item]] = None) -> RepulsionForce:
        """
        Push exerted on ``mover`` by ``neighbor``.

        Args:
            mover: The dragged item
            neighbor: Another item; no force unless it shares the container
            all_items: Full item set, accepted for context but unused

        Returns:
            RepulsionForce with strength in [0, 1]
        """
        if mover.container_id != neighbor.container_id:
            return RepulsionForce(source=neighbor.id)

        b1 = mover.get_bounding_box(self.tables)
        b2 = neighbor.get_bounding_box(self.tables)
        dx = b1.center_x - b2.center_x
        dy = b1.center_y - b2.center_y
        distance = math.sqrt(dx * dx + dy * dy)

        if distance == 0:
            return self._degenerate_push(mover, neighbor)

        padding = calculate_adaptive_padding(b1, b2, self.config)
        repulsion_radius = b1.radius + b2.radius + padding
        if distance >= repulsion_radius:
            return RepulsionForce(source=neighbor.id)

        strength = 1 - distance / repulsion_radius
        magnitude = strength * strength * self.config.repulsion_constant
        return RepulsionForce(
            dx / distance * magnitude,
            dy / distance * magnitude,
            strength,
            source=neighbor.id,
        )

    def _degenerate_push(self, mover: Item, neighbor: Item) -> RepulsionForce:
        """Fixed-magnitude push for coincident centers.

        The angle comes from the sorted id pair; the item whose id sorts
        last is pushed the opposite way, so the pair separates.
        """
        first, second = sorted((mover.id, neighbor.id))
        angle = _deterministic_angle(f"{first}_{second}")
        if mover.id == second and first != second:
            angle += math.pi
        push = self.config.degenerate_push
        return RepulsionForce(
            math.cos(angle) * push,
            math.sin(angle) * push,
            1.0,
            degenerate=True,
            source=neighbor.id,
        )

    def step(self, mover: Item, neighbors: Iterable[Item]) -> DragStep:
        """
        Sum the pushes from all same-container neighbors into one nudge.

        The sum is scaled by ``damping_fraction`` so the item resists
        rather than snaps away.
        """
        neighbors = list(neighbors)
        total_x = 0.0
        total_y = 0.0
        strongest = 0.0
        pushed_by = []

        for neighbor in neighbors:
            if neighbor.id == mover.id:
                continue
            force = self.repulsion(mover, neighbor, neighbors)
            if force.strength <= self.config.min_repulsion_strength:
                continue
            total_x += force.push_x
            total_y += force.push_y
            strongest = max(strongest, force.strength)
            pushed_by.append(neighbor.id)

        dx = total_x * self.config.damping_fraction
        dy = total_y * self.config.damping_fraction

        min_nudge = self.config.min_nudge
        if min_nudge > 0 and abs(dx) <= min_nudge and abs(dy) <= min_nudge:
            dx = dy = 0.0

        if logger.isEnabledFor(logging.DEBUG) and pushed_by:
            logger.debug(
                "Drag step for %s: nudge=(%.2f, %.2f) strength=%.2f neighbors=%d",
                mover.id, dx, dy, strongest, len(pushed_by),
            )
        return DragStep(dx, dy, strongest, pushed_by)


class DragSession:
    """
    One drag gesture on one item.

    Call ``step`` once per display frame while the gesture is active and
    ``release`` once when it ends. The session reads positions from the
    canvas on every call and never writes to it; callers apply the
    returned deltas and positions themselves.
    """

    def __init__(self, canvas: Canvas, item_id: str,
                 config: Optional[LayoutConfig] = None,
                 tables: Optional[LayoutTables] = None):
        if item_id not in canvas.items:
            raise KeyError(f"Unknown item: {item_id}")
        if item_id in canvas.containers:
            raise ValueError(f"Containers cannot be dragged: {item_id}")
        self.canvas = canvas
        self.item_id = item_id
        self.config = config or LayoutConfig()
        self.tables = tables or get_tables()
        self._engine = RepulsionEngine(self.config, self.tables)
        self._search = PositionSearch(self.config, self.tables)

    @property
    def item(self) -> Item:
        return self.canvas.items[self.item_id]

    def step(self, canvas: Optional[Canvas] = None) -> DragStep:
        """Compute this frame's repulsion nudge for the dragged item.

        Args:
            canvas: Latest canvas snapshot, when the caller replaces its
                    collection wholesale between frames
        """
        if canvas is not None:
            self.canvas = canvas
        mover = self.item
        return self._engine.step(mover, self.canvas.get_siblings(mover))

    def release(self, canvas: Optional[Canvas] = None) -> SearchResult:
        """Snap the dragged item to a collision-free position."""
        if canvas is not None:
            self.canvas = canvas
        mover = self.item
        return self._search.find(mover, self.canvas.get_siblings(mover))


def calculate_repulsion(mover: Item, neighbor: Item,
                        all_items: Optional[Iterable[Item]] = None,
                        config: Optional[LayoutConfig] = None,
                        tables: Optional[LayoutTables] = None) -> RepulsionForce:
    """Convenience wrapper around RepulsionEngine.repulsion."""
    return RepulsionEngine(config, tables).repulsion(mover, neighbor, all_items)
