"""
Position Legalizer

Turns a requested drop position into a collision-free resting position.

When the preferred position collides with a sibling, candidate positions
are sampled on concentric rings around it (a spiral, since each ring is
rotated slightly so the samples do not line up into a visible lattice).
The first candidate clear of every sibling wins. The search is bounded by
a maximum radius and a maximum number of candidates; exhausting either
returns the preferred position unchanged, flagged as degraded.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..canvas.abstraction import Canvas, Item
from ..patterns import LayoutTables, get_tables
from .collision import collides_with_any, max_sibling_padding
from .config import LayoutConfig

logger = logging.getLogger(__name__)

REASON_SEARCH_EXHAUSTED = "search_exhausted"


@dataclass
class SearchResult:
    """Outcome of a position search."""
    x: float
    y: float
    preferred_x: float
    preferred_y: float
    found: bool  # True when (x, y) is collision-free
    degraded: bool = False
    reason: str = ""
    iterations: int = 0  # spiral candidates; the direct test takes one more from the budget

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def displacement(self) -> float:
        return math.hypot(self.x - self.preferred_x, self.y - self.preferred_y)


@dataclass
class LegalizationResult:
    """Result of a whole-canvas overlap fix."""
    positions: Dict[str, Tuple[float, float]] = field(default_factory=dict)  # moved items only
    items_checked: int = 0
    overlaps_found: int = 0  # items that collided before the pass
    items_moved: int = 0
    unresolved: List[str] = field(default_factory=list)  # search exhausted


class PositionSearch:
    """
    Finds the nearest collision-free position for an item.

    The search holds no state between calls; one instance can serve any
    number of drag gestures.
    """

    def __init__(self, config: Optional[LayoutConfig] = None,
                 tables: Optional[LayoutTables] = None):
        self.config = config or LayoutConfig()
        self.tables = tables or get_tables()

    def find(self, item: Item, siblings: Iterable[Item],
             preferred: Optional[Tuple[float, float]] = None) -> SearchResult:
        """
        Find a collision-free position for ``item`` near ``preferred``.

        Args:
            item: The item being placed
            siblings: Candidate obstacles; only items sharing the item's
                      container (and not the item itself) are considered
            preferred: Desired top-left position (defaults to the item's
                       current position)

        Returns:
            SearchResult; ``found`` is False only when the search budget
            ran out, in which case the preferred position is returned.
        """
        px, py = preferred if preferred is not None else (item.x, item.y)
        obstacles = [s.get_bounding_box(self.tables) for s in siblings
                     if s.id != item.id and s.container_id == item.container_id]

        box = item.bounding_box_at(px, py, self.tables)
        if not obstacles:
            return SearchResult(px, py, px, py, found=True)

        padding = max_sibling_padding(box, obstacles, self.config)
        if not collides_with_any(box, obstacles, padding):
            return SearchResult(px, py, px, py, found=True)

        step = max(box.width, box.height) * self.config.search_step_ratio
        if step <= 0:
            step = 1.0
        angle_step = 2 * math.pi / self.config.search_directions
        # The direct test above used one collision test of the budget
        max_iterations = self.config.max_search_iterations - 1

        iterations = 0
        radius = step
        while radius < self.config.max_search_radius and iterations < max_iterations:
            ring_offset = (radius / step) * self.config.search_ring_rotation
            for i in range(self.config.search_directions):
                if iterations >= max_iterations:
                    break
                iterations += 1

                angle = i * angle_step + ring_offset
                cx = px + math.cos(angle) * radius
                cy = py + math.sin(angle) * radius
                candidate = item.bounding_box_at(cx, cy, self.tables)
                if not collides_with_any(candidate, obstacles, padding):
                    if logger.isEnabledFor(logging.DEBUG):
                        logger.debug(
                            "Position search for %s: found (%.1f, %.1f) at r=%.1f after %d candidates",
                            item.id, cx, cy, radius, iterations,
                        )
                    return SearchResult(cx, cy, px, py, found=True,
                                        iterations=iterations)
            radius += step

        logger.warning(
            "Position search for %s exhausted after %d candidates; keeping (%.1f, %.1f)",
            item.id, iterations, px, py,
        )
        return SearchResult(px, py, px, py, found=False, degraded=True,
                            reason=REASON_SEARCH_EXHAUSTED, iterations=iterations)

    def resolve_overlaps(self, canvas: Canvas) -> LegalizationResult:
        """
        Move every colliding item to its nearest free position.

        Items are processed in canvas order; each move is visible to the
        items processed after it. The canvas itself is not modified.
        """
        result = LegalizationResult()
        working: Dict[str, Item] = {item_id: item for item_id, item in canvas.items.items()
                                    if item_id not in canvas.containers}

        for item_id in list(working):
            item = working[item_id]
            siblings = [other for other in working.values()
                        if other.id != item_id and other.container_id == item.container_id]
            result.items_checked += 1

            search = self.find(item, siblings)
            if search.found and search.iterations == 0:
                continue

            result.overlaps_found += 1
            if not search.found:
                result.unresolved.append(item_id)
                continue

            working[item_id] = item.moved_to(search.x, search.y)
            result.positions[item_id] = search.position
            result.items_moved += 1

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Overlap fix done: checked=%d overlapping=%d moved=%d unresolved=%d",
                result.items_checked,
                result.overlaps_found,
                result.items_moved,
                len(result.unresolved),
            )
        return result


def find_valid_position(item: Item, siblings: Iterable[Item],
                        preferred: Optional[Tuple[float, float]] = None,
                        config: Optional[LayoutConfig] = None,
                        tables: Optional[LayoutTables] = None) -> SearchResult:
    """Convenience wrapper around PositionSearch.find."""
    return PositionSearch(config, tables).find(item, siblings, preferred)


def resolve_overlaps(canvas: Canvas,
                     config: Optional[LayoutConfig] = None,
                     tables: Optional[LayoutTables] = None) -> LegalizationResult:
    """Convenience wrapper around PositionSearch.resolve_overlaps."""
    return PositionSearch(config, tables).resolve_overlaps(canvas)
