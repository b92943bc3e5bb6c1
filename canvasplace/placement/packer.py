"""
Container Packing

Computes initial, non-overlapping positions for the items of one container.
Three strategies share the same bounding-box and padding primitives:

1. Occupancy (default) - a fine virtual grid tracks claimed area; items are
   placed tallest-first at the first row-major cell where their whole
   footprint is free (shelf-style packing).
2. Grid - uniform columns sized from the average item width.
3. Flow - left-to-right rows, largest items first, wrapping at the usable
   container width.

Positions are in the container's own frame. Placements that could not be
made normally are returned flagged as degraded instead of raising.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from ..canvas.abstraction import BoundingBox, Container, Item
from ..patterns import LayoutTables, get_tables
from .collision import calculate_adaptive_padding
from .config import LayoutConfig

logger = logging.getLogger(__name__)

REASON_NO_GRID_FIT = "no_grid_fit"
REASON_EXCEEDS_HEIGHT = "exceeds_container_height"


class LayoutStrategy(Enum):
    """Packing strategies."""
    OCCUPANCY = "occupancy"
    GRID = "grid"
    FLOW = "flow"


@dataclass
class PlacementOutcome:
    """Position assigned to one item."""
    item_id: str
    x: float
    y: float
    degraded: bool = False
    reason: str = ""


@dataclass
class PackingResult:
    """Result of packing one container."""
    container_id: str
    strategy: LayoutStrategy
    placements: List[PlacementOutcome] = field(default_factory=list)  # in placement order

    @property
    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {p.item_id: (p.x, p.y) for p in self.placements}

    @property
    def degraded(self) -> List[PlacementOutcome]:
        return [p for p in self.placements if p.degraded]

    @property
    def is_degraded(self) -> bool:
        return any(p.degraded for p in self.placements)

    def apply(self, items: List[Item]) -> List[Item]:
        """Return copies of ``items`` moved to their packed positions."""
        positions = self.positions
        return [item.moved_to(*positions[item.id]) if item.id in positions else item
                for item in items]


class OccupancyGrid:
    """Boolean occupancy grid over a container interior.

    Free-footprint queries use a summed-area table that is rebuilt lazily
    after cells are marked, so each candidate test is O(1).
    """

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self._cells: List[List[bool]] = [[False] * cols for _ in range(rows)]
        self._sums: Optional[List[List[int]]] = None

    def _build_sums(self) -> List[List[int]]:
        sums = [[0] * (self.cols + 1) for _ in range(self.rows + 1)]
        for r in range(self.rows):
            row_total = 0
            cells = self._cells[r]
            above = sums[r]
            current = sums[r + 1]
            for c in range(self.cols):
                row_total += cells[c]
                current[c + 1] = above[c + 1] + row_total
        return sums

    def is_free(self, row: int, col: int, height: int, width: int) -> bool:
        """Check that every cell of a footprint is unoccupied."""
        if row < 0 or col < 0 or row + height > self.rows or col + width > self.cols:
            return False
        if self._sums is None:
            self._sums = self._build_sums()
        s = self._sums
        r2, c2 = row + height, col + width
        occupied = s[r2][c2] - s[row][c2] - s[r2][col] + s[row][col]
        return occupied == 0

    def mark(self, row: int, col: int, height: int, width: int):
        """Mark a footprint occupied, clipped to the grid."""
        for r in range(max(0, row), min(self.rows, row + height)):
            cells = self._cells[r]
            for c in range(max(0, col), min(self.cols, col + width)):
                cells[c] = True
        self._sums = None

    def find_free(self, height: int, width: int,
                  start_row: int = 0, start_col: int = 0,
                  last_row: Optional[int] = None,
                  last_col: Optional[int] = None) -> Optional[Tuple[int, int]]:
        """First free (row, col) for a footprint, scanning row-major.

        ``last_row`` / ``last_col`` cap the top-left cells tried.
        """
        max_row = self.rows - height
        max_col = self.cols - width
        if last_row is not None:
            max_row = min(max_row, last_row)
        if last_col is not None:
            max_col = min(max_col, last_col)
        for r in range(start_row, max_row + 1):
            for c in range(start_col, max_col + 1):
                if self.is_free(r, c, height, width):
                    return (r, c)
        return None

    def lowest_occupied_row(self) -> Optional[int]:
        for r in range(self.rows - 1, -1, -1):
            if any(self._cells[r]):
                return r
        return None


class BasePacker:
    """Shared setup for the packing strategies."""

    strategy = LayoutStrategy.OCCUPANCY

    def __init__(self, container: Container,
                 config: Optional[LayoutConfig] = None,
                 tables: Optional[LayoutTables] = None):
        self.container = container
        self.config = config or LayoutConfig()
        self.tables = tables or get_tables()

    def _sizes(self, items: List[Item]) -> Dict[str, Tuple[float, float]]:
        return {item.id: item.resolve_size(self.tables) for item in items}

    def _result(self) -> PackingResult:
        return PackingResult(self.container.id, self.strategy)

    def pack(self, items: List[Item]) -> PackingResult:
        raise NotImplementedError


class OccupancyPacker(BasePacker):
    """Deterministic tallest-first packing on a virtual occupancy grid."""

    strategy = LayoutStrategy.OCCUPANCY

    def batch_padding(self, sizes: Dict[str, Tuple[float, float]]) -> float:
        """Largest adaptive padding between any two items of a batch (0 if fewer)."""
        if len(sizes) < 2:
            return 0.0

        # Padding grows with w + h of both items, so the two largest pair worst
        largest = sorted(sizes.values(), key=lambda s: s[0] + s[1], reverse=True)[:2]
        box1 = BoundingBox(0.0, 0.0, largest[0][0], largest[0][1])
        box2 = BoundingBox(0.0, 0.0, largest[1][0], largest[1][1])
        return calculate_adaptive_padding(box1, box2, self.config)

    def clearance_for(self, sizes: Dict[str, Tuple[float, float]]) -> float:
        """
        Footprint margin for a batch of items.

        Uses the configured spacing, raised to the batch padding so packed
        neighbors never collide under the adaptive padding rule.
        """
        return max(self.config.spacing, self.batch_padding(sizes))

    def footprint_cells(self, length: float, clearance: float, padding: float) -> int:
        """
        Cells spanned by one side of an item footprint.

        Covers ``length + clearance``, plus one more cell when that would
        leave neighbors exactly one padding apart, since touching padded
        boxes collide.
        """
        cell = self.config.grid_cell_size
        cells = int(math.ceil((length + clearance) / cell))
        if cells * cell <= length + padding:
            cells += 1
        return cells

    def pack(self, items: List[Item]) -> PackingResult:
        """
        Pack items into the container.

        Args:
            items: Items destined for this container, in arrival order

        Returns:
            PackingResult with one placement per item, tallest first
        """
        result = self._result()
        if not items:
            return result

        cell = self.config.grid_cell_size
        grid = OccupancyGrid(
            rows=int(math.ceil(self.container.height / cell)),
            cols=int(math.ceil(self.container.width / cell)),
        )
        sizes = self._sizes(items)
        padding = self.batch_padding(sizes)
        clearance = self.clearance_for(sizes)
        start_col = int(math.ceil(self.config.start_x / cell))
        start_row = int(math.ceil(self.config.start_y / cell))

        # Tallest first; sorted() is stable so ties keep arrival order
        ordered = sorted(items, key=lambda item: sizes[item.id][1], reverse=True)

        # Bottom row claimed so far, including footprints clipped by the grid
        lowest_row: Optional[int] = None

        for item in ordered:
            width, height = sizes[item.id]
            width_cells = self.footprint_cells(width, clearance, padding)
            height_cells = self.footprint_cells(height, clearance, padding)

            # The last cell can overhang the container; keep the item box inside
            last_row = int((self.container.height - height) // cell)
            last_col = int((self.container.width - width) // cell)
            spot = grid.find_free(height_cells, width_cells, start_row, start_col,
                                  last_row, last_col)
            if spot is not None:
                row, col = spot
                outcome = PlacementOutcome(item.id, col * cell, row * cell)
            else:
                row = start_row if lowest_row is None else max(start_row, lowest_row + 1)
                col = start_col
                outcome = PlacementOutcome(item.id, col * cell, row * cell,
                                           degraded=True, reason=REASON_NO_GRID_FIT)
                logger.warning(
                    "Could not fit %s in %s, placing below row %d",
                    item.id, self.container.id, row,
                )

            grid.mark(row, col, height_cells, width_cells)
            bottom = row + height_cells - 1
            lowest_row = bottom if lowest_row is None else max(lowest_row, bottom)
            result.placements.append(outcome)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Occupancy packing %s: items=%d clearance=%.1f grid=%dx%d degraded=%d",
                self.container.id, len(items), clearance,
                grid.cols, grid.rows, len(result.degraded),
            )
        return result


class GridPacker(BasePacker):
    """Uniform rows and columns sized from the average item."""

    strategy = LayoutStrategy.GRID

    def pack(self, items: List[Item]) -> PackingResult:
        result = self._result()
        if not items:
            return result

        spacing = self.config.spacing
        start_x, start_y = self.config.start_x, self.config.start_y
        sizes = self._sizes(items)
        avg_w = sum(w for w, _ in sizes.values()) / len(sizes)
        avg_h = sum(h for _, h in sizes.values()) / len(sizes)

        cols = int((self.container.width - start_x * 2) // (avg_w + spacing))
        cols = max(1, cols)

        for index, item in enumerate(items):
            row, col = divmod(index, cols)
            x = start_x + col * (avg_w + spacing)
            y = start_y + row * (avg_h + spacing)
            outcome = PlacementOutcome(item.id, x, y)
            if y + sizes[item.id][1] > self.container.height - start_y:
                outcome.degraded = True
                outcome.reason = REASON_EXCEEDS_HEIGHT
                logger.warning("Item %s exceeds height of %s", item.id, self.container.id)
            result.placements.append(outcome)

        return result


class FlowPacker(BasePacker):
    """Left-to-right rows that wrap at the usable container width."""

    strategy = LayoutStrategy.FLOW

    def pack(self, items: List[Item]) -> PackingResult:
        result = self._result()
        spacing = self.config.spacing
        start_x, start_y = self.config.start_x, self.config.start_y
        sizes = self._sizes(items)

        # Larger first for better packing
        ordered = sorted(items, key=lambda item: sizes[item.id][0] * sizes[item.id][1],
                         reverse=True)

        right_limit = self.container.width - start_x - self.config.flow_edge_margin
        bottom_limit = self.container.height - start_y
        current_x, current_y = start_x, start_y
        row_height = 0.0

        for item in ordered:
            width, height = sizes[item.id]
            if current_x + width > right_limit and current_x > start_x:
                current_y += row_height + spacing
                current_x = start_x
                row_height = 0.0

            outcome = PlacementOutcome(item.id, current_x, current_y)
            if current_y + height > bottom_limit:
                outcome.degraded = True
                outcome.reason = REASON_EXCEEDS_HEIGHT
                logger.warning("Item %s exceeds height of %s", item.id, self.container.id)
            result.placements.append(outcome)

            current_x += width + spacing
            row_height = max(row_height, height)

        return result


_PACKERS = {
    LayoutStrategy.OCCUPANCY: OccupancyPacker,
    LayoutStrategy.GRID: GridPacker,
    LayoutStrategy.FLOW: FlowPacker,
}


def get_packer(container: Container,
               strategy: Union[LayoutStrategy, str, None] = None,
               config: Optional[LayoutConfig] = None,
               tables: Optional[LayoutTables] = None) -> BasePacker:
    """Create the packer for a strategy (defaults to ``config.strategy``)."""
    config = config or LayoutConfig()
    if strategy is None:
        strategy = config.strategy
    if not isinstance(strategy, LayoutStrategy):
        strategy = LayoutStrategy(strategy)
    return _PACKERS[strategy](container, config, tables)


def pack_items(items: List[Item], container: Container,
               strategy: Union[LayoutStrategy, str, None] = None,
               config: Optional[LayoutConfig] = None,
               tables: Optional[LayoutTables] = None) -> PackingResult:
    """
    Convenience function to pack one container.

    Args:
        items: Items destined for the container
        container: Target container
        strategy: Packing strategy (defaults to ``config.strategy``)
        config: Layout configuration
        tables: Size tables

    Returns:
        PackingResult with positions in the container frame
    """
    return get_packer(container, strategy, config, tables).pack(items)
