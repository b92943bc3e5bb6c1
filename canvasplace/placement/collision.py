"""
Collision Detection

Adaptive padding and AABB collision tests between canvas items. Items are
only ever tested against siblings that share their container; items in
different containers (or one in a container and one at the root) never
collide, whatever their coordinates.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..canvas.abstraction import BoundingBox, Item
from ..patterns import LayoutTables, get_tables
from .config import LayoutConfig

_DEFAULT_CONFIG = LayoutConfig()


@dataclass(frozen=True)
class CollisionInfo:
    """Result of a pairwise collision test."""
    colliding: bool
    overlap_x: float = 0.0
    overlap_y: float = 0.0
    distance: float = math.inf  # center-to-center, always populated for siblings


def calculate_adaptive_padding(box1: BoundingBox, box2: BoundingBox,
                               config: Optional[LayoutConfig] = None) -> float:
    """
    Clearance required between two boxes.

    Larger items get proportionally more breathing room:
    ``clamp(base + ratio * avg_size, min_padding, max_padding)`` where
    avg_size is the mean of both widths and heights.
    """
    config = config or _DEFAULT_CONFIG
    avg_size = (box1.width + box1.height + box2.width + box2.height) / 4
    padding = config.padding_base + config.padding_ratio * avg_size
    return max(config.min_padding, min(config.max_padding, padding))


def check_box_collision(box1: BoundingBox, box2: BoundingBox,
                        padding: float) -> CollisionInfo:
    """
    AABB collision test between two boxes grown by ``padding / 2`` each.

    Edges are inclusive: padded boxes that only touch collide, with a
    zero overlap on the touching axis.
    """
    dx = box1.center_x - box2.center_x
    dy = box1.center_y - box2.center_y
    distance = math.sqrt(dx * dx + dy * dy)

    half = padding / 2
    e1 = box1.expanded(half)
    e2 = box2.expanded(half)

    colliding = (e1.right >= e2.x and e2.right >= e1.x and
                 e1.bottom >= e2.y and e2.bottom >= e1.y)
    if not colliding:
        return CollisionInfo(False, 0.0, 0.0, distance)

    # Minimum penetration along each axis
    overlap_x = min(e1.right - e2.x, e2.right - e1.x)
    overlap_y = min(e1.bottom - e2.y, e2.bottom - e1.y)
    return CollisionInfo(True, overlap_x, overlap_y, distance)


def check_collision(item1: Item, item2: Item,
                    padding: Optional[float] = None,
                    tables: Optional[LayoutTables] = None,
                    config: Optional[LayoutConfig] = None) -> CollisionInfo:
    """
    Check if two items collide.

    Args:
        item1, item2: Items to test
        padding: Explicit clearance; computed adaptively when None
        tables: Size tables (defaults to the packaged tables)
        config: Padding parameters

    Returns:
        CollisionInfo; items in different containers are never colliding
        and report an infinite distance.
    """
    if item1.container_id != item2.container_id:
        return CollisionInfo(False, 0.0, 0.0, math.inf)

    tables = tables or get_tables()
    box1 = item1.get_bounding_box(tables)
    box2 = item2.get_bounding_box(tables)
    if padding is None:
        padding = calculate_adaptive_padding(box1, box2, config)
    return check_box_collision(box1, box2, padding)


def max_sibling_padding(box: BoundingBox, sibling_boxes: Iterable[BoundingBox],
                        config: Optional[LayoutConfig] = None) -> float:
    """Largest adaptive padding between ``box`` and any sibling (0 if none)."""
    padding = 0.0
    for other in sibling_boxes:
        padding = max(padding, calculate_adaptive_padding(box, other, config))
    return padding


def collides_with_any(box: BoundingBox, sibling_boxes: Iterable[BoundingBox],
                      padding: float) -> bool:
    """Check a candidate box against a set of sibling boxes."""
    for other in sibling_boxes:
        if check_box_collision(box, other, padding).colliding:
            return True
    return False


def find_colliding_pairs(items: List[Item],
                         tables: Optional[LayoutTables] = None,
                         config: Optional[LayoutConfig] = None
                         ) -> List[Tuple[str, str, CollisionInfo]]:
    """
    Find all colliding sibling pairs among ``items``.

    Pairs are reported once, ordered by input position.
    """
    tables = tables or get_tables()
    pairs = []
    for i, item1 in enumerate(items):
        for item2 in items[i + 1:]:
            if item1.container_id != item2.container_id:
                continue
            info = check_collision(item1, item2, tables=tables, config=config)
            if info.colliding:
                pairs.append((item1.id, item2.id, info))
    return pairs
