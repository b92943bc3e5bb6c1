"""
Canvas Abstraction Layer

Provides the plain data types the layout engine works on: freeform items,
the bounded containers they are grouped into, and the caller-held canvas
collection that owns both. Geometry helpers live next to the data so that
every placement stage derives sizes the same way.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING
import math

if TYPE_CHECKING:
    from ..patterns import LayoutTables


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle derived from an item (never stored)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def radius(self) -> float:
        """Half the diagonal, used as a generous personal-space radius."""
        return math.sqrt(self.width * self.width + self.height * self.height) / 2

    def expanded(self, margin: float) -> 'BoundingBox':
        """Return a copy grown outward by ``margin`` on every side."""
        return BoundingBox(
            self.x - margin,
            self.y - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )

    def contains(self, other: 'BoundingBox') -> bool:
        """Check if ``other`` lies fully inside this box (edges inclusive)."""
        return (other.x >= self.x and other.y >= self.y and
                other.right <= self.right and other.bottom <= self.bottom)


def _resolve_tables(tables: Optional['LayoutTables']) -> 'LayoutTables':
    if tables is not None:
        return tables
    from ..patterns import get_tables
    return get_tables()


@dataclass
class Item:
    """A freeform visual item on the canvas (note, widget, card...)."""
    id: str
    type_tag: str
    x: float = 0.0  # top-left, in the container frame when container_id is set
    y: float = 0.0

    # Explicit size override; falls back to the type size table
    width: Optional[float] = None
    height: Optional[float] = None

    container_id: Optional[str] = None

    def resolve_size(self, tables: Optional['LayoutTables'] = None) -> Tuple[float, float]:
        """
        Resolve width/height in priority order.

        1. Explicit numeric override on the item
        2. The type -> size table
        3. The table's hard-coded default size
        """
        default_w, default_h = _resolve_tables(tables).size_for(self.type_tag)
        width = self.width if _is_usable_dimension(self.width) else default_w
        height = self.height if _is_usable_dimension(self.height) else default_h
        return float(width), float(height)

    def get_bounding_box(self, tables: Optional['LayoutTables'] = None) -> BoundingBox:
        """Get the axis-aligned bounding box at the item's current position."""
        width, height = self.resolve_size(tables)
        return BoundingBox(self.x, self.y, width, height)

    def bounding_box_at(self, x: float, y: float,
                        tables: Optional['LayoutTables'] = None) -> BoundingBox:
        """Get the bounding box the item would have if moved to (x, y)."""
        width, height = self.resolve_size(tables)
        return BoundingBox(x, y, width, height)

    def radius(self, tables: Optional['LayoutTables'] = None) -> float:
        return self.get_bounding_box(tables).radius

    def moved_to(self, x: float, y: float) -> 'Item':
        """Return a copy of this item at a new position."""
        return replace(self, x=x, y=y)

    def distance_to(self, other: 'Item', tables: Optional['LayoutTables'] = None) -> float:
        """Calculate center-to-center distance to another item."""
        b1 = self.get_bounding_box(tables)
        b2 = other.get_bounding_box(tables)
        dx = b1.center_x - b2.center_x
        dy = b1.center_y - b2.center_y
        return math.sqrt(dx * dx + dy * dy)


def _is_usable_dimension(value: Optional[float]) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


@dataclass
class Container:
    """A bounded, immovable region that groups items (a district)."""
    id: str
    x: float = 0.0
    y: float = 0.0
    width: float = 1200.0
    height: float = 1000.0
    accepted_categories: Tuple[str, ...] = ()
    label: str = ""

    # Containers never move; kept as a field so serialized canvases round-trip
    movable: bool = False

    def __post_init__(self):
        self.accepted_categories = tuple(self.accepted_categories)

    def get_bounding_box(self) -> BoundingBox:
        """Bounding box in canvas coordinates."""
        return BoundingBox(self.x, self.y, self.width, self.height)

    def available_area(self, margin: float = 40.0) -> BoundingBox:
        """Interior area in the container's own frame, inset by ``margin``."""
        width = max(0.0, self.width - 2 * margin)
        height = max(0.0, self.height - 2 * margin)
        return BoundingBox(margin, margin, width, height)

    def contains_item(self, item: Item, tables: Optional['LayoutTables'] = None) -> bool:
        """Check if an item in this container lies fully inside it."""
        if item.container_id != self.id:
            return False
        interior = BoundingBox(0.0, 0.0, self.width, self.height)
        return interior.contains(item.get_bounding_box(tables))

    def to_canvas(self, x: float, y: float) -> Tuple[float, float]:
        """Convert a point from the container frame to canvas coordinates."""
        return (self.x + x, self.y + y)


@dataclass
class Canvas:
    """Caller-held collection of items and containers."""
    items: Dict[str, Item] = field(default_factory=dict)
    containers: Dict[str, Container] = field(default_factory=dict)

    @classmethod
    def from_lists(cls, items: Iterable[Item],
                   containers: Iterable[Container] = ()) -> 'Canvas':
        canvas = cls()
        for container in containers:
            canvas.add_container(container)
        for item in items:
            canvas.add_item(item)
        return canvas

    def add_item(self, item: Item):
        self.items[item.id] = item

    def add_container(self, container: Container):
        self.containers[container.id] = container

    def get_item(self, item_id: str) -> Optional[Item]:
        return self.items.get(item_id)

    def get_container(self, container_id: str) -> Optional[Container]:
        return self.containers.get(container_id)

    def items_in_container(self, container_id: Optional[str]) -> List[Item]:
        """Items grouped under ``container_id`` (None is the root group)."""
        return [item for item in self.items.values()
                if item.container_id == container_id]

    def get_siblings(self, item: Item) -> List[Item]:
        """Items sharing the item's container, excluding the item itself.

        Entries whose id is also a container id are never treated as
        siblings, so containers cannot act as movers or obstacles.
        """
        return [other for other in self.items.values()
                if other.id != item.id
                and other.id not in self.containers
                and other.container_id == item.container_id]

    def move_item(self, item_id: str, x: float, y: float):
        """Move an item in place."""
        item = self.items[item_id]
        item.x = x
        item.y = y

    def with_positions(self, positions: Dict[str, Tuple[float, float]]) -> 'Canvas':
        """Return a new canvas with the given item positions replaced."""
        items = {}
        for item_id, item in self.items.items():
            if item_id in positions:
                x, y = positions[item_id]
                items[item_id] = item.moved_to(x, y)
            else:
                items[item_id] = replace(item)
        return Canvas(items=items, containers=dict(self.containers))

    def with_assignments(self, assignments: Dict[str, str]) -> 'Canvas':
        """Return a new canvas with container ids assigned to items."""
        items = {}
        for item_id, item in self.items.items():
            if item_id in assignments:
                items[item_id] = replace(item, container_id=assignments[item_id])
            else:
                items[item_id] = replace(item)
        return Canvas(items=items, containers=dict(self.containers))

    def get_stats(self) -> Dict:
        """Summary counts for reports."""
        per_container = {cid: len(self.items_in_container(cid))
                         for cid in self.containers}
        return {
            "items": len(self.items),
            "containers": len(self.containers),
            "unassigned": len(self.items_in_container(None)),
            "per_container": per_container,
        }

    def __repr__(self) -> str:
        return f"Canvas(items={len(self.items)}, containers={len(self.containers)})"
