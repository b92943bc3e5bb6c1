"""
Layout Validation

Audits a canvas after layout or interaction: items that left their
container, items pointing at unknown containers, and sibling pairs whose
padded boxes overlap.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..canvas.abstraction import Canvas
from ..patterns import LayoutTables, get_tables
from ..placement.collision import CollisionInfo, find_colliding_pairs
from ..placement.config import LayoutConfig


@dataclass
class BoundsIssue:
    """An issue found during bounds validation."""
    item_id: str
    container_id: Optional[str]
    message: str
    severity: str = "warning"  # "error", "warning"


def validate_container_bounds(canvas: Canvas,
                              tables: Optional[LayoutTables] = None) -> List[BoundsIssue]:
    """Check every contained item lies within its container."""
    tables = tables or get_tables()
    issues: List[BoundsIssue] = []

    for item in canvas.items.values():
        if item.container_id is None or item.id in canvas.containers:
            continue

        container = canvas.get_container(item.container_id)
        if container is None:
            issues.append(BoundsIssue(
                item.id, item.container_id,
                "Parent container not found", severity="error",
            ))
            continue

        if not container.contains_item(item, tables):
            issues.append(BoundsIssue(
                item.id, container.id, "Item outside container bounds",
            ))

    return issues


def find_overlaps(canvas: Canvas,
                  tables: Optional[LayoutTables] = None,
                  config: Optional[LayoutConfig] = None
                  ) -> List[Tuple[str, str, CollisionInfo]]:
    """List colliding sibling pairs (adaptive padding) across the canvas."""
    items = [item for item in canvas.items.values() if item.id not in canvas.containers]
    return find_colliding_pairs(items, tables, config)


def validate_canvas(canvas: Canvas,
                    tables: Optional[LayoutTables] = None,
                    config: Optional[LayoutConfig] = None
                    ) -> Tuple[bool, List[BoundsIssue], List[Tuple[str, str, CollisionInfo]]]:
    """
    Run all layout validations.

    Returns:
        (is_clean, bounds_issues, overlaps)
    """
    issues = validate_container_bounds(canvas, tables)
    overlaps = find_overlaps(canvas, tables, config)
    return (not issues and not overlaps, issues, overlaps)
