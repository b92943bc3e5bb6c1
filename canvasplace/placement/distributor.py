"""
Category Distributor

Routes ungrouped items to containers through a static
type -> category -> container mapping, before packing runs.

Containers are visited in their declared order and, within each, their
accepted categories in priority order; every not-yet-assigned item of a
category goes to the first container that accepts it. Items that already
carry a container id are left alone. Items no container accepts stay
unassigned and are reported back to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..canvas.abstraction import Canvas, Container, Item
from ..patterns import LayoutTables, get_tables

logger = logging.getLogger(__name__)


@dataclass
class DistributionResult:
    """Container assignments made by one distribution pass."""
    assignments: Dict[str, str] = field(default_factory=dict)  # item id -> container id (new only)
    unassigned: List[str] = field(default_factory=list)  # item ids no container accepts
    categories: Dict[str, str] = field(default_factory=dict)  # item id -> category

    def items_for(self, container_id: str) -> List[str]:
        """Item ids newly assigned to ``container_id``, in assignment order."""
        return [item_id for item_id, cid in self.assignments.items() if cid == container_id]

    @property
    def by_container(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for item_id, container_id in self.assignments.items():
            grouped.setdefault(container_id, []).append(item_id)
        return grouped


class CategoryDistributor:
    """
    Assigns unassigned items to containers by category.

    The tables are injected once; the distributor holds no other state,
    so repeated runs over the same input give the same assignment.
    """

    def __init__(self, tables: Optional[LayoutTables] = None):
        self.tables = tables or get_tables()

    def accepted_categories(self, container: Container) -> Tuple[str, ...]:
        """Categories a container accepts, in priority order.

        The container's own list wins; otherwise the routing table entry
        for its id is used.
        """
        if container.accepted_categories:
            return tuple(container.accepted_categories)
        return self.tables.categories_for_container(container.id)

    def categorize(self, items: Iterable[Item]) -> Dict[str, List[Item]]:
        """Group items by category, preserving input order."""
        categorized: Dict[str, List[Item]] = {}
        for item in items:
            category = self.tables.category_for(item.type_tag)
            categorized.setdefault(category, []).append(item)
        return categorized

    def distribute(self, items: Iterable[Item],
                   containers: Iterable[Container]) -> DistributionResult:
        """
        Assign every unassigned item to at most one container.

        Args:
            items: All items, in a stable order
            containers: All containers, in declared order

        Returns:
            DistributionResult with new assignments and skipped item ids
        """
        items = list(items)
        containers = list(containers)
        container_ids = {c.id for c in containers}
        result = DistributionResult()

        pending = [item for item in items
                   if item.container_id is None and item.id not in container_ids]
        for item in pending:
            result.categories[item.id] = self.tables.category_for(item.type_tag)
        categorized = self.categorize(pending)
        assigned: Set[str] = set()

        for container in containers:
            for category in self.accepted_categories(container):
                for item in categorized.get(category, []):
                    if item.id in assigned:
                        continue
                    result.assignments[item.id] = container.id
                    assigned.add(item.id)

        result.unassigned = [item.id for item in pending if item.id not in assigned]

        if result.unassigned:
            logger.warning(
                "No container accepts %d item(s): %s",
                len(result.unassigned), ", ".join(result.unassigned),
            )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Distribution: pending=%d assigned=%d unassigned=%d",
                len(pending), len(result.assignments), len(result.unassigned),
            )
        return result

    def distribute_canvas(self, canvas: Canvas) -> Tuple[Canvas, DistributionResult]:
        """Distribute a canvas's items; returns a new canvas and the result."""
        result = self.distribute(canvas.items.values(), canvas.containers.values())
        return canvas.with_assignments(result.assignments), result


def distribute_by_category(items: Iterable[Item], containers: Iterable[Container],
                           tables: Optional[LayoutTables] = None) -> DistributionResult:
    """Convenience wrapper around CategoryDistributor.distribute."""
    return CategoryDistributor(tables).distribute(items, containers)
