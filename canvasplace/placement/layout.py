"""Initial layout pass: distribute items to containers, then pack each one."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from ..canvas.abstraction import Canvas
from ..patterns import LayoutTables, get_tables
from .config import LayoutConfig
from .distributor import CategoryDistributor, DistributionResult
from .packer import LayoutStrategy, PackingResult, PlacementOutcome, get_packer

logger = logging.getLogger(__name__)


@dataclass
class LayoutReport:
    """Everything the initial layout pass decided."""
    distribution: DistributionResult = field(default_factory=DistributionResult)
    packing: Dict[str, PackingResult] = field(default_factory=dict)  # container id -> result

    @property
    def degraded(self) -> List[Tuple[str, PlacementOutcome]]:
        """(container id, placement) for every degraded placement."""
        return [(cid, p) for cid, result in self.packing.items() for p in result.degraded]

    @property
    def unassigned(self) -> List[str]:
        return list(self.distribution.unassigned)

    def summary(self) -> Dict:
        return {
            "assigned": len(self.distribution.assignments),
            "unassigned": len(self.distribution.unassigned),
            "containers_packed": len(self.packing),
            "placements": sum(len(r.placements) for r in self.packing.values()),
            "degraded": len(self.degraded),
        }


def populate_canvas(canvas: Canvas,
                    config: Optional[LayoutConfig] = None,
                    tables: Optional[LayoutTables] = None,
                    strategy: Union[LayoutStrategy, str, None] = None
                    ) -> Tuple[Canvas, LayoutReport]:
    """
    Run the one-time distribute-then-pack pass over a canvas.

    Args:
        canvas: Caller-held canvas; it is not modified
        config: Layout configuration
        tables: Size and category tables
        strategy: Packing strategy override (defaults to ``config.strategy``)

    Returns:
        (new canvas with container ids and positions, LayoutReport)
    """
    config = config or LayoutConfig()
    tables = tables or get_tables()
    report = LayoutReport()

    distributor = CategoryDistributor(tables)
    distributed, report.distribution = distributor.distribute_canvas(canvas)

    positions: Dict[str, Tuple[float, float]] = {}
    for container in distributed.containers.values():
        items = [item for item in distributed.items_in_container(container.id)
                 if item.id not in distributed.containers]
        if not items:
            continue
        packer = get_packer(container, strategy, config, tables)
        result = packer.pack(items)
        report.packing[container.id] = result
        positions.update(result.positions)

    logger.info("Layout pass: %s", report.summary())
    return distributed.with_positions(positions), report
