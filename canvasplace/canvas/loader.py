"""
Canvas File Loader

Reads a canvas description (containers, items and optional layout
options) from YAML or JSON, and turns a laid-out canvas back into plain
data for output.

File Format (YAML; the JSON equivalent is accepted too):
```yaml
containers:
  - id: d-study
    position: {x: 0, y: 0}
    size: {width: 1000, height: 1000}
    accepted_categories: [productivity, time]
items:
  - id: a1
    type: agent
    position: {x: 0, y: 0}
    container: d-study        # optional
    size: {width: 240, height: 120}   # optional override
config:                       # optional LayoutConfig options
  spacing: 40
```
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple
import logging

import yaml

from .abstraction import Canvas, Container, Item

logger = logging.getLogger(__name__)


def _xy(data: Optional[Mapping[str, Any]], where: str) -> Tuple[float, float]:
    if data is None:
        return (0.0, 0.0)
    if not isinstance(data, Mapping):
        raise ValueError(f"{where}: position must be a mapping with x and y")
    return (float(data.get('x', 0.0)), float(data.get('y', 0.0)))


def item_from_dict(data: Mapping[str, Any]) -> Item:
    """Build an Item from its file representation."""
    if 'id' not in data:
        raise ValueError(f"Item is missing an id: {dict(data)}")
    item_id = str(data['id'])
    type_tag = data.get('type', data.get('type_tag'))
    if type_tag is None:
        raise ValueError(f"Item {item_id} is missing a type")

    x, y = _xy(data.get('position'), f"item {item_id}")
    size = data.get('size') or {}
    container = data.get('container', data.get('container_id'))
    return Item(
        id=item_id,
        type_tag=str(type_tag),
        x=x,
        y=y,
        width=size.get('width'),
        height=size.get('height'),
        container_id=str(container) if container is not None else None,
    )


def container_from_dict(data: Mapping[str, Any]) -> Container:
    """Build a Container from its file representation."""
    if 'id' not in data:
        raise ValueError(f"Container is missing an id: {dict(data)}")
    container_id = str(data['id'])
    x, y = _xy(data.get('position'), f"container {container_id}")
    size = data.get('size') or {}
    return Container(
        id=container_id,
        x=x,
        y=y,
        width=float(size.get('width', 1200.0)),
        height=float(size.get('height', 1000.0)),
        accepted_categories=tuple(data.get('accepted_categories') or ()),
        label=str(data.get('label', '')),
    )


def canvas_from_dict(data: Mapping[str, Any]) -> Canvas:
    """Build a Canvas from parsed file data."""
    containers = [container_from_dict(c) for c in data.get('containers') or []]
    items = [item_from_dict(i) for i in data.get('items') or []]
    return Canvas.from_lists(items, containers)


def load_canvas(path: Path) -> Tuple[Canvas, Dict[str, Any]]:
    """
    Load a canvas file.

    Args:
        path: Path to a YAML or JSON canvas description

    Returns:
        (canvas, layout options mapping from the ``config`` section)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Canvas file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Canvas file must contain a mapping: {path}")

    canvas = canvas_from_dict(data)
    logger.debug("Loaded canvas from %s: %r", path, canvas)
    return canvas, dict(data.get('config') or {})


def canvas_to_dict(canvas: Canvas) -> Dict[str, Any]:
    """Plain-data form of a canvas (positions in container frames)."""
    items = []
    for item in canvas.items.values():
        entry: Dict[str, Any] = {
            'id': item.id,
            'type': item.type_tag,
            'position': {'x': item.x, 'y': item.y},
            'container': item.container_id,
        }
        if item.width is not None or item.height is not None:
            entry['size'] = {'width': item.width, 'height': item.height}
        items.append(entry)

    containers = [
        {
            'id': c.id,
            'position': {'x': c.x, 'y': c.y},
            'size': {'width': c.width, 'height': c.height},
            'accepted_categories': list(c.accepted_categories),
        }
        for c in canvas.containers.values()
    ]
    return {'containers': containers, 'items': items}
