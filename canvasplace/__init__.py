"""
CanvasPlace - Spatial Layout for Infinite Canvases

Collision and layout engine for a freeform canvas: routes items to
containers by category, packs them without overlap on first layout, and
keeps them apart with magnetic repulsion while they are dragged.
"""

__version__ = "0.1.0"
__author__ = "CanvasPlace Team"

from .canvas.abstraction import BoundingBox, Canvas, Container, Item
from .patterns import LayoutTables, get_tables
from .placement.config import LayoutConfig

__all__ = [
    "BoundingBox",
    "Canvas",
    "Container",
    "Item",
    "LayoutTables",
    "get_tables",
    "LayoutConfig",
]
