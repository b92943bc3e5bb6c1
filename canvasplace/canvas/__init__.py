"""Canvas data model and file loading."""

from .abstraction import BoundingBox, Canvas, Container, Item
from .loader import canvas_from_dict, canvas_to_dict, load_canvas

__all__ = [
    "BoundingBox",
    "Canvas",
    "Container",
    "Item",
    "canvas_from_dict",
    "canvas_to_dict",
    "load_canvas",
]
