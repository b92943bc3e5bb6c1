"""Layout validation."""

from .bounds import BoundsIssue, find_overlaps, validate_canvas, validate_container_bounds

__all__ = [
    "BoundsIssue",
    "find_overlaps",
    "validate_canvas",
    "validate_container_bounds",
]
