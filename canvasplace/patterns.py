"""
Item Size and Category Tables

Loads the static item-type tables (default sizes, categories and
container routing) from a configuration file, so sizing and distribution
policy can be edited without touching code. The loaded tables are exposed
as an immutable LayoutTables value that is passed into every layout stage.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SIZE = (200.0, 150.0)
DEFAULT_CATEGORY = "system"


def _frozen(mapping: Dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class LayoutTables:
    """Read-only lookup tables for sizing and category routing."""
    node_sizes: Mapping[str, Tuple[float, float]] = field(default_factory=lambda: _frozen({}))
    node_categories: Mapping[str, str] = field(default_factory=lambda: _frozen({}))  # type -> category
    container_categories: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: _frozen({}))
    default_size: Tuple[float, float] = DEFAULT_SIZE
    default_category: str = DEFAULT_CATEGORY

    def size_for(self, type_tag: str) -> Tuple[float, float]:
        """Default (width, height) for an item type."""
        return self.node_sizes.get(type_tag, self.default_size)

    def category_for(self, type_tag: str) -> str:
        """Category for an item type, falling back to the default category."""
        return self.node_categories.get(type_tag, self.default_category)

    def categories_for_container(self, container_id: str) -> Tuple[str, ...]:
        return self.container_categories.get(container_id, ())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'LayoutTables':
        """
        Build tables from a parsed configuration mapping.

        Args:
            data: Mapping with the sections of canvas_patterns.yaml.
                  ``node_categories`` is given as category -> [types].
        """
        default = data.get('default_size') or {}
        default_size = (
            float(default.get('width', DEFAULT_SIZE[0])),
            float(default.get('height', DEFAULT_SIZE[1])),
        )

        sizes: Dict[str, Tuple[float, float]] = {}
        for type_tag, size in (data.get('node_sizes') or {}).items():
            sizes[str(type_tag)] = (float(size['width']), float(size['height']))

        categories: Dict[str, str] = {}
        for category, type_tags in (data.get('node_categories') or {}).items():
            for type_tag in type_tags or []:
                # First listing wins, matching category lookup order
                categories.setdefault(str(type_tag), str(category))

        routing: Dict[str, Tuple[str, ...]] = {}
        for container_id, accepted in (data.get('container_categories') or {}).items():
            routing[str(container_id)] = tuple(str(c) for c in accepted or [])

        return cls(
            node_sizes=_frozen(sizes),
            node_categories=_frozen(categories),
            container_categories=_frozen(routing),
            default_size=default_size,
            default_category=str(data.get('default_category', DEFAULT_CATEGORY)),
        )


class CanvasPatterns:
    """
    Manager for the item sizing and category configuration file.

    Loads canvas_patterns.yaml by default, but allows users to provide
    custom configuration files.
    """

    REQUIRED_SECTIONS = [
        'default_size',
        'node_sizes',
        'node_categories',
        'container_categories',
        'default_category',
    ]

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Tables file to load; the packaged
                         canvas_patterns.yaml when None.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "canvas_patterns.yaml"

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._tables: Optional[LayoutTables] = None
        self._load_config()

    def _load_config(self):
        """Read the YAML file and rebuild the tables."""
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Canvas patterns file not found: {self.config_path}"
            )

        if self.config_path.is_symlink():
            raise ValueError(
                f"Refusing to load canvas patterns through a symlink: {self.config_path}"
            )

        with open(self.config_path, 'r') as f:
            self._config = yaml.safe_load(f) or {}

        missing = [s for s in self.REQUIRED_SECTIONS if s not in self._config]
        if missing:
            raise ValueError(
                f"{self.config_path} is missing required sections: {missing}"
            )

        self._tables = LayoutTables.from_mapping(self._config)
        logger.debug(
            "Loaded canvas patterns from %s: %d sizes, %d typed categories, %d containers",
            self.config_path,
            len(self._tables.node_sizes),
            len(self._tables.node_categories),
            len(self._tables.container_categories),
        )

    @property
    def tables(self) -> LayoutTables:
        return self._tables

    @property
    def category_names(self) -> List[str]:
        """Category names in declaration order."""
        return list(self._config.get('node_categories', {}).keys())

    def reload(self):
        """Re-read the tables file after it was edited."""
        self._load_config()


# Cached tables for the packaged file
_default_patterns: Optional[CanvasPatterns] = None


def get_patterns(config_path: Optional[str] = None) -> CanvasPatterns:
    """Patterns loaded from ``config_path``, or the cached packaged ones."""
    global _default_patterns

    if config_path is not None:
        return CanvasPatterns(config_path)

    if _default_patterns is None:
        _default_patterns = CanvasPatterns()

    return _default_patterns


def get_tables(config_path: Optional[str] = None) -> LayoutTables:
    """Shortcut for ``get_patterns(config_path).tables``."""
    return get_patterns(config_path).tables


def reload_patterns():
    """Re-read the packaged tables if they were loaded already."""
    global _default_patterns
    if _default_patterns is not None:
        _default_patterns.reload()
