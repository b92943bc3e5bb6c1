"""
Shared test fixtures for CanvasPlace tests.

Provides reusable tables, config, item, container and canvas fixtures
for testing collision, packing, distribution and drag interaction.
"""

import pytest
from pathlib import Path
from typing import List

from canvasplace.canvas.abstraction import Canvas, Container, Item
from canvasplace.patterns import LayoutTables, get_tables
from canvasplace.placement.config import LayoutConfig


@pytest.fixture
def tables() -> LayoutTables:
    """The packaged size and category tables."""
    return get_tables()


@pytest.fixture
def default_config() -> LayoutConfig:
    """Default layout configuration."""
    return LayoutConfig()


@pytest.fixture
def study_container() -> Container:
    """An empty 1000x1000 container routed by the default tables."""
    return Container(id="d-study", x=0.0, y=0.0, width=1000.0, height=1000.0)


@pytest.fixture
def note_items() -> List[Item]:
    """Six same-size notes, all at the origin of the study container."""
    return [Item(id=f"n{i}", type_tag="note", container_id="d-study") for i in range(6)]


@pytest.fixture
def district_containers() -> List[Container]:
    """The five default districts in their declared order."""
    return [
        Container(id="d-study", x=0.0, y=0.0),
        Container(id="d-studio", x=1400.0, y=0.0),
        Container(id="d-strategy", x=2800.0, y=0.0),
        Container(id="d-garden", x=0.0, y=1200.0),
        Container(id="d-toyroom", x=1400.0, y=1200.0),
    ]


@pytest.fixture
def mixed_items() -> List[Item]:
    """Ungrouped items spanning every category."""
    return [
        Item(id="note1", type_tag="note"),
        Item(id="timer", type_tag="pomodoro"),
        Item(id="sticker1", type_tag="sticker"),
        Item(id="friend", type_tag="contact"),
        Item(id="board", type_tag="chess"),
        Item(id="mystery", type_tag="hologram"),
    ]


@pytest.fixture
def overlapping_canvas() -> Canvas:
    """Two notes stacked on top of each other in one container."""
    container = Container(id="d-study", width=1000.0, height=1000.0)
    items = [
        Item(id="a", type_tag="note", x=100.0, y=100.0, container_id="d-study"),
        Item(id="b", type_tag="note", x=100.0, y=100.0, container_id="d-study"),
    ]
    return Canvas.from_lists(items, [container])


@pytest.fixture
def canvas_file(tmp_path) -> Path:
    """A small canvas YAML file with two stacked notes and one ungrouped agent."""
    path = tmp_path / "canvas.yaml"
    path.write_text(
        """\
containers:
  - id: d-study
    position: {x: 0, y: 0}
    size: {width: 1000, height: 1000}
items:
  - id: n1
    type: note
    position: {x: 100, y: 100}
    container: d-study
  - id: n2
    type: note
    position: {x: 100, y: 100}
    container: d-study
  - id: a1
    type: agent
config:
  spacing: 40
"""
    )
    return path
