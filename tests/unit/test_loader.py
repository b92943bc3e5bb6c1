"""
Tests for reading and writing canvas files.
"""

import json

import pytest

from canvasplace.canvas.abstraction import Canvas, Container, Item
from canvasplace.canvas.loader import (
    canvas_from_dict,
    canvas_to_dict,
    container_from_dict,
    item_from_dict,
    load_canvas,
)


class TestItemFromDict:
    """Tests for item parsing."""

    def test_full_item(self):
        """Test every supported item key."""
        item = item_from_dict({
            "id": "a1",
            "type": "agent",
            "position": {"x": 10, "y": 20},
            "size": {"width": 240, "height": 90},
            "container": "d-study",
        })

        assert item == Item(id="a1", type_tag="agent", x=10.0, y=20.0,
                            width=240, height=90, container_id="d-study")

    def test_minimal_item(self):
        """Test position and size are optional."""
        item = item_from_dict({"id": 7, "type_tag": "note"})

        assert item.id == "7"
        assert (item.x, item.y) == (0.0, 0.0)
        assert item.width is None
        assert item.container_id is None

    def test_missing_id(self):
        """Test an item without id is rejected."""
        with pytest.raises(ValueError, match="missing an id"):
            item_from_dict({"type": "note"})

    def test_missing_type(self):
        """Test an item without type is rejected."""
        with pytest.raises(ValueError, match="missing a type"):
            item_from_dict({"id": "n1"})

    def test_bad_position(self):
        """Test a non-mapping position is rejected."""
        with pytest.raises(ValueError, match="position"):
            item_from_dict({"id": "n1", "type": "note", "position": [1, 2]})


class TestContainerFromDict:
    """Tests for container parsing."""

    def test_container_defaults(self):
        """Test default container size."""
        container = container_from_dict({"id": "d-study"})

        assert (container.width, container.height) == (1200.0, 1000.0)
        assert container.accepted_categories == ()

    def test_container_fields(self):
        """Test position, size and categories are read."""
        container = container_from_dict({
            "id": "d-lab",
            "position": {"x": 100, "y": 200},
            "size": {"width": 800, "height": 600},
            "accepted_categories": ["play", "time"],
            "label": "Lab",
        })

        assert container.get_bounding_box().right == 900.0
        assert container.accepted_categories == ("play", "time")
        assert container.label == "Lab"


class TestLoadCanvas:
    """Tests for whole-file loading."""

    def test_load_yaml(self, canvas_file):
        """Test loading the YAML fixture."""
        canvas, options = load_canvas(canvas_file)

        assert set(canvas.items) == {"n1", "n2", "a1"}
        assert set(canvas.containers) == {"d-study"}
        assert canvas.items["n1"].container_id == "d-study"
        assert options == {"spacing": 40}

    def test_load_json(self, tmp_path):
        """Test JSON canvas files are accepted."""
        path = tmp_path / "canvas.json"
        path.write_text(json.dumps({"items": [{"id": "n1", "type": "note"}]}))

        canvas, options = load_canvas(path)

        assert list(canvas.items) == ["n1"]
        assert options == {}

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_canvas(tmp_path / "missing.yaml")

    def test_non_mapping_file(self, tmp_path):
        """Test a file that is not a mapping is rejected."""
        path = tmp_path / "canvas.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_canvas(path)

    def test_to_dict_reloads(self):
        """Test plain-data output parses back to the same canvas."""
        canvas = Canvas.from_lists(
            [Item(id="n1", type_tag="note", x=5.0, y=6.0, container_id="d-study"),
             Item(id="a1", type_tag="agent", width=300.0, height=100.0)],
            [Container(id="d-study", x=10.0, accepted_categories=("productivity",))],
        )
        data = canvas_to_dict(canvas)

        assert "size" not in data["items"][0]
        assert canvas_from_dict(data) == canvas
