"""
Tests for the canvas data model.

Tests cover:
- Bounding box derivation and geometry helpers
- Size resolution priority (explicit override, type table, default)
- Container frames and containment
- Canvas sibling queries and copy-on-write updates
"""

import math

import pytest

from canvasplace.canvas.abstraction import BoundingBox, Canvas, Container, Item


# =============================================================================
# Bounding Box Tests
# =============================================================================

class TestBoundingBox:
    """Tests for BoundingBox geometry."""

    def test_derived_edges_and_center(self):
        """Test right, bottom and center are derived from x, y, size."""
        box = BoundingBox(10.0, 20.0, 200.0, 100.0)

        assert box.right == 210.0
        assert box.bottom == 120.0
        assert box.center_x == 110.0
        assert box.center_y == 70.0

    def test_radius_is_half_diagonal(self):
        """Test radius equals half the diagonal."""
        box = BoundingBox(0.0, 0.0, 300.0, 400.0)
        assert box.radius == pytest.approx(250.0)

    def test_expanded_grows_every_side(self):
        """Test expanded box grows by the margin on each side."""
        box = BoundingBox(0.0, 0.0, 100.0, 50.0).expanded(10.0)

        assert (box.x, box.y) == (-10.0, -10.0)
        assert (box.width, box.height) == (120.0, 70.0)

    def test_contains_is_edge_inclusive(self):
        """Test a box touching the edges is contained."""
        outer = BoundingBox(0.0, 0.0, 100.0, 100.0)

        assert outer.contains(BoundingBox(0.0, 0.0, 100.0, 100.0))
        assert not outer.contains(BoundingBox(50.0, 50.0, 60.0, 10.0))


# =============================================================================
# Item Size Resolution Tests
# =============================================================================

class TestItemSize:
    """Tests for item size resolution."""

    def test_type_table_size(self, tables):
        """Test an item without override takes its type's size."""
        item = Item(id="a1", type_tag="agent")
        assert item.resolve_size(tables) == (200.0, 120.0)

    def test_unknown_type_uses_default(self, tables):
        """Test an unknown type falls back to the default size."""
        item = Item(id="x", type_tag="hologram")
        assert item.resolve_size(tables) == (200.0, 150.0)

    def test_explicit_override_wins(self, tables):
        """Test explicit width/height override the table."""
        item = Item(id="a1", type_tag="agent", width=240.0, height=90.0)
        assert item.resolve_size(tables) == (240.0, 90.0)

    def test_partial_override(self, tables):
        """Test each dimension falls back independently."""
        item = Item(id="a1", type_tag="agent", width=300.0)
        assert item.resolve_size(tables) == (300.0, 120.0)

    @pytest.mark.parametrize("bad", [0, -5.0, float("nan"), float("inf"), "wide", True])
    def test_unusable_override_ignored(self, tables, bad):
        """Test non-positive or non-numeric overrides fall back to the table."""
        item = Item(id="a1", type_tag="agent", width=bad, height=bad)
        assert item.resolve_size(tables) == (200.0, 120.0)

    def test_bounding_box_at_position(self, tables):
        """Test bounding box follows the item position."""
        item = Item(id="n", type_tag="note", x=30.0, y=40.0)
        box = item.get_bounding_box(tables)

        assert box == BoundingBox(30.0, 40.0, 200.0, 150.0)
        assert item.bounding_box_at(0.0, 0.0, tables) == BoundingBox(0.0, 0.0, 200.0, 150.0)

    def test_distance_between_centers(self, tables):
        """Test center-to-center distance."""
        a = Item(id="a", type_tag="note", x=0.0, y=0.0)
        b = Item(id="b", type_tag="note", x=30.0, y=40.0)
        assert a.distance_to(b, tables) == pytest.approx(50.0)

    def test_moved_to_returns_copy(self):
        """Test moved_to leaves the source item unchanged."""
        item = Item(id="n", type_tag="note", x=1.0, y=2.0, container_id="d-study")
        moved = item.moved_to(10.0, 20.0)

        assert (item.x, item.y) == (1.0, 2.0)
        assert (moved.x, moved.y) == (10.0, 20.0)
        assert moved.container_id == "d-study"


# =============================================================================
# Container Tests
# =============================================================================

class TestContainer:
    """Tests for container geometry."""

    def test_available_area_is_inset(self):
        """Test the available area is inset by the margin in the container frame."""
        container = Container(id="d", x=500.0, y=500.0, width=1000.0, height=800.0)
        area = container.available_area(40.0)

        assert area == BoundingBox(40.0, 40.0, 920.0, 720.0)

    def test_available_area_never_negative(self):
        """Test a tiny container yields an empty area."""
        area = Container(id="d", width=50.0, height=50.0).available_area(40.0)
        assert area.width == 0.0
        assert area.height == 0.0

    def test_contains_item_in_own_frame(self, tables):
        """Test containment uses container-frame coordinates."""
        container = Container(id="d", x=5000.0, y=5000.0, width=400.0, height=400.0)
        inside = Item(id="i", type_tag="note", x=10.0, y=10.0, container_id="d")
        outside = Item(id="o", type_tag="note", x=300.0, y=10.0, container_id="d")

        assert container.contains_item(inside, tables)
        assert not container.contains_item(outside, tables)

    def test_contains_item_requires_membership(self, tables):
        """Test items of another container are never contained."""
        container = Container(id="d", width=400.0, height=400.0)
        item = Item(id="i", type_tag="note", x=10.0, y=10.0, container_id="other")
        assert not container.contains_item(item, tables)

    def test_to_canvas(self):
        """Test conversion from container frame to canvas coordinates."""
        container = Container(id="d", x=100.0, y=200.0)
        assert container.to_canvas(50.0, 60.0) == (150.0, 260.0)

    def test_accepted_categories_normalized_to_tuple(self):
        """Test accepted categories are stored as a tuple."""
        container = Container(id="d", accepted_categories=["play", "time"])
        assert container.accepted_categories == ("play", "time")


# =============================================================================
# Canvas Tests
# =============================================================================

class TestCanvas:
    """Tests for the canvas collection."""

    def test_siblings_share_container(self):
        """Test siblings exclude the item itself and other containers' items."""
        items = [
            Item(id="a", type_tag="note", container_id="d1"),
            Item(id="b", type_tag="note", container_id="d1"),
            Item(id="c", type_tag="note", container_id="d2"),
            Item(id="root", type_tag="note"),
        ]
        canvas = Canvas.from_lists(items, [Container(id="d1"), Container(id="d2")])

        siblings = canvas.get_siblings(canvas.get_item("a"))
        assert [s.id for s in siblings] == ["b"]

    def test_container_ids_never_siblings(self):
        """Test an item sharing a container's id is excluded from siblings."""
        items = [
            Item(id="a", type_tag="note"),
            Item(id="d1", type_tag="note"),
        ]
        canvas = Canvas.from_lists(items, [Container(id="d1")])
        assert canvas.get_siblings(canvas.get_item("a")) == []

    def test_with_positions_copies(self):
        """Test with_positions returns a new canvas and keeps the old one."""
        canvas = Canvas.from_lists([Item(id="a", type_tag="note", x=0.0, y=0.0)])
        moved = canvas.with_positions({"a": (10.0, 20.0)})

        assert (canvas.items["a"].x, canvas.items["a"].y) == (0.0, 0.0)
        assert (moved.items["a"].x, moved.items["a"].y) == (10.0, 20.0)
        assert moved.items["a"] is not canvas.items["a"]

    def test_with_assignments(self):
        """Test container assignment on a copy."""
        canvas = Canvas.from_lists([Item(id="a", type_tag="note")], [Container(id="d1")])
        assigned = canvas.with_assignments({"a": "d1"})

        assert canvas.items["a"].container_id is None
        assert assigned.items["a"].container_id == "d1"

    def test_move_item_in_place(self):
        """Test move_item updates the stored item."""
        canvas = Canvas.from_lists([Item(id="a", type_tag="note")])
        canvas.move_item("a", 5.0, 6.0)
        assert (canvas.items["a"].x, canvas.items["a"].y) == (5.0, 6.0)

    def test_stats(self):
        """Test stats count items per container."""
        items = [
            Item(id="a", type_tag="note", container_id="d1"),
            Item(id="b", type_tag="note"),
        ]
        canvas = Canvas.from_lists(items, [Container(id="d1")])
        stats = canvas.get_stats()

        assert stats["items"] == 2
        assert stats["containers"] == 1
        assert stats["unassigned"] == 1
        assert stats["per_container"] == {"d1": 1}
        assert repr(canvas) == "Canvas(items=2, containers=1)"

    def test_radius_uses_resolved_size(self, tables):
        """Test item radius comes from the resolved size."""
        item = Item(id="a", type_tag="note", width=30.0, height=40.0)
        assert item.radius(tables) == pytest.approx(25.0)
        assert math.isclose(item.radius(tables), item.get_bounding_box(tables).radius)
