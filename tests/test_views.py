"""Tests for the value types returned by node handles."""

import pytest
from pydantic import ValidationError

from domactor.dom.views import NodeAttributes, NodePosition, Point


class TestNodeAttributes:
    """Tests for NodeAttributes."""

    def test_from_flat_list(self):
        attributes = NodeAttributes.from_flat_list(["id", "a", "hidden", ""])

        assert dict(attributes) == {"id": "a", "hidden": ""}
        assert len(attributes) == 2
        assert "hidden" in attributes
        assert attributes.get("missing") is None

    def test_from_flat_list_ignores_trailing_name(self):
        """Test an odd-length list drops the unpaired trailing entry."""
        assert NodeAttributes.from_flat_list(["id", "a", "dangling"]).to_dict() == {"id": "a"}

    def test_empty(self):
        assert NodeAttributes.from_flat_list(None).to_dict() == {}
        assert repr(NodeAttributes()) == "NodeAttributes({})"


class TestNodePosition:
    """Tests for NodePosition."""

    def test_from_quad(self):
        position = NodePosition.from_quad([1, 2, 3, 4, 5, 6, 7, 8])

        assert position is not None
        assert position.points == (
            Point(x=1, y=2),
            Point(x=3, y=4),
            Point(x=5, y=6),
            Point(x=7, y=8),
        )

    def test_incomplete_quad(self):
        assert NodePosition.from_quad([0, 0, 10, 0]) is None
        assert NodePosition.from_quad([]) is None
        assert NodePosition.from_quad(None) is None

    def test_axis_aligned_extents(self):
        position = NodePosition.from_quad([0, 0, 10, 0, 10, 10, 0, 10])

        assert position.center == {"x": 5, "y": 5}
        assert position.bounding_box == {"x": 0, "y": 0, "width": 10, "height": 10}

    def test_rotated_quad(self):
        """Test extents of a non axis-aligned quad use min and max over all points."""
        position = NodePosition.from_quad([5, 0, 10, 5, 5, 10, 0, 5])

        assert position.center == {"x": 5, "y": 5}
        assert (position.x, position.y, position.width, position.height) == (0, 0, 10, 10)

    def test_frozen(self):
        position = NodePosition.from_quad([0, 0, 10, 0, 10, 10, 0, 10])

        with pytest.raises(ValidationError):
            position.points = ()
