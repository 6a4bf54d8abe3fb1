"""Value types returned by node handles."""

from collections.abc import Iterator, Mapping, Sequence

from pydantic import BaseModel, ConfigDict
from typing_extensions import TypedDict


class Position(TypedDict):
    """2D position coordinates."""
    x: float
    y: float


class BoundingBox(TypedDict):
    """Node bounding box with position and dimensions."""
    x: float
    y: float
    width: float
    height: float


class NodeAttributes(Mapping[str, str]):
    """Immutable view of a node's attributes.

    Built from the flat ``[name1, value1, name2, value2, ...]`` list the
    browser returns. Lookups of missing names return None through `get()`.
    """

    __slots__ = ('_attributes',)

    def __init__(self, attributes: Mapping[str, str] | None = None):
        self._attributes: dict[str, str] = dict(attributes or {})

    @classmethod
    def from_flat_list(cls, flat: Sequence[str] | None) -> 'NodeAttributes':
        attributes: dict[str, str] = {}
        if flat:
            for i in range(0, len(flat) - 1, 2):
                attributes[flat[i]] = flat[i + 1]
        return cls(attributes)

    def __getitem__(self, name: str) -> str:
        return self._attributes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f'NodeAttributes({self._attributes!r})'

    def to_dict(self) -> dict[str, str]:
        return dict(self._attributes)


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class NodePosition(BaseModel):
    """Content-box quadrilateral of a node, as four corner points.

    The browser reports the quad clockwise from the top-left corner; for
    transformed nodes it need not be axis-aligned, so derived extents use the
    min/max over all four points.
    """

    model_config = ConfigDict(frozen=True)

    points: tuple[Point, Point, Point, Point]

    @classmethod
    def from_quad(cls, quad: Sequence[float] | None) -> 'NodePosition | None':
        """Build a position from the flat ``[x1, y1, ..., x4, y4]`` list.

        Returns:
            The position, or None when the quad is missing or incomplete
        """
        if not quad or len(quad) < 8:
            return None
        points = tuple(Point(x=quad[i], y=quad[i + 1]) for i in range(0, 8, 2))
        return cls(points=points)

    @property
    def x(self) -> float:
        return min(p.x for p in self.points)

    @property
    def y(self) -> float:
        return min(p.y for p in self.points)

    @property
    def width(self) -> float:
        return max(p.x for p in self.points) - self.x

    @property
    def height(self) -> float:
        return max(p.y for p in self.points) - self.y

    @property
    def center(self) -> Position:
        return Position(
            x=sum(p.x for p in self.points) / 4,
            y=sum(p.y for p in self.points) / 4,
        )

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox(x=self.x, y=self.y, width=self.width, height=self.height)
