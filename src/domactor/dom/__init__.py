"""Handles for nodes of a remote document."""

from domactor.dom.document import Document
from domactor.dom.node import Node
from domactor.dom.views import BoundingBox, NodeAttributes, NodePosition, Point, Position

__all__ = [
    "BoundingBox",
    "Document",
    "Node",
    "NodeAttributes",
    "NodePosition",
    "Point",
    "Position",
]
