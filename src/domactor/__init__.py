"""domactor - handles for the DOM of a remote browser page over CDP."""

__version__ = "0.1.0"

from domactor.actor import Keyboard, Mouse, Page
from domactor.config import CONFIG
from domactor.dom import Document, Node, NodeAttributes, NodePosition
from domactor.events import DocumentUpdatedEvent
from domactor.exceptions import (
    ClosedPageError,
    DomActorError,
    PositionUnavailableError,
    ProtocolError,
    StaleHandleError,
    TransportTimeoutError,
)
from domactor.session import CommandResponse, DomSession

__all__ = [
    "CONFIG",
    "ClosedPageError",
    "CommandResponse",
    "Document",
    "DocumentUpdatedEvent",
    "DomActorError",
    "DomSession",
    "Keyboard",
    "Mouse",
    "Node",
    "NodeAttributes",
    "NodePosition",
    "Page",
    "PositionUnavailableError",
    "ProtocolError",
    "StaleHandleError",
    "TransportTimeoutError",
]
