"""Actor module for page-level input and lifecycle."""

from domactor.actor.keyboard import Keyboard
from domactor.actor.mouse import Mouse
from domactor.actor.page import Page

__all__ = [
    "Keyboard",
    "Mouse",
    "Page",
]
