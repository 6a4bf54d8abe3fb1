"""Watchdogs following page state through the event bus."""

from domactor.watchdogs.base import BaseWatchdog
from domactor.watchdogs.dom_watchdog import DOMWatchdog

__all__ = [
    "BaseWatchdog",
    "DOMWatchdog",
]
