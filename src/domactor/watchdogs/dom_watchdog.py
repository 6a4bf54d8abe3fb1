"""DOM watchdog tracking document replacements of a page."""

import logging
from datetime import datetime, timezone
from typing import ClassVar

from bubus import BaseEvent

from domactor.events import DocumentUpdatedEvent
from domactor.watchdogs.base import BaseWatchdog

logger = logging.getLogger(__name__)


class DOMWatchdog(BaseWatchdog):
    """Keeps count of the document generations a page went through.

    Node handles obtained before the latest generation are stale; callers can
    compare `document_generation` before and after an action to know whether
    they must query again.
    """

    LISTENS_TO: ClassVar[list[type[BaseEvent]]] = [DocumentUpdatedEvent]

    document_generation: int = 0
    last_updated_at: datetime | None = None

    async def on_DocumentUpdatedEvent(self, event: DocumentUpdatedEvent) -> None:
        self.document_generation = event.generation
        self.last_updated_at = datetime.now(timezone.utc)
        logger.debug(f'Document replaced, now at generation {event.generation}')
