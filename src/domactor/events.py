"""Event definitions dispatched on a page's event bus."""

from bubus import BaseEvent

from domactor.config import _get_float


class DocumentUpdatedEvent(BaseEvent[None]):
    """The remote document was replaced and every handle has observed it.

    `generation` counts the replacements applied on the session so far.
    The handler timeout can be tuned with TIMEOUT_DocumentUpdatedEvent.
    """

    generation: int

    event_timeout: float | None = _get_float('TIMEOUT_DocumentUpdatedEvent', 10.0)
