"""Base watchdog class for components that follow page state."""

import logging
from typing import Any, ClassVar

from bubus import BaseEvent, EventBus
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class BaseWatchdog(BaseModel):
    """Base class for page watchdogs.

    A watchdog declares the events it follows in `LISTENS_TO` and handles
    each of them in a method named `on_<EventClassName>`; `attach()` wires
    those methods to the page's event bus.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra='forbid',
        revalidate_instances='never',
    )

    LISTENS_TO: ClassVar[list[type[BaseEvent[Any]]]] = []

    event_bus: EventBus

    def attach(self) -> None:
        """Register one handler per event class in LISTENS_TO.

        Raises:
            TypeError: If a listed event has no `on_<EventClassName>` handler
        """
        for event_class in self.LISTENS_TO:
            handler_name = f'on_{event_class.__name__}'
            handler = getattr(self, handler_name, None)
            if handler is None:
                raise TypeError(f'{type(self).__name__} listens to {event_class.__name__} but has no {handler_name}()')
            self.event_bus.on(event_class, handler)
            logger.debug(f'{type(self).__name__} attached {handler_name}')
