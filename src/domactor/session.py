"""Command session bound to one CDP target.

DomSession is the dispatch contract DOM handles talk through:

    - `send()` issues one typed command over the shared cdp-use client and
      suspends the caller until the correlated response or the timeout.
    - `DOM.documentUpdated` notifications are only buffered when they arrive;
      `process_pending_events()` applies them to the subscribed observers.
    - Observers are held weakly, so a handle nobody references any more is
      dropped from the registry without an explicit unsubscribe.

Example:
    >>> session = DomSession(cdp_client=client, session_id=session_id)
    >>> session.attach()
    >>> response = await session.send(GetDocument())
    >>> response.result['root']['nodeId']
"""

import asyncio
import logging
import weakref
from collections import deque
from typing import Any, Protocol

from bubus import EventBus
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from domactor.commands import Command
from domactor.config import CONFIG
from domactor.events import DocumentUpdatedEvent
from domactor.exceptions import TransportTimeoutError

logger = logging.getLogger(__name__)


class DocumentObserver(Protocol):
    async def on_document_updated(self, generation: int) -> None: ...


class CommandResponse(BaseModel):
    """Outcome of one command: a result payload or the browser's error message."""

    method: str
    result: dict[str, Any] | None = None
    error: str | None = None

    @property
    def is_successful(self) -> bool:
        return self.error is None


def _error_message(error: Exception) -> str:
    """Extract the browser's error text from a cdp-use error."""
    if error.args and isinstance(error.args[0], dict):
        payload = error.args[0]
        return str(payload.get('message', payload))
    return str(error)


class DomSession(BaseModel):
    """Dispatch contract and notification buffer for one CDP target.

    Attributes:
        cdp_client: Shared cdp-use client (root WebSocket connection).
        session_id: CDP session id of the attached target, or None for a
            client connected straight to a page websocket.
        command_timeout: Default bounded wait per command, in seconds.
        event_bus: Bus that receives a DocumentUpdatedEvent after each drain
            that applied at least one replacement.
        owns_client: Whether `close()` also stops the cdp-use client.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, revalidate_instances='never')

    cdp_client: Any
    session_id: str | None = None
    command_timeout: float | None = Field(default_factory=lambda: CONFIG.COMMAND_TIMEOUT)
    event_bus: EventBus | None = None
    owns_client: bool = False

    _pending: deque = PrivateAttr(default_factory=deque)
    _observers: weakref.WeakValueDictionary = PrivateAttr(default_factory=weakref.WeakValueDictionary)
    _next_token: int = PrivateAttr(default=0)
    _generation: int = PrivateAttr(default=0)
    _drain_lock: asyncio.Lock = PrivateAttr(default_factory=asyncio.Lock)
    _attached: bool = PrivateAttr(default=False)

    @property
    def generation(self) -> int:
        """Number of document replacements applied so far."""
        return self._generation

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def attach(self) -> None:
        """Register the document-replacement handler on the cdp-use client."""
        if self._attached:
            return
        self.cdp_client.register.DOM.documentUpdated(self._on_document_updated)
        self._attached = True

    def _on_document_updated(self, event: Any, session_id: str | None = None) -> None:
        """Buffer a DOM.documentUpdated notification until the next drain."""
        if self.session_id is not None and session_id is not None and session_id != self.session_id:
            return
        self._pending.append(event)
        logger.debug(f'Buffered DOM.documentUpdated ({len(self._pending)} pending)')

    async def send(self, command: Command, timeout: float | None = None) -> CommandResponse:
        """Send a command and wait for its response.

        Args:
            command: The typed command to send
            timeout: Bounded wait in seconds; defaults to `command_timeout`

        Returns:
            The response, successful or carrying the browser's error message

        Raises:
            TransportTimeoutError: If no response arrived within the wait
        """
        wait = self.command_timeout if timeout is None else timeout
        params = command.params()
        logger.debug(f'→ {command.method} {params}')

        try:
            result = await asyncio.wait_for(
                self.cdp_client.send_raw(
                    method=command.method,
                    params=params or None,
                    session_id=self.session_id,
                ),
                timeout=wait,
            )
        except asyncio.TimeoutError as e:
            raise TransportTimeoutError(command.method, wait) from e
        except RuntimeError as e:
            message = _error_message(e)
            logger.debug(f'← {command.method} failed: {message}')
            return CommandResponse(method=command.method, error=message)

        return CommandResponse(method=command.method, result=result or {})

    def subscribe(self, observer: DocumentObserver) -> int:
        """Register an observer for document replacements.

        The registry holds the observer weakly.

        Returns:
            Token to pass to `unsubscribe()`
        """
        token = self._next_token
        self._next_token += 1
        self._observers[token] = observer
        return token

    def unsubscribe(self, token: int) -> None:
        self._observers.pop(token, None)

    async def process_pending_events(self) -> int:
        """Apply every buffered document replacement to the subscribed observers.

        Replacements buffered together are applied as one: the observers only
        care about the document that is current now. Notifications arriving
        while observers run (e.g. during a root re-resolution) are applied in
        the same call. Concurrent callers wait for the drain in progress.

        Returns:
            Number of notifications applied
        """
        applied = 0
        errors: list[Exception] = []
        async with self._drain_lock:
            while self._pending and not errors:
                count = len(self._pending)
                self._pending.clear()
                applied += count
                self._generation += count
                generation = self._generation

                observers = list(self._observers.values())
                logger.debug(f'Applying document replacement #{generation} to {len(observers)} handles')

                # Every observer must see the replacement even if one of them fails
                for observer in observers:
                    try:
                        await observer.on_document_updated(generation)
                    except Exception as e:
                        logger.debug(f'Observer {observer!r} failed on document replacement: {type(e).__name__}: {e}')
                        errors.append(e)

        # Listeners may query the document again, which drains through this lock
        if applied and self.event_bus is not None:
            await self.event_bus.dispatch(DocumentUpdatedEvent(generation=self._generation))

        if errors:
            raise errors[0]

        return applied

    async def close(self) -> None:
        """Drop buffered notifications and observers; stop the client if owned."""
        self._pending.clear()
        self._observers.clear()
        if self.owns_client:
            try:
                await self.cdp_client.stop()
            except Exception as e:
                logger.warning(f'Failed to stop CDP client: {type(e).__name__}: {e}')
