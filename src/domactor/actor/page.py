"""Page class tying a command session to its input surfaces and document."""

import asyncio
import logging
from typing import TYPE_CHECKING

from bubus import EventBus

from domactor.actor.keyboard import Keyboard
from domactor.actor.mouse import Mouse
from domactor.exceptions import ClosedPageError, DomActorError
from domactor.session import DomSession
from domactor.watchdogs.dom_watchdog import DOMWatchdog

if TYPE_CHECKING:
    from domactor.dom.document import Document

logger = logging.getLogger(__name__)


class Page:
    """One browser tab as seen by DOM handles.

    The page owns the command session, the mouse and keyboard, and an event
    bus on which document replacements are announced. Node handles only keep a
    weak reference to their page.

    Example:
        >>> page = await Page.connect('http://localhost:9222')
        >>> document = await page.dom()
        >>> button = await document.query_selector('button[type=submit]')
        >>> await button.click()
        >>> await page.close()
    """

    def __init__(
        self,
        session: DomSession,
        event_bus: EventBus | None = None,
        typing_delay: float | None = None,
    ):
        self.session = session
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.session.event_bus = self.event_bus

        self.mouse = Mouse(session)
        self.keyboard = Keyboard(session, typing_delay=typing_delay)

        self._dom_watchdog = DOMWatchdog(event_bus=self.event_bus)
        self._dom_watchdog.attach()

        self._document: 'Document | None' = None
        self._closed = False

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'open'
        return f'<Page session_id={self.session.session_id} {state}>'

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def document_generation(self) -> int:
        """Document replacements announced on this page's event bus."""
        return self._dom_watchdog.document_generation

    @property
    def dom_watchdog(self) -> DOMWatchdog:
        return self._dom_watchdog

    def assert_not_closed(self) -> None:
        if self._closed:
            raise ClosedPageError()

    async def dom(self) -> 'Document':
        """Get the root handle of the current document, creating it on first use."""
        self.assert_not_closed()
        if self._document is None:
            from domactor.dom.document import Document

            self._document = await Document.create(self)
        return self._document

    async def close(self) -> None:
        """Close the page; every handle of this page refuses further requests."""
        if self._closed:
            return
        self._closed = True
        self._document = None

        await self.session.close()
        await self.event_bus.stop(clear=True, timeout=5)
        logger.debug(f'Closed {self!r}')

    @classmethod
    async def connect(cls, cdp_url: str, typing_delay: float | None = None) -> 'Page':
        """Connect to a chromium-based browser and attach to its first page.

        Args:
            cdp_url: WebSocket URL of the browser, or its HTTP debugging
                endpoint (e.g. 'http://localhost:9222'), in which case the
                WebSocket URL is read from /json/version
            typing_delay: Delay between typed characters in seconds

        Returns:
            A page whose session owns the CDP connection

        Raises:
            DomActorError: If the browser has no page target to attach to
        """
        import httpx
        from cdp_use import CDPClient

        ws_url = cdp_url
        if not ws_url.startswith('ws'):
            url = ws_url.rstrip('/')
            if not url.endswith('/json/version'):
                url = url + '/json/version'

            async with httpx.AsyncClient() as client:
                version_info = await client.get(url)
                version_info.raise_for_status()
                ws_url = version_info.json()['webSocketDebuggerUrl']

        logger.debug(f'Connecting to chromium-based browser via CDP: {ws_url}')

        cdp_client = CDPClient(ws_url)
        await cdp_client.start()

        try:
            targets = await cdp_client.send.Target.getTargets()
            page_targets = [t for t in targets['targetInfos'] if t.get('type') == 'page']
            if not page_targets:
                raise DomActorError(f'No page target found at {cdp_url}')

            target_id = page_targets[0]['targetId']
            result = await cdp_client.send.Target.attachToTarget(params={'targetId': target_id, 'flatten': True})
            session_id = result['sessionId']

            await asyncio.gather(
                cdp_client.send.DOM.enable(session_id=session_id),
                cdp_client.send.Page.enable(session_id=session_id),
            )
        except BaseException:
            await cdp_client.stop()
            raise

        logger.debug(f'Attached to page target {target_id[:8]}... (session={session_id[:8]}...)')

        session = DomSession(cdp_client=cdp_client, session_id=session_id, owns_client=True)
        session.attach()
        return cls(session, typing_delay=typing_delay)
