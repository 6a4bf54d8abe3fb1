"""Node handles for elements of a remote document.

A Node is the local handle for one node of the document living in the
browser. The browser identifies nodes by integer ids that are only valid
within one document generation: as soon as DOM.documentUpdated is observed,
every handle obtained earlier is stale and refuses to issue commands. The
Document subclass is the exception, it follows the replacement by
re-resolving its id.

Every operation runs `_prepare_for_request()` first:

    1. fail fast if the handle is already stale (no command is sent)
    2. fail if the owning page is closed
    3. apply buffered notifications, so a replacement that has already
       arrived is seen before the command is built
    4. fail if that made the handle stale
"""

import logging
import os
import re
import weakref
from collections.abc import Iterable
from typing import TYPE_CHECKING

from domactor.commands import (
    Command,
    Focus,
    GetAttributes,
    GetBoxModel,
    GetOuterHTML,
    QuerySelector,
    QuerySelectorAll,
    ResultT,
    ScrollIntoViewIfNeeded,
    SetAttributeValue,
    SetFileInputFiles,
)
from domactor.dom.views import NodeAttributes, NodePosition
from domactor.exceptions import (
    ClosedPageError,
    PositionUnavailableError,
    ProtocolError,
    StaleHandleError,
)

if TYPE_CHECKING:
    from domactor.actor.page import Page
    from domactor.session import CommandResponse, DomSession

logger = logging.getLogger(__name__)

# Error text Chrome returns from DOM.getBoxModel for nodes that are not rendered
_NO_BOX_MODEL_MESSAGE = 'Could not compute box model'

_COMMENT_RE = re.compile(r'<!--.*?-->', re.DOTALL)
_TAG_RE = re.compile(r'''<(?:[^>"']|"[^"]*"|'[^']*')*>''')


def strip_tags(markup: str) -> str:
    """Remove comments and tags from markup, leaving text and entities untouched."""
    return _TAG_RE.sub('', _COMMENT_RE.sub('', markup))


class Node:
    """Handle for one node of the remote document.

    Handles are created by queries and searches; they never own the page,
    they only keep a weak reference to it.
    """

    def __init__(self, page: 'Page', node_id: int, is_root: bool = False):
        self._page_ref = weakref.ref(page)
        self._node_id = node_id
        self._is_root = is_root
        self._is_stale = False
        self._subscription: int | None = page.session.subscribe(self)

    def __repr__(self) -> str:
        state = 'root' if self._is_root else ('stale' if self._is_stale else 'live')
        return f'<{type(self).__name__} node_id={self._node_id} {state}>'

    @property
    def node_id(self) -> int:
        return self._node_id

    @property
    def is_stale(self) -> bool:
        return self._is_stale

    @property
    def is_root(self) -> bool:
        return self._is_root

    @property
    def page(self) -> 'Page':
        page = self._page_ref()
        if page is None:
            raise ClosedPageError('The page owning this node no longer exists')
        return page

    @property
    def _session(self) -> 'DomSession':
        return self.page.session

    async def on_document_updated(self, generation: int) -> None:
        """Mark the handle stale; node ids do not survive a document replacement."""
        if self._is_stale:
            return
        self._is_stale = True
        logger.debug(f'Node {self._node_id} went stale at document generation {generation}')
        self._unsubscribe()

    def _unsubscribe(self) -> None:
        if self._subscription is None:
            return
        page = self._page_ref()
        if page is not None:
            page.session.unsubscribe(self._subscription)
        self._subscription = None

    def _child(self, node_id: int) -> 'Node':
        return Node(self.page, node_id)

    async def _prepare_for_request(self) -> None:
        if self._is_stale:
            raise StaleHandleError(self._node_id)

        page = self.page
        page.assert_not_closed()

        await page.session.process_pending_events()

        if self._is_stale:
            raise StaleHandleError(self._node_id)

    async def _send(self, command: 'Command[ResultT]') -> ResultT:
        response = await self._session.send(command)
        self.assert_not_error(response)
        return command.parse_result(response.result)

    @staticmethod
    def assert_not_error(response: 'CommandResponse') -> None:
        """Raise ProtocolError if the browser answered with an error."""
        if not response.is_successful:
            raise ProtocolError(response.error or 'Unknown error', method=response.method)

    async def get_attributes(self) -> NodeAttributes:
        await self._prepare_for_request()
        result = await self._send(GetAttributes(node_id=self._node_id))
        return NodeAttributes.from_flat_list(result.attributes)

    async def get_attribute(self, name: str) -> str | None:
        """Get an attribute value, or None if the node has no such attribute."""
        attributes = await self.get_attributes()
        return attributes.get(name)

    async def set_attribute_value(self, name: str, value: str) -> None:
        await self._prepare_for_request()
        await self._send(SetAttributeValue(node_id=self._node_id, name=name, value=value))

    async def query_selector(self, selector: str) -> 'Node | None':
        """Find the first descendant matching a CSS selector.

        Args:
            selector: CSS selector, evaluated by the browser

        Returns:
            Node for the match, or None if nothing matches
        """
        await self._prepare_for_request()
        result = await self._send(QuerySelector(node_id=self._node_id, selector=selector))

        if not result.node_id:
            return None
        return self._child(result.node_id)

    async def query_selector_all(self, selector: str) -> list['Node']:
        """Find all descendants matching a CSS selector, in document order."""
        await self._prepare_for_request()
        result = await self._send(QuerySelectorAll(node_id=self._node_id, selector=selector))
        return [self._child(node_id) for node_id in result.node_ids]

    async def focus(self) -> None:
        await self._prepare_for_request()
        await self._send(Focus(node_id=self._node_id))

    async def get_position(self) -> NodePosition | None:
        """Get the content quad of the node.

        Returns:
            The position, or None if the node has no layout (e.g. display: none)
        """
        await self._prepare_for_request()

        command = GetBoxModel(node_id=self._node_id)
        response = await self._session.send(command)
        if not response.is_successful and _NO_BOX_MODEL_MESSAGE in (response.error or ''):
            return None
        self.assert_not_error(response)

        result = command.parse_result(response.result)
        if result.model is None:
            return None
        return NodePosition.from_quad(result.model.content)

    async def has_position(self) -> bool:
        return await self.get_position() is not None

    async def get_html(self) -> str:
        """Get the outer HTML of the node, including the node itself."""
        await self._prepare_for_request()
        result = await self._send(GetOuterHTML(node_id=self._node_id))
        return result.outer_html

    async def get_text(self) -> str:
        return strip_tags(await self.get_html())

    async def scroll_into_view(self) -> None:
        await self._prepare_for_request()
        await self._send(ScrollIntoViewIfNeeded(node_id=self._node_id))

    async def click(self) -> None:
        """Click the center of the node with the page's mouse.

        The node must have a position; it is scrolled into view and its
        position is read again before the pointer moves, since scrolling can
        shift layout.

        Raises:
            PositionUnavailableError: If the node has no content geometry
        """
        await self._prepare_for_request()

        if not await self.has_position():
            raise PositionUnavailableError(self._node_id)

        await self.scroll_into_view()

        position = await self.get_position()
        if position is None:
            raise PositionUnavailableError(self._node_id)

        center = position.center
        mouse = self.page.mouse
        await mouse.move(center['x'], center['y'])
        await mouse.click()

    async def send_keys(self, text: str) -> None:
        """Focus the node and type text into it with the page's keyboard."""
        await self._prepare_for_request()

        await self.scroll_into_view()
        await self.focus()
        await self.page.keyboard.type_text(text)

    async def send_file(self, file_path: str | os.PathLike[str]) -> None:
        await self.send_files([file_path])

    async def send_files(self, file_paths: Iterable[str | os.PathLike[str]]) -> None:
        """Set the files of a file input node.

        Args:
            file_paths: Paths as seen by the browser process
        """
        await self._prepare_for_request()
        files = [os.fspath(path) for path in file_paths]
        await self._send(SetFileInputFiles(files=files, node_id=self._node_id))
