"""Handle for the root node of a page's document."""

import logging
from typing import TYPE_CHECKING

from domactor.commands import (
    DiscardSearchResults,
    GetDocument,
    GetSearchResults,
    PerformSearch,
)
from domactor.config import CONFIG
from domactor.dom.node import Node
from domactor.exceptions import DomActorError, ProtocolError

if TYPE_CHECKING:
    from domactor.actor.page import Page
    from domactor.session import DomSession

logger = logging.getLogger(__name__)


class Document(Node):
    """Root node handle that survives document replacements.

    Instead of going stale on DOM.documentUpdated it asks the browser for the
    new root and keeps working with the new id. Use `Document.create()` to
    build one, since resolving the root takes a round trip.

    Example:
        >>> document = await Document.create(page)
        >>> for node in await document.search('a.external'):
        ...     print(await node.get_attribute('href'))
    """

    def __init__(self, page: 'Page', node_id: int, resolve_timeout: float | None = None):
        super().__init__(page, node_id, is_root=True)
        self._resolve_timeout = resolve_timeout
        self._needs_resolve = False

    @classmethod
    async def create(cls, page: 'Page', timeout: float | None = None) -> 'Document':
        """Resolve the current root node and wrap it.

        Args:
            page: Page whose document to bind to
            timeout: Bounded wait for DOM.getDocument in seconds;
                defaults to CONFIG.DOCUMENT_TIMEOUT

        Raises:
            TransportTimeoutError: If the browser does not answer in time
            ProtocolError: If the browser answers with an error
        """
        timeout = CONFIG.DOCUMENT_TIMEOUT if timeout is None else timeout
        node_id = await cls._resolve_root_node_id(page.session, timeout)
        logger.debug(f'Document bound to root node {node_id}')
        return cls(page, node_id, resolve_timeout=timeout)

    @staticmethod
    async def _resolve_root_node_id(session: 'DomSession', timeout: float | None) -> int:
        command = GetDocument()
        response = await session.send(command, timeout=timeout)
        if not response.is_successful:
            raise ProtocolError(response.error or 'Unknown error', method=response.method)
        return command.parse_result(response.result).root.node_id

    async def on_document_updated(self, generation: int) -> None:
        """Re-resolve the root id; the root handle never goes stale."""
        self._needs_resolve = True
        await self._re_resolve()

    async def _re_resolve(self) -> None:
        # the flag stays set until a resolution succeeds, so the old id is never reused
        previous = self._node_id
        self._node_id = await self._resolve_root_node_id(self._session, self._resolve_timeout)
        self._needs_resolve = False
        logger.debug(f'Document root re-resolved {previous} -> {self._node_id}')

    async def _prepare_for_request(self) -> None:
        await super()._prepare_for_request()
        if self._needs_resolve:
            await self._re_resolve()

    async def search(self, selector: str) -> list[Node]:
        """Search the whole document, including shadow roots and frames.

        Runs DOM.performSearch, then fetches all matches with a single
        DOM.getSearchResults call.

        Args:
            selector: Plain text, CSS selector or XPath query

        Returns:
            Matching nodes in the order the browser reports them
        """
        await self._prepare_for_request()

        search = await self._send(PerformSearch(query=selector))
        if search.result_count == 0:
            return []

        try:
            results = await self._send(
                GetSearchResults(
                    search_id=search.search_id,
                    from_index=0,
                    to_index=search.result_count,
                )
            )
        finally:
            await self._discard_search(search.search_id)

        return [self._child(node_id) for node_id in results.node_ids]

    async def _discard_search(self, search_id: str) -> None:
        """Release the browser-side search results; failures are only logged."""
        try:
            response = await self._session.send(DiscardSearchResults(search_id=search_id))
        except DomActorError as e:
            logger.debug(f'Failed to discard search {search_id}: {type(e).__name__}: {e}')
            return
        if not response.is_successful:
            logger.debug(f'Failed to discard search {search_id}: {response.error}')
