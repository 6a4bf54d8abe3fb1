"""Tests for DomSession.

Validates command dispatch over the cdp-use client, error and timeout
conversion, the buffered notification drain, the weak observer registry and
the DocumentUpdatedEvent announced on the page's event bus.
"""

import asyncio
import gc

import pytest

from conftest import SESSION_ID, hang
from domactor.commands import GetDocument, QuerySelector
from domactor.dom.node import Node
from domactor.events import DocumentUpdatedEvent
from domactor.exceptions import ProtocolError, TransportTimeoutError
from domactor.session import CommandResponse, DomSession


class RecordingObserver:
    def __init__(self, fail: bool = False):
        self.generations: list[int] = []
        self.fail = fail

    async def on_document_updated(self, generation: int) -> None:
        self.generations.append(generation)
        if self.fail:
            raise RuntimeError("observer failed")


class TestSend:
    """Tests for DomSession.send."""

    @pytest.mark.asyncio
    async def test_send_success(self, session, cdp_client):
        """Test a successful response carries the result payload."""
        cdp_client.respond("DOM.querySelector", {"nodeId": 7})

        response = await session.send(QuerySelector(node_id=1, selector="p"))

        assert isinstance(response, CommandResponse)
        assert response.is_successful
        assert response.method == "DOM.querySelector"
        assert response.result == {"nodeId": 7}
        assert cdp_client.calls == [("DOM.querySelector", {"nodeId": 1, "selector": "p"})]

    @pytest.mark.asyncio
    async def test_send_error(self, session, cdp_client):
        """Test a protocol error becomes a failed response with the browser's message."""
        cdp_client.fail("DOM.querySelector", "Could not find node with given id")

        response = await session.send(QuerySelector(node_id=1, selector="p"))

        assert not response.is_successful
        assert response.error == "Could not find node with given id"
        assert response.result is None

    @pytest.mark.asyncio
    async def test_send_timeout(self, session, cdp_client):
        """Test the bounded wait raises TransportTimeoutError."""
        cdp_client.respond("DOM.getDocument", hang)

        with pytest.raises(TransportTimeoutError) as exc_info:
            await session.send(GetDocument(), timeout=0.01)

        assert exc_info.value.method == "DOM.getDocument"

    @pytest.mark.asyncio
    async def test_send_uses_default_timeout(self, cdp_client):
        """Test the session's command timeout applies when none is given."""
        session = DomSession(cdp_client=cdp_client, session_id=SESSION_ID, command_timeout=0.01)
        cdp_client.respond("DOM.getDocument", hang)

        with pytest.raises(TransportTimeoutError) as exc_info:
            await session.send(GetDocument())

        assert exc_info.value.timeout_seconds == 0.01

    @pytest.mark.asyncio
    async def test_concurrent_sends_are_answered_independently(self, session, cdp_client):
        """Test each caller receives the response to its own command."""
        cdp_client.respond("DOM.querySelector", lambda params: {"nodeId": len(params["selector"])})

        responses = await asyncio.gather(
            session.send(QuerySelector(node_id=1, selector="a")),
            session.send(QuerySelector(node_id=1, selector="abc")),
        )

        assert [r.result["nodeId"] for r in responses] == [1, 3]


class TestNotificationBuffer:
    """Tests for buffering and draining DOM.documentUpdated."""

    @pytest.mark.asyncio
    async def test_attach_registers_handler_once(self, session, cdp_client):
        """Test the notification handler is registered a single time."""
        session.attach()

        assert len(cdp_client.document_updated_handlers) == 1

    @pytest.mark.asyncio
    async def test_notifications_are_only_buffered(self, session, cdp_client):
        """Test observers are not called from the notification callback."""
        observer = RecordingObserver()
        session.subscribe(observer)

        cdp_client.emit_document_updated()

        assert session.pending_count == 1
        assert observer.generations == []

        assert await session.process_pending_events() == 1
        assert observer.generations == [1]
        assert session.pending_count == 0

    @pytest.mark.asyncio
    async def test_drain_without_notifications(self, session):
        """Test draining an empty buffer applies nothing."""
        assert await session.process_pending_events() == 0
        assert session.generation == 0

    @pytest.mark.asyncio
    async def test_other_sessions_are_ignored(self, session, cdp_client):
        """Test notifications for other targets are not buffered."""
        cdp_client.emit_document_updated(session_id="other-session")

        assert session.pending_count == 0

    @pytest.mark.asyncio
    async def test_every_observer_sees_the_replacement(self, session, cdp_client):
        """Test a failing observer does not keep the others from being notified."""
        failing = RecordingObserver(fail=True)
        healthy = RecordingObserver()
        session.subscribe(failing)
        session.subscribe(healthy)

        cdp_client.emit_document_updated()
        with pytest.raises(RuntimeError, match="observer failed"):
            await session.process_pending_events()

        assert failing.generations == [1]
        assert healthy.generations == [1]
        assert session.pending_count == 0

    @pytest.mark.asyncio
    async def test_root_failure_still_invalidates_children(self, page, cdp_client, session):
        """Test children go stale even if the root cannot be re-resolved."""
        await page.dom()
        node = Node(page, 5)
        cdp_client.fail("DOM.getDocument", "Document is being replaced")

        cdp_client.emit_document_updated()
        with pytest.raises(ProtocolError):
            await session.process_pending_events()

        assert node.is_stale

    @pytest.mark.asyncio
    async def test_concurrent_drains_apply_once(self, session, cdp_client):
        """Test concurrent drains do not apply a notification twice."""
        observer = RecordingObserver()
        session.subscribe(observer)
        cdp_client.emit_document_updated()

        applied = await asyncio.gather(
            session.process_pending_events(),
            session.process_pending_events(),
        )

        assert sorted(applied) == [0, 1]
        assert observer.generations == [1]


class TestObserverRegistry:
    """Tests for the weak observer registry."""

    @pytest.mark.asyncio
    async def test_subscribe_and_unsubscribe(self, session):
        observer = RecordingObserver()
        token = session.subscribe(observer)
        assert session.observer_count == 1

        session.unsubscribe(token)
        session.unsubscribe(token)

        assert session.observer_count == 0

    @pytest.mark.asyncio
    async def test_dropped_handles_leave_the_registry(self, page, session):
        """Test the registry does not keep handles alive."""
        nodes = [Node(page, node_id) for node_id in range(10, 20)]
        assert session.observer_count == 10

        del nodes
        gc.collect()

        assert session.observer_count == 0


class TestEventBus:
    """Tests for DocumentUpdatedEvent on the page's event bus."""

    @pytest.mark.asyncio
    async def test_watchdog_records_generation(self, page, cdp_client, session):
        """Test the DOM watchdog follows applied replacements."""
        assert page.document_generation == 0
        assert page.dom_watchdog.last_updated_at is None

        cdp_client.emit_document_updated()
        cdp_client.emit_document_updated()
        await session.process_pending_events()

        assert page.document_generation == 2
        assert page.dom_watchdog.last_updated_at is not None

        cdp_client.emit_document_updated()
        await session.process_pending_events()

        assert page.document_generation == 3

    @pytest.mark.asyncio
    async def test_listener_can_query_the_new_document(self, page, document, cdp_client):
        """Test a DocumentUpdatedEvent listener may send requests through the document."""
        seen = []

        async def query_new_document(event: DocumentUpdatedEvent) -> None:
            node = await document.query_selector("main")
            seen.append((event.generation, node.node_id))

        page.event_bus.on(DocumentUpdatedEvent, query_new_document)
        cdp_client.respond("DOM.getDocument", {"root": {"nodeId": 42}})
        cdp_client.respond("DOM.querySelector", {"nodeId": 43})
        cdp_client.respond("DOM.getOuterHTML", {"outerHTML": "<html></html>"})
        cdp_client.emit_document_updated()

        await asyncio.wait_for(document.get_html(), timeout=2)

        assert seen == [(1, 43)]
        assert cdp_client.params_of("DOM.querySelector") == [{"nodeId": 42, "selector": "main"}]


class TestClose:
    """Tests for DomSession.close."""

    @pytest.mark.asyncio
    async def test_close_keeps_borrowed_client(self, session, cdp_client):
        """Test a session that does not own the client leaves it running."""
        observer = RecordingObserver()
        session.subscribe(observer)
        cdp_client.emit_document_updated()

        await session.close()

        assert session.pending_count == 0
        assert session.observer_count == 0
        assert observer.generations == []
        assert not cdp_client.stopped

    @pytest.mark.asyncio
    async def test_close_stops_owned_client(self, cdp_client):
        session = DomSession(cdp_client=cdp_client, session_id=SESSION_ID, owns_client=True)

        await session.close()

        assert cdp_client.stopped
