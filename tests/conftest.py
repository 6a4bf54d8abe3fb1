"""Pytest configuration and fixtures for the domactor test suite.

The fixtures drive the real DomSession, Page and handle classes against a
recording fake of the cdp-use client, so tests can assert the exact sequence
of commands an operation sends.

Fake client:
    FakeCDPClient answers `send_raw()` from per-method scripted responses:
    a result dict, a callable computing one from the params (sync or async),
    a list consumed one response per call, or an exception to raise. Errors
    are raised the way cdp-use raises them, as RuntimeError carrying the
    protocol error payload. Handlers registered for DOM.documentUpdated are
    captured and fired by `emit_document_updated()`.

Path Setup:
    The src directory is added to sys.path to enable imports like:
    ``from domactor.dom.node import Node``
"""

import asyncio
import inspect
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
import pytest_asyncio

src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from domactor.actor.page import Page  # noqa: E402
from domactor.session import DomSession  # noqa: E402

SESSION_ID = "session-1"
ROOT_NODE_ID = 1


def cdp_error(message: str, code: int = -32000) -> RuntimeError:
    """Build the exception cdp-use raises for a protocol error response."""
    return RuntimeError({"code": code, "message": message})


async def hang(params: dict) -> dict:
    """Scripted response that never answers in time."""
    await asyncio.sleep(60)
    return {}


class FakeCDPClient:
    """Recording stand-in for cdp_use.CDPClient."""

    def __init__(self):
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, dict]] = []
        self.document_updated_handlers: list = []
        self.register = SimpleNamespace(
            DOM=SimpleNamespace(documentUpdated=self.document_updated_handlers.append)
        )
        self.stopped = False

    def respond(self, method: str, response: Any) -> None:
        self.responses[method] = response

    def fail(self, method: str, message: str, code: int = -32000) -> None:
        self.responses[method] = cdp_error(message, code)

    async def send_raw(self, method: str, params: dict | None = None, session_id: str | None = None) -> dict:
        self.calls.append((method, params or {}))

        response = self.responses.get(method, {})
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if callable(response):
            response = response(params or {})
            if inspect.isawaitable(response):
                response = await response
        if isinstance(response, BaseException):
            raise response
        return response

    def emit_document_updated(self, session_id: str | None = SESSION_ID) -> None:
        for handler in self.document_updated_handlers:
            handler({}, session_id)

    async def stop(self) -> None:
        self.stopped = True

    @property
    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def params_of(self, method: str) -> list[dict]:
        return [params for called, params in self.calls if called == method]


@pytest.fixture
def cdp_client():
    """Fake client whose DOM.getDocument answers with the root node."""
    client = FakeCDPClient()
    client.respond("DOM.getDocument", {"root": {"nodeId": ROOT_NODE_ID, "nodeName": "#document"}})
    return client


@pytest_asyncio.fixture
async def session(cdp_client):
    session = DomSession(cdp_client=cdp_client, session_id=SESSION_ID, command_timeout=1.0)
    session.attach()
    yield session


@pytest_asyncio.fixture
async def page(session):
    page = Page(session, typing_delay=0)
    yield page
    await page.close()


@pytest_asyncio.fixture
async def document(page, cdp_client):
    """Document bound to the root node; the call log starts empty."""
    document = await page.dom()
    cdp_client.calls.clear()
    return document
