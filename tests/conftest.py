"""Shared fakes: an in-memory DOM adapter, a recording executor and a fake CDP client."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from webatoms.dom.adapter import DomAdapter, PropertyValue, Rect
from webatoms.exceptions import DOMError
from webatoms.input.executor import KeyboardExecutor


# ── In-memory DOM ────────────────────────────────────────────────────────────


@dataclass(eq=False)
class FakeElement:
    tag: str = "div"
    attributes: dict[str, str] = field(default_factory=dict)
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    style: str | None = None
    selectable: bool = False
    selected: bool = False
    shown: bool = True
    bounds: Rect | None = None
    client_rect: Rect = field(default_factory=lambda: Rect(0, 0, 0, 0))
    text: str = ""
    composed_text: str = ""
    failing_properties: set[str] = field(default_factory=set)
    property_errors: dict[str, Exception] = field(default_factory=dict)


class FakeDomAdapter(DomAdapter[FakeElement]):
    """DomAdapter over FakeElement; records every call as (method, args)."""

    def __init__(self, broken: set[str] | None = None):
        self.calls: list[tuple[str, tuple]] = []
        self._broken = broken or set()

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self._broken:
            raise DOMError(f"{method} failed")

    def called(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    async def is_selectable(self, element):
        self._record("is_selectable")
        return element.selectable

    async def is_selected(self, element):
        self._record("is_selected")
        return element.selected

    async def get_attribute(self, element, name):
        self._record("get_attribute", name)
        for key, value in element.attributes.items():
            if key.lower() == name.lower():
                return value
        return None

    async def get_property(self, element, name):
        self._record("get_property", name)
        if name in element.failing_properties:
            raise DOMError(f"cannot read {name}")
        if name in element.property_errors:
            raise element.property_errors[name]
        return element.properties.get(name, PropertyValue.undefined())

    async def get_style_text(self, element):
        self._record("get_style_text")
        return element.style

    async def is_element_of_tag(self, element, tag):
        self._record("is_element_of_tag", tag)
        return element.tag == tag

    async def is_shown(self, element):
        self._record("is_shown")
        return element.shown

    async def get_bounds(self, element):
        self._record("get_bounds")
        return element.bounds

    async def scroll_into_view(self, element, region=None):
        self._record("scroll_into_view", region)

    async def get_client_region(self, element, region=None):
        self._record("get_client_region", region)
        if region is None:
            return element.client_rect
        return Rect(
            element.client_rect.left + region.left,
            element.client_rect.top + region.top,
            region.width,
            region.height,
        )

    async def get_visible_text(self, element, composed=False):
        self._record("get_visible_text", composed)
        return element.composed_text if composed else element.text


class RecordingExecutor(KeyboardExecutor[FakeElement]):
    """Records batches; optionally fails on the Nth call (0-based)."""

    def __init__(self, fail_on: int | None = None):
        self.executed: list[tuple[Any, list, bool]] = []
        self._fail_on = fail_on

    async def execute(self, element, keys, persist):
        if self._fail_on is not None and len(self.executed) == self._fail_on:
            raise RuntimeError("keyboard went away")
        self.executed.append((element, list(keys), persist))


# ── Fake CDP ─────────────────────────────────────────────────────────────────


class FakeCDPDomain:
    def __init__(self, client: "FakeCDPClient", domain: str):
        self._client = client
        self._domain = domain

    def __getattr__(self, command: str):
        async def send(params: dict | None = None, session_id: str | None = None):
            self._client.sent.append((f"{self._domain}.{command}", params or {}))
            handler = self._client.handlers.get(f"{self._domain}.{command}")
            if isinstance(handler, Exception):
                raise handler
            if callable(handler):
                return handler(params or {})
            return handler if handler is not None else {}

        return send


class _Send:
    def __init__(self, client: "FakeCDPClient"):
        self._client = client

    def __getattr__(self, domain: str):
        return FakeCDPDomain(self._client, domain)


class FakeCDPClient:
    """Mimics cdp-use's ``client.send.Domain.command(params, session_id=...)``."""

    def __init__(self):
        self.sent: list[tuple[str, dict]] = []
        self.handlers: dict[str, Any] = {
            "DOM.resolveNode": {"object": {"objectId": "obj-1"}},
        }
        self.send = _Send(self)
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    def commands(self, name: str) -> list[dict]:
        return [params for command, params in self.sent if command == name]


class FakeSession:
    """Stands in for BrowserSession: exposes cdp_client, session_id, resolve_node."""

    def __init__(self):
        self.cdp_client = FakeCDPClient()
        self.session_id = "session-1"

    async def resolve_node(self, backend_node_id: int) -> str:
        result = await self.cdp_client.send.DOM.resolveNode({"backendNodeId": backend_node_id})
        object_id = result.get("object", {}).get("objectId")
        if not object_id:
            raise DOMError(f"Could not resolve element {backend_node_id}")
        return object_id


@pytest.fixture
def adapter() -> FakeDomAdapter:
    return FakeDomAdapter()


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def make_element():
    return FakeElement


@pytest.fixture
def make_adapter():
    return FakeDomAdapter


@pytest.fixture
def make_executor():
    return RecordingExecutor


@pytest.fixture
def make_cdp_client():
    return FakeCDPClient
