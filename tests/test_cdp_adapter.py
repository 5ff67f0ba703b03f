"""Tests for the CDP DOM adapter and RemoteObject mapping, against a fake CDP client."""

import math

import pytest

from webatoms.dom.adapter import PropertyValue, Rect
from webatoms.dom.cdp import CDPDomAdapter, remote_object_to_property
from webatoms.exceptions import BrowserError, DOMError


def _returns(value):
    """Handler for Runtime.callFunctionOn returning a by-value result."""
    return {"result": {"type": type(value).__name__, "value": value}}


@pytest.fixture
def dom(session) -> CDPDomAdapter:
    return CDPDomAdapter(session)


# ── RemoteObject mapping ─────────────────────────────────────────────────────


class TestRemoteObjectToProperty:
    def test_undefined(self):
        assert remote_object_to_property({"type": "undefined"}).kind == "undefined"

    def test_null(self):
        assert remote_object_to_property({"type": "object", "subtype": "null", "value": None}).kind == "null"

    @pytest.mark.parametrize(
        "remote, expected",
        [
            ({"type": "string", "value": "abc"}, PropertyValue(kind="string", value="abc")),
            ({"type": "boolean", "value": False}, PropertyValue(kind="boolean", value=False)),
            ({"type": "number", "value": 4}, PropertyValue(kind="number", value=4)),
            (
                {"type": "number", "value": 1e21, "description": "1e+21"},
                PropertyValue(kind="number", value=1e21, description="1e+21"),
            ),
            ({"type": "bigint", "unserializableValue": "123n"}, PropertyValue(kind="bigint", value=123)),
        ],
    )
    def test_primitives(self, remote, expected):
        assert remote_object_to_property(remote) == expected

    def test_unserializable_numbers(self):
        nan = remote_object_to_property({"type": "number", "unserializableValue": "NaN"})
        assert math.isnan(nan.value)
        inf = remote_object_to_property({"type": "number", "unserializableValue": "-Infinity"})
        assert inf.value == float("-inf")

    def test_negative_zero_prints_as_zero(self):
        value = remote_object_to_property({"type": "number", "unserializableValue": "-0", "description": "-0"})
        assert value.to_js_string() == "0"

    def test_number_uses_browser_text(self):
        value = remote_object_to_property({"type": "number", "value": 1e-07, "description": "1e-7"})
        assert value.to_js_string() == "1e-7"

    def test_objects_keep_description(self):
        remote = {"type": "object", "className": "DOMTokenList", "description": "DOMTokenList(2)", "objectId": "x"}
        value = remote_object_to_property(remote)
        assert value.kind == "object"
        assert value.is_structured
        assert value.to_js_string() == "DOMTokenList(2)"

    def test_function(self):
        value = remote_object_to_property({"type": "function", "description": "function onclick(event) {}"})
        assert value.kind == "function"
        assert value.is_structured


# ── Reads through Runtime.callFunctionOn ─────────────────────────────────────


class TestReads:
    @pytest.mark.asyncio
    async def test_get_attribute_passes_name(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = _returns("/home")

        assert await dom.get_attribute(7, "href") == "/home"

        (resolve,) = session.cdp_client.commands("DOM.resolveNode")
        assert resolve == {"backendNodeId": 7}
        (call,) = session.cdp_client.commands("Runtime.callFunctionOn")
        assert call["objectId"] == "obj-1"
        assert call["arguments"] == [{"value": "href"}]
        assert call["returnByValue"] is True

    @pytest.mark.asyncio
    async def test_missing_attribute_is_none(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = {"result": {"type": "object", "subtype": "null", "value": None}}
        assert await dom.get_attribute(7, "title") is None

    @pytest.mark.asyncio
    async def test_get_property_keeps_remote_object(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = {
            "result": {"type": "object", "className": "CSSStyleDeclaration", "description": "CSSStyleDeclaration"}
        }

        value = await dom.get_property(7, "style")

        assert value == PropertyValue(kind="object", description="CSSStyleDeclaration")
        (call,) = session.cdp_client.commands("Runtime.callFunctionOn")
        assert call["returnByValue"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["is_selectable", "is_selected", "is_shown"])
    async def test_predicates_coerce_to_bool(self, dom, session, method: str):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = _returns(1)
        assert await getattr(dom, method)(3) is True

    @pytest.mark.asyncio
    async def test_is_element_of_tag_lower_cases_tag(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = _returns(True)
        await dom.is_element_of_tag(3, "IMG")
        (call,) = session.cdp_client.commands("Runtime.callFunctionOn")
        assert call["arguments"] == [{"value": "img"}]

    @pytest.mark.asyncio
    async def test_get_bounds(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = {
            "result": {"type": "object", "value": {"left": 1, "top": 2, "width": 30, "height": 40}}
        }
        bounds = await dom.get_bounds(3)
        assert bounds == Rect(1, 2, 30, 40)
        assert (bounds.right, bounds.bottom) == (31, 42)

    @pytest.mark.asyncio
    async def test_client_region_sends_region(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = {
            "result": {"type": "object", "value": {"left": 11, "top": 12, "width": 5, "height": 6}}
        }
        rect = await dom.get_client_region(3, Rect(1, 2, 5, 6))
        assert rect == Rect(11, 12, 5, 6)
        (call,) = session.cdp_client.commands("Runtime.callFunctionOn")
        assert call["arguments"] == [{"value": {"left": 1, "top": 2, "width": 5, "height": 6}}]

    @pytest.mark.asyncio
    async def test_visible_text_defaults_to_empty(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = {"result": {"type": "object", "subtype": "null", "value": None}}
        assert await dom.get_visible_text(3) == ""


# ── Scrolling ────────────────────────────────────────────────────────────────


class TestScroll:
    @pytest.mark.asyncio
    async def test_scroll_whole_element(self, dom, session):
        await dom.scroll_into_view(9)
        assert session.cdp_client.commands("DOM.scrollIntoViewIfNeeded") == [{"backendNodeId": 9}]

    @pytest.mark.asyncio
    async def test_scroll_region(self, dom, session):
        await dom.scroll_into_view(9, Rect(1, 2, 3, 4))
        (params,) = session.cdp_client.commands("DOM.scrollIntoViewIfNeeded")
        assert params["rect"] == {"x": 1, "y": 2, "width": 3, "height": 4}

    @pytest.mark.asyncio
    async def test_scroll_failure_is_dom_error(self, dom, session):
        session.cdp_client.handlers["DOM.scrollIntoViewIfNeeded"] = RuntimeError("node detached")
        with pytest.raises(DOMError, match="node detached"):
            await dom.scroll_into_view(9)


# ── Errors ───────────────────────────────────────────────────────────────────


class TestErrors:
    @pytest.mark.asyncio
    async def test_js_exception_is_dom_error(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = {
            "result": {"type": "object"},
            "exceptionDetails": {"text": "Uncaught TypeError"},
        }
        with pytest.raises(DOMError, match="Uncaught TypeError"):
            await dom.get_attribute(1, "id")

    @pytest.mark.asyncio
    async def test_transport_failure_is_dom_error(self, dom, session):
        session.cdp_client.handlers["Runtime.callFunctionOn"] = ConnectionError("socket closed")
        with pytest.raises(DOMError, match="socket closed"):
            await dom.get_property(1, "value")

    @pytest.mark.asyncio
    async def test_unresolvable_node_is_dom_error(self, dom, session):
        session.cdp_client.handlers["DOM.resolveNode"] = {"object": {}}
        with pytest.raises(DOMError, match="Could not resolve"):
            await dom.is_shown(1)

    @pytest.mark.asyncio
    async def test_library_errors_are_not_rewrapped(self, dom, session):
        async def disconnected(backend_node_id):
            raise BrowserError("Browser not connected")

        session.resolve_node = disconnected
        with pytest.raises(BrowserError):
            await dom.get_attribute(1, "id")
