"""
CDP DOM Adapter - DomAdapter over the Chrome DevTools Protocol.

Elements are identified by backend node id. Each read resolves the node to
a Runtime object and calls a small function on it.
"""

import logging
from typing import TYPE_CHECKING, Any

from webatoms.dom.adapter import DomAdapter, PropertyValue, Rect
from webatoms.exceptions import DOMError, WebAtomsError
from webatoms.logging import logger as atom_log

if TYPE_CHECKING:
    from webatoms.browser.session import BrowserSession

logger = logging.getLogger(__name__)

_UNSERIALIZABLE_NUMBERS = {
    "NaN": float("nan"),
    "Infinity": float("inf"),
    "-Infinity": float("-inf"),
    "-0": -0.0,
}

_IS_SELECTABLE_JS = """
    function() {
        const tag = this.tagName ? this.tagName.toLowerCase() : '';
        if (tag === 'option') {
            return true;
        }
        if (tag === 'input') {
            const type = (this.type || '').toLowerCase();
            return type === 'checkbox' || type === 'radio';
        }
        return false;
    }
"""

_IS_SELECTED_JS = """
    function() {
        if (this.tagName && this.tagName.toLowerCase() === 'option') {
            return !!this.selected;
        }
        return !!this.checked;
    }
"""

_IS_SHOWN_JS = """
    function() {
        if (!this.isConnected) {
            return false;
        }
        const style = window.getComputedStyle(this);
        if (style.display === 'none') {
            return false;
        }
        if (style.visibility === 'hidden' || style.visibility === 'collapse') {
            return false;
        }
        return this.getClientRects().length > 0;
    }
"""

_BOUNDS_JS = """
    function() {
        const rect = this.getBoundingClientRect();
        return {
            left: rect.left + window.scrollX,
            top: rect.top + window.scrollY,
            width: rect.width,
            height: rect.height
        };
    }
"""

_CLIENT_REGION_JS = """
    function(region) {
        const rect = this.getBoundingClientRect();
        if (!region) {
            return {left: rect.left, top: rect.top, width: rect.width, height: rect.height};
        }
        return {
            left: rect.left + region.left,
            top: rect.top + region.top,
            width: region.width,
            height: region.height
        };
    }
"""

_VISIBLE_TEXT_JS = """
    function(composed) {
        if (composed && this.shadowRoot) {
            return (this.shadowRoot.textContent || '').trim();
        }
        return (this.innerText || '').trim();
    }
"""


def remote_object_to_property(remote: dict[str, Any]) -> PropertyValue:
    """Map a CDP Runtime.RemoteObject to a PropertyValue."""
    kind = remote.get("type", "undefined")
    subtype = remote.get("subtype")
    description = remote.get("description")

    if kind == "undefined":
        return PropertyValue.undefined()
    if kind == "object" and subtype == "null":
        return PropertyValue.null()
    if kind == "number":
        if "unserializableValue" in remote:
            return PropertyValue(kind="number", value=_UNSERIALIZABLE_NUMBERS[remote["unserializableValue"]])
        # V8's description is the page's own Number::toString text
        return PropertyValue(kind="number", value=remote.get("value"), description=description)
    if kind == "bigint":
        return PropertyValue(kind="bigint", value=int(remote["unserializableValue"].rstrip("n")))
    if kind in ("string", "boolean"):
        return PropertyValue(kind=kind, value=remote.get("value"))
    return PropertyValue(kind=kind, description=description)


def _rect_from(value: dict[str, Any]) -> Rect:
    return Rect(
        left=value["left"],
        top=value["top"],
        width=value["width"],
        height=value["height"],
    )


class CDPDomAdapter(DomAdapter[int]):
    """DomAdapter for backend node ids of a BrowserSession's page."""

    def __init__(self, session: "BrowserSession"):
        self._session = session

    async def _call(
        self,
        backend_node_id: int,
        function: str,
        *args: Any,
        by_value: bool = True,
    ) -> dict[str, Any]:
        """Call a function with the element as ``this`` and return the RemoteObject."""
        atom_log.cdp("Runtime.callFunctionOn", {"arguments": list(args)}, backend_node_id)
        try:
            object_id = await self._session.resolve_node(backend_node_id)
            result = await self._session.cdp_client.send.Runtime.callFunctionOn(
                {
                    "objectId": object_id,
                    "functionDeclaration": function,
                    "arguments": [{"value": arg} for arg in args],
                    "returnByValue": by_value,
                },
                session_id=self._session.session_id,
            )
        except WebAtomsError:
            raise
        except Exception as e:
            raise DOMError(f"CDP call on element {backend_node_id} failed: {e}") from e

        if "exceptionDetails" in result:
            details = result["exceptionDetails"]
            raise DOMError(f"JS error on element {backend_node_id}: {details.get('text', details)}")

        return result.get("result", {})

    async def _value(self, backend_node_id: int, function: str, *args: Any) -> Any:
        return (await self._call(backend_node_id, function, *args)).get("value")

    async def is_selectable(self, element: int) -> bool:
        return bool(await self._value(element, _IS_SELECTABLE_JS))

    async def is_selected(self, element: int) -> bool:
        return bool(await self._value(element, _IS_SELECTED_JS))

    async def get_attribute(self, element: int, name: str) -> str | None:
        return await self._value(element, "function(name) { return this.getAttribute(name); }", name)

    async def get_property(self, element: int, name: str) -> PropertyValue:
        remote = await self._call(
            element,
            "function(name) { return this[name]; }",
            name,
            by_value=False,
        )
        return remote_object_to_property(remote)

    async def get_style_text(self, element: int) -> str | None:
        return await self._value(element, "function() { return this.style ? this.style.cssText : null; }")

    async def is_element_of_tag(self, element: int, tag: str) -> bool:
        return bool(
            await self._value(
                element,
                "function(tag) { return !!this.tagName && this.tagName.toLowerCase() === tag; }",
                tag.lower(),
            )
        )

    async def is_shown(self, element: int) -> bool:
        return bool(await self._value(element, _IS_SHOWN_JS))

    async def get_bounds(self, element: int) -> Rect | None:
        value = await self._value(element, _BOUNDS_JS)
        return _rect_from(value) if value else None

    async def scroll_into_view(self, element: int, region: Rect | None = None) -> None:
        params: dict[str, Any] = {"backendNodeId": element}
        if region is not None:
            params["rect"] = {
                "x": region.left,
                "y": region.top,
                "width": region.width,
                "height": region.height,
            }
        try:
            await self._session.cdp_client.send.DOM.scrollIntoViewIfNeeded(
                params,
                session_id=self._session.session_id,
            )
        except WebAtomsError:
            raise
        except Exception as e:
            raise DOMError(f"Could not scroll element {element} into view: {e}") from e
        logger.debug(f"Scrolled element {element} into view")

    async def get_client_region(self, element: int, region: Rect | None = None) -> Rect:
        region_arg = None
        if region is not None:
            region_arg = {
                "left": region.left,
                "top": region.top,
                "width": region.width,
                "height": region.height,
            }
        return _rect_from(await self._value(element, _CLIENT_REGION_JS, region_arg))

    async def get_visible_text(self, element: int, composed: bool = False) -> str:
        return await self._value(element, _VISIBLE_TEXT_JS, composed) or ""
