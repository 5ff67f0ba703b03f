"""
Attribute Resolution - One canonical value per requested attribute name.

Callers ask for "attribute X of element E" without caring whether the
browser keeps X as a DOM attribute, a DOM property, or both. The resolver
reconciles the two following the rules browsers have converged on for
boolean attributes, links, images, inline style and spellcheck.
"""

import logging
from types import MappingProxyType
from typing import Final, Generic

from webatoms.dom.adapter import DomAdapter, ElementT, PropertyValue
from webatoms.exceptions import BrowserError

logger = logging.getLogger(__name__)

# Names users pass that differ from the DOM property name
PROPERTY_ALIASES: Final = MappingProxyType(
    {
        "class": "className",
        "readonly": "readOnly",
    }
)

# WHATWG boolean attributes. Must all be lower-case.
BOOLEAN_ATTRIBUTES: Final = frozenset(
    {
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "compact",
        "complete",
        "controls",
        "declare",
        "defaultchecked",
        "defaultselected",
        "defer",
        "disabled",
        "draggable",
        "ended",
        "formnovalidate",
        "hidden",
        "indeterminate",
        "iscontenteditable",
        "ismap",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nohref",
        "noresize",
        "noshade",
        "novalidate",
        "nowrap",
        "open",
        "paused",
        "pubdate",
        "readonly",
        "required",
        "reversed",
        "scoped",
        "seamless",
        "seeking",
        "selected",
        "spellcheck",
        "truespeed",
        "willvalidate",
    }
)


def property_name_for(attribute: str) -> str:
    """DOM property name to read for a requested attribute name."""
    return PROPERTY_ALIASES.get(attribute.lower(), attribute)


class AttributeResolver(Generic[ElementT]):
    """
    Resolves an element's effective attribute value.

    Returns a string, or None when the attribute does not apply or a
    boolean attribute is false. The empty string is a real value and is
    never used to mean "absent".
    """

    def __init__(self, adapter: DomAdapter[ElementT]):
        self._adapter = adapter

    async def resolve(self, element: ElementT, attribute: str) -> str | None:
        """
        Get the value of the given property or attribute.

        Args:
            element: Element handle understood by the adapter
            attribute: Attribute name, matched case-insensitively

        Returns:
            The resolved string value, or None
        """
        adapter = self._adapter
        name = attribute.lower()

        if name == "style":
            css_text = await adapter.get_style_text(element)
            return css_text or None

        if name in ("selected", "checked") and await adapter.is_selectable(element):
            return "true" if await adapter.is_selected(element) else None

        if await self._is_url_attribute(element, name):
            raw = await adapter.get_attribute(element, name)
            if not raw:
                return raw
            # The property holds the browser-normalized absolute URL
            value = await adapter.get_property(element, name)
            return None if value.is_absent else value.to_js_string()

        if name == "spellcheck":
            raw = await adapter.get_attribute(element, name)
            if raw is not None:
                if raw.lower() == "false":
                    return "false"
                if raw.lower() == "true":
                    return "true"
            value = await adapter.get_property(element, name)
            return value.to_js_string()

        property_name = property_name_for(attribute)

        if name in BOOLEAN_ATTRIBUTES:
            if await adapter.get_attribute(element, attribute) is not None:
                return "true"
            value = await adapter.get_property(element, property_name)
            return "true" if value.is_truthy else None

        return await self._resolve_general(element, attribute, property_name)

    async def _is_url_attribute(self, element: ElementT, name: str) -> bool:
        if name == "href":
            return await self._adapter.is_element_of_tag(element, "a")
        if name == "src":
            return await self._adapter.is_element_of_tag(element, "img")
        return False

    async def _resolve_general(
        self,
        element: ElementT,
        attribute: str,
        property_name: str,
    ) -> str | None:
        try:
            value = await self._adapter.get_property(element, property_name)
        except BrowserError:
            raise
        except Exception as e:
            # Event handler properties fail to read in some browsers
            logger.debug(f"Property read for '{property_name}' failed: {e}")
            value = PropertyValue.undefined()

        # Structured values (e.g. a CSSStyleDeclaration) are useless as text
        if value.is_absent or value.is_structured:
            return await self._adapter.get_attribute(element, attribute)

        return value.to_js_string()
