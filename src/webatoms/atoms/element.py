"""
Element Atoms - The element operations exposed to automation clients.

Combines attribute resolution, typing and the adapter's geometry and text
reads behind one object.
"""

import logging
from collections.abc import Iterable
from typing import Generic

from webatoms.atoms.attributes import AttributeResolver
from webatoms.atoms.keyboard import KeySequenceTranslator, TypeOrchestrator
from webatoms.dom.adapter import Coordinate, DomAdapter, ElementT, Rect
from webatoms.input.executor import KeyboardExecutor
from webatoms.logging import logger as atom_log

logger = logging.getLogger(__name__)


class ElementAtoms(Generic[ElementT]):
    """
    Element operations over a DomAdapter and a KeyboardExecutor.

    Usage:
        atoms = ElementAtoms(CDPDomAdapter(session), CDPKeyboard(session))
        href = await atoms.resolve_attribute(node_id, "href")
        await atoms.type(node_id, ["hello", ProtocolKey.ENTER])
    """

    def __init__(
        self,
        adapter: DomAdapter[ElementT],
        executor: KeyboardExecutor[ElementT],
        translator: KeySequenceTranslator | None = None,
    ):
        self._adapter = adapter
        self._resolver = AttributeResolver(adapter)
        self._typist = TypeOrchestrator(executor, translator)

    async def resolve_attribute(self, element: ElementT, name: str) -> str | None:
        """Resolved value of an attribute or property, or None."""
        value = await self._resolver.resolve(element, name)
        atom_log.attribute(name, value, element)
        return value

    async def type(
        self,
        element: ElementT,
        sequences: Iterable[str],
        persist_modifiers: bool = False,
    ) -> None:
        """Type protocol-encoded key sequences on the element."""
        await self._typist.type(element, sequences, persist_modifiers)

    async def is_selected(self, element: ElementT) -> bool:
        """Whether the element is checked or selected."""
        if not await self._adapter.is_selectable(element):
            return False
        return await self._adapter.is_selected(element)

    async def get_location(self, element: ElementT) -> Rect | None:
        """Bounding rectangle in page space, if the element is displayed."""
        if not await self._adapter.is_shown(element):
            logger.debug(f"Element {element!r} not shown, no location")
            return None
        return await self._adapter.get_bounds(element)

    async def get_location_in_view(
        self,
        element: ElementT,
        region: Rect | None = None,
    ) -> Coordinate:
        """
        Scroll the element into view and return its client position.

        If the element or region is too large to fit in the view it is
        aligned to the top-left of the container.

        Args:
            element: Element attached to the current document
            region: Region relative to the element to scroll into view

        Returns:
            Top-left coordinate of the element (or region) in client space
        """
        await self._adapter.scroll_into_view(element, region)
        client_region = await self._adapter.get_client_region(element, region)
        return Coordinate(x=client_region.left, y=client_region.top)

    async def get_visible_text(self, element: ElementT, composed: bool = False) -> str:
        """Visible text, optionally following the composed (shadow) DOM."""
        return await self._adapter.get_visible_text(element, composed)
