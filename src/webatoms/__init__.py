"""
WebAtoms - Element atoms for browser automation clients.

Resolves an element's effective attribute value across browser quirks and
types protocol-encoded key sequences, over the Chrome DevTools Protocol.

Usage:
    from webatoms import BrowserSession, CDPDomAdapter, CDPKeyboard, ElementAtoms, ProtocolKey

    async with BrowserSession() as session:
        await session.navigate("https://example.com")
        node_id = await session.query_selector("input[name=q]")

        atoms = ElementAtoms(CDPDomAdapter(session), CDPKeyboard(session))
        await atoms.type(node_id, ["hello", ProtocolKey.ENTER])
        value = await atoms.resolve_attribute(node_id, "value")
"""

__version__ = "0.1.0"

from webatoms.atoms import (
    AttributeResolver,
    ElementAtoms,
    KeyBatch,
    KeySequenceTranslator,
    TranslationResult,
    TypeOrchestrator,
)
from webatoms.browser import BrowserConfig, BrowserSession
from webatoms.dom import CDPDomAdapter, Coordinate, DomAdapter, PropertyValue, Rect
from webatoms.input import CDPKeyboard, KeyboardExecutor
from webatoms.keys import KEY_CODE_MAP, LogicalKey, ProtocolKey
from webatoms.logging import logger, setup_logging

__all__ = [
    "__version__",
    "ElementAtoms",
    "AttributeResolver",
    "KeySequenceTranslator",
    "TypeOrchestrator",
    "TranslationResult",
    "KeyBatch",
    "DomAdapter",
    "KeyboardExecutor",
    "CDPDomAdapter",
    "CDPKeyboard",
    "BrowserSession",
    "BrowserConfig",
    "PropertyValue",
    "Rect",
    "Coordinate",
    "ProtocolKey",
    "LogicalKey",
    "KEY_CODE_MAP",
    "setup_logging",
    "logger",
]
