"""
WebAtoms DOM Module.

Provides the DOM adapter interface and its CDP implementation.
"""

from webatoms.dom.adapter import Coordinate, DomAdapter, PropertyValue, Rect
from webatoms.dom.cdp import CDPDomAdapter

__all__ = [
    "DomAdapter",
    "CDPDomAdapter",
    "PropertyValue",
    "Rect",
    "Coordinate",
]
