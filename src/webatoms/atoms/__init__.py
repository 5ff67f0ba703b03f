"""
WebAtoms Atoms Module.

Attribute resolution, key-sequence translation and element operations.
"""

from webatoms.atoms.attributes import BOOLEAN_ATTRIBUTES, PROPERTY_ALIASES, AttributeResolver
from webatoms.atoms.element import ElementAtoms
from webatoms.atoms.keyboard import (
    KeyBatch,
    KeySequenceTranslator,
    TranslationResult,
    TypeOrchestrator,
    UnsupportedKey,
)

__all__ = [
    "AttributeResolver",
    "PROPERTY_ALIASES",
    "BOOLEAN_ATTRIBUTES",
    "ElementAtoms",
    "KeyBatch",
    "KeySequenceTranslator",
    "TranslationResult",
    "TypeOrchestrator",
    "UnsupportedKey",
]
