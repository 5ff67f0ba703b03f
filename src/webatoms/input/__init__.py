"""
WebAtoms Input Module.

Provides the keyboard executor interface and its CDP implementation.
"""

from webatoms.input.cdp import CDPKeyboard
from webatoms.input.executor import KeyboardExecutor

__all__ = [
    "KeyboardExecutor",
    "CDPKeyboard",
]
