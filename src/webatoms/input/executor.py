"""
Keyboard Executor - Abstract interface for dispatching key batches.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Generic

from webatoms.dom.adapter import ElementT
from webatoms.keys import KeyEntry


class KeyboardExecutor(ABC, Generic[ElementT]):
    """Performs the low-level key events for one batch of keys."""

    @abstractmethod
    async def execute(
        self,
        element: ElementT,
        keys: Sequence[KeyEntry],
        persist: bool,
    ) -> None:
        """
        Type keys on the element.

        Args:
            element: Element to type upon
            keys: Logical keys and literal characters, in order
            persist: Keep modifier keys pressed after the batch
        """
        pass
