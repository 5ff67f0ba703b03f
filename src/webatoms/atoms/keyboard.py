"""
Keyboard Atoms - Key-sequence translation and typing.

Turns protocol-encoded key sequences into ordered keyboard batches and
drives a KeyboardExecutor with them, one batch at a time.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Generic

from webatoms.dom.adapter import ElementT
from webatoms.exceptions import UnsupportedKeyError
from webatoms.input.executor import KeyboardExecutor
from webatoms.keys import (
    CONTROL_ALIASES,
    KEY_CODE_MAP,
    RELEASE_MODIFIERS,
    KeyEntry,
    is_protocol_key,
)
from webatoms.logging import logger as atom_log

logger = logging.getLogger(__name__)


@dataclass
class KeyBatch:
    """Keys typed together, and whether modifiers stay held afterwards."""

    persist: bool
    keys: list[KeyEntry] = field(default_factory=list)


@dataclass(frozen=True)
class UnsupportedKey:
    """A reserved protocol code point with no keyboard mapping."""

    code_point: int

    def __str__(self) -> str:
        return f"\\u{self.code_point:04x}"

    def to_exception(self) -> UnsupportedKeyError:
        return UnsupportedKeyError(self.code_point)


@dataclass
class TranslationResult:
    """Outcome of a translation: the batches, or the key that stopped it."""

    batches: list[KeyBatch] = field(default_factory=list)
    error: UnsupportedKey | None = None

    @classmethod
    def ok(cls, batches: list[KeyBatch]) -> "TranslationResult":
        return cls(batches=batches)

    @classmethod
    def fail(cls, error: UnsupportedKey) -> "TranslationResult":
        return cls(error=error)

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[KeyBatch]:
        """Return the batches, raising UnsupportedKeyError on failure."""
        if self.error is not None:
            raise self.error.to_exception()
        return self.batches


class KeySequenceTranslator:
    """
    Segments key sequences into keyboard batches.

    The NULL protocol key cannot be typed; it ends the current batch so the
    executor releases every held modifier. When modifiers persist across
    batches, an extra non-persisting empty batch is injected after it so the
    release actually happens before the next persisting batch starts.
    """

    def translate(
        self,
        sequences: Iterable[str],
        persist_modifiers: bool = False,
    ) -> TranslationResult:
        """
        Translate key sequences into batches.

        Args:
            sequences: Strings of characters and protocol key codes
            persist_modifiers: Whether modifiers stay pressed after typing

        Returns:
            TranslationResult with the batches in execution order
        """
        current = KeyBatch(persist=persist_modifiers)
        batches = [current]

        for sequence in sequences:
            for char in sequence:
                if not is_protocol_key(char):
                    current.keys.append(CONTROL_ALIASES.get(char, char))
                    continue

                if char not in KEY_CODE_MAP:
                    return TranslationResult.fail(UnsupportedKey(ord(char)))

                key = KEY_CODE_MAP[char]
                if key is RELEASE_MODIFIERS:
                    current = KeyBatch(persist=persist_modifiers)
                    batches.append(current)
                    if persist_modifiers:
                        current.persist = False
                        current = KeyBatch(persist=persist_modifiers)
                        batches.append(current)
                else:
                    current.keys.append(key)

        return TranslationResult.ok(batches)


class TypeOrchestrator(Generic[ElementT]):
    """Types translated key sequences through a KeyboardExecutor."""

    def __init__(
        self,
        executor: KeyboardExecutor[ElementT],
        translator: KeySequenceTranslator | None = None,
    ):
        self._executor = executor
        self._translator = translator or KeySequenceTranslator()

    async def type(
        self,
        element: ElementT,
        sequences: Iterable[str],
        persist_modifiers: bool = False,
    ) -> None:
        """
        Type keys on the element.

        Batches run strictly in order. An executor failure stops typing;
        batches already dispatched are not undone.

        Raises:
            UnsupportedKeyError: A protocol key code has no mapping
        """
        batches = self._translator.translate(sequences, persist_modifiers).unwrap()
        logger.debug(f"Typing {len(batches)} batch(es) (persist={persist_modifiers})")

        for index, batch in enumerate(batches):
            atom_log.batch(index, batch)
            await self._executor.execute(element, batch.keys, batch.persist)
