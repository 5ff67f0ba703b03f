"""
CDP Keyboard - KeyboardExecutor over Input.dispatchKeyEvent.

Holds the modifier state between batches so persisted modifiers stay down
until a non-persisting batch ends.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from webatoms.config import (
    KEY_EVENT_DELAY,
    MODIFIER_ALT,
    MODIFIER_CONTROL,
    MODIFIER_META,
    MODIFIER_SHIFT,
)
from webatoms.exceptions import KeyboardError, WebAtomsError
from webatoms.input.executor import KeyboardExecutor
from webatoms.keys import KeyEntry, LogicalKey
from webatoms.logging import logger as atom_log

if TYPE_CHECKING:
    from webatoms.browser.session import BrowserSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyDefinition:
    """DOM key value, physical code, Windows virtual key code and typed text."""

    key: str
    code: str
    key_code: int
    text: str | None = None


KEY_DEFINITIONS: Final[dict[LogicalKey, KeyDefinition]] = {
    LogicalKey.BACKSPACE: KeyDefinition("Backspace", "Backspace", 8),
    LogicalKey.TAB: KeyDefinition("Tab", "Tab", 9),
    LogicalKey.ENTER: KeyDefinition("Enter", "Enter", 13, "\r"),
    LogicalKey.SHIFT: KeyDefinition("Shift", "ShiftLeft", 16),
    LogicalKey.CONTROL: KeyDefinition("Control", "ControlLeft", 17),
    LogicalKey.ALT: KeyDefinition("Alt", "AltLeft", 18),
    LogicalKey.META: KeyDefinition("Meta", "MetaLeft", 91),
    LogicalKey.PAUSE: KeyDefinition("Pause", "Pause", 19),
    LogicalKey.ESC: KeyDefinition("Escape", "Escape", 27),
    LogicalKey.SPACE: KeyDefinition(" ", "Space", 32, " "),
    LogicalKey.PAGE_UP: KeyDefinition("PageUp", "PageUp", 33),
    LogicalKey.PAGE_DOWN: KeyDefinition("PageDown", "PageDown", 34),
    LogicalKey.END: KeyDefinition("End", "End", 35),
    LogicalKey.HOME: KeyDefinition("Home", "Home", 36),
    LogicalKey.LEFT: KeyDefinition("ArrowLeft", "ArrowLeft", 37),
    LogicalKey.UP: KeyDefinition("ArrowUp", "ArrowUp", 38),
    LogicalKey.RIGHT: KeyDefinition("ArrowRight", "ArrowRight", 39),
    LogicalKey.DOWN: KeyDefinition("ArrowDown", "ArrowDown", 40),
    LogicalKey.INSERT: KeyDefinition("Insert", "Insert", 45),
    LogicalKey.DELETE: KeyDefinition("Delete", "Delete", 46),
    LogicalKey.SEMICOLON: KeyDefinition(";", "Semicolon", 186, ";"),
    LogicalKey.EQUALS: KeyDefinition("=", "Equal", 187, "="),
    LogicalKey.NUM_ZERO: KeyDefinition("0", "Numpad0", 96, "0"),
    LogicalKey.NUM_ONE: KeyDefinition("1", "Numpad1", 97, "1"),
    LogicalKey.NUM_TWO: KeyDefinition("2", "Numpad2", 98, "2"),
    LogicalKey.NUM_THREE: KeyDefinition("3", "Numpad3", 99, "3"),
    LogicalKey.NUM_FOUR: KeyDefinition("4", "Numpad4", 100, "4"),
    LogicalKey.NUM_FIVE: KeyDefinition("5", "Numpad5", 101, "5"),
    LogicalKey.NUM_SIX: KeyDefinition("6", "Numpad6", 102, "6"),
    LogicalKey.NUM_SEVEN: KeyDefinition("7", "Numpad7", 103, "7"),
    LogicalKey.NUM_EIGHT: KeyDefinition("8", "Numpad8", 104, "8"),
    LogicalKey.NUM_NINE: KeyDefinition("9", "Numpad9", 105, "9"),
    LogicalKey.NUM_MULTIPLY: KeyDefinition("*", "NumpadMultiply", 106, "*"),
    LogicalKey.NUM_PLUS: KeyDefinition("+", "NumpadAdd", 107, "+"),
    LogicalKey.SEPARATOR: KeyDefinition(",", "NumpadComma", 108, ","),
    LogicalKey.NUM_MINUS: KeyDefinition("-", "NumpadSubtract", 109, "-"),
    LogicalKey.NUM_PERIOD: KeyDefinition(".", "NumpadDecimal", 110, "."),
    LogicalKey.NUM_DIVISION: KeyDefinition("/", "NumpadDivide", 111, "/"),
    **{
        getattr(LogicalKey, f"F{n}"): KeyDefinition(f"F{n}", f"F{n}", 111 + n)
        for n in range(1, 13)
    },
}

MODIFIER_BITS: Final[dict[LogicalKey, int]] = {
    LogicalKey.ALT: MODIFIER_ALT,
    LogicalKey.CONTROL: MODIFIER_CONTROL,
    LogicalKey.META: MODIFIER_META,
    LogicalKey.SHIFT: MODIFIER_SHIFT,
}

# US layout punctuation: char -> (code, key_code, needs shift)
_PUNCTUATION: Final[dict[str, tuple[str, int, bool]]] = {
    " ": ("Space", 32, False),
    "-": ("Minus", 189, False),
    "=": ("Equal", 187, False),
    "[": ("BracketLeft", 219, False),
    "]": ("BracketRight", 221, False),
    "\\": ("Backslash", 220, False),
    ";": ("Semicolon", 186, False),
    "'": ("Quote", 222, False),
    ",": ("Comma", 188, False),
    ".": ("Period", 190, False),
    "/": ("Slash", 191, False),
    "`": ("Backquote", 192, False),
    "_": ("Minus", 189, True),
    "+": ("Equal", 187, True),
    "{": ("BracketLeft", 219, True),
    "}": ("BracketRight", 221, True),
    "|": ("Backslash", 220, True),
    ":": ("Semicolon", 186, True),
    '"': ("Quote", 222, True),
    "<": ("Comma", 188, True),
    ">": ("Period", 190, True),
    "?": ("Slash", 191, True),
    "~": ("Backquote", 192, True),
    "!": ("Digit1", 49, True),
    "@": ("Digit2", 50, True),
    "#": ("Digit3", 51, True),
    "$": ("Digit4", 52, True),
    "%": ("Digit5", 53, True),
    "^": ("Digit6", 54, True),
    "&": ("Digit7", 55, True),
    "*": ("Digit8", 56, True),
    "(": ("Digit9", 57, True),
    ")": ("Digit0", 48, True),
}


def char_key_info(char: str) -> tuple[str, int, bool]:
    """Physical code, virtual key code and implied Shift for a character."""
    if char.isascii() and char.isalpha():
        return f"Key{char.upper()}", ord(char.upper()), char.isupper()
    if char.isascii() and char.isdigit():
        return f"Digit{char}", ord(char), False
    if char in _PUNCTUATION:
        return _PUNCTUATION[char]
    # Outside the US layout: no physical key, text only
    return "", 0, False


class CDPKeyboard(KeyboardExecutor[int]):
    """
    Types key batches into an element via CDP key events.

    Modifier keys in a batch toggle: the first occurrence presses the key,
    the next releases it. Held modifiers are released when a batch that
    does not persist ends.
    """

    def __init__(self, session: "BrowserSession"):
        self._session = session
        self._pressed: list[LogicalKey] = []

    @property
    def modifiers(self) -> int:
        """CDP modifier bitmask for the currently held modifiers."""
        flags = 0
        for key in self._pressed:
            flags |= MODIFIER_BITS[key]
        return flags

    @property
    def pressed(self) -> tuple[LogicalKey, ...]:
        return tuple(self._pressed)

    async def execute(self, element: int, keys: Sequence[KeyEntry], persist: bool) -> None:
        await self._focus(element)

        for key in keys:
            if isinstance(key, LogicalKey):
                if key.is_modifier:
                    await self._toggle_modifier(key)
                else:
                    await self._press_special(KEY_DEFINITIONS[key])
            else:
                await self._press_char(key)

        if not persist:
            await self.release_all()

    async def release_all(self) -> None:
        """Release every held modifier, most recent first."""
        while self._pressed:
            key = self._pressed.pop()
            definition = KEY_DEFINITIONS[key]
            await self._dispatch("keyUp", definition.key, definition.code, definition.key_code)

    async def _focus(self, element: int) -> None:
        try:
            await self._session.cdp_client.send.DOM.focus(
                {"backendNodeId": element},
                session_id=self._session.session_id,
            )
        except WebAtomsError:
            raise
        except Exception as e:
            raise KeyboardError(f"Could not focus element {element}: {e}") from e

    async def _toggle_modifier(self, key: LogicalKey) -> None:
        definition = KEY_DEFINITIONS[key]
        if key in self._pressed:
            self._pressed.remove(key)
            await self._dispatch("keyUp", definition.key, definition.code, definition.key_code)
        else:
            self._pressed.append(key)
            await self._dispatch("keyDown", definition.key, definition.code, definition.key_code)

    async def _press_special(self, definition: KeyDefinition) -> None:
        await self._dispatch("keyDown", definition.key, definition.code, definition.key_code)
        if definition.text and not self._has_command_modifier(self.modifiers):
            await self._dispatch_char(definition.text, definition.key, self.modifiers)
        await self._dispatch("keyUp", definition.key, definition.code, definition.key_code)

    async def _press_char(self, char: str) -> None:
        code, key_code, needs_shift = char_key_info(char)
        modifiers = self.modifiers | (MODIFIER_SHIFT if needs_shift else 0)

        await self._dispatch("keyDown", char, code, key_code, modifiers)
        await asyncio.sleep(KEY_EVENT_DELAY)
        # With Control/Alt/Meta held the key is a shortcut, not text
        if not self._has_command_modifier(modifiers):
            await self._dispatch_char(char, char, modifiers)
        await self._dispatch("keyUp", char, code, key_code, modifiers)

    @staticmethod
    def _has_command_modifier(modifiers: int) -> bool:
        return bool(modifiers & (MODIFIER_ALT | MODIFIER_CONTROL | MODIFIER_META))

    async def _dispatch(
        self,
        event_type: str,
        key: str,
        code: str,
        key_code: int,
        modifiers: int | None = None,
    ) -> None:
        await self._send(
            {
                "type": event_type,
                "key": key,
                "code": code,
                "windowsVirtualKeyCode": key_code,
                "modifiers": self.modifiers if modifiers is None else modifiers,
            }
        )

    async def _dispatch_char(self, text: str, key: str, modifiers: int) -> None:
        await self._send({"type": "char", "text": text, "key": key, "modifiers": modifiers})

    async def _send(self, params: dict[str, Any]) -> None:
        atom_log.cdp("Input.dispatchKeyEvent", params)
        try:
            await self._session.cdp_client.send.Input.dispatchKeyEvent(
                params,
                session_id=self._session.session_id,
            )
        except WebAtomsError:
            raise
        except Exception as e:
            raise KeyboardError(f"Key event {params['type']} for {params['key']!r} failed: {e}") from e
