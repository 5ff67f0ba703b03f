"""
Keys - Wire-protocol key codes and their logical keyboard keys.

Key sequences arrive as plain strings in which non-printable keys are
encoded as private-use code points (U+E000 through U+E03D). This module
holds the fixed tables used to turn those code points into logical keys.
"""

from enum import Enum
from types import MappingProxyType
from typing import Final

from webatoms.config import PROTOCOL_KEY_MAX, PROTOCOL_KEY_MIN


class ProtocolKey:
    """Private-use code points of the WebDriver wire protocol."""

    NULL = "\uE000"
    CANCEL = "\uE001"
    HELP = "\uE002"
    BACK_SPACE = "\uE003"
    TAB = "\uE004"
    CLEAR = "\uE005"
    RETURN = "\uE006"
    ENTER = "\uE007"
    SHIFT = "\uE008"
    CONTROL = "\uE009"
    ALT = "\uE00A"
    PAUSE = "\uE00B"
    ESCAPE = "\uE00C"
    SPACE = "\uE00D"
    PAGE_UP = "\uE00E"
    PAGE_DOWN = "\uE00F"
    END = "\uE010"
    HOME = "\uE011"
    LEFT = "\uE012"
    UP = "\uE013"
    RIGHT = "\uE014"
    DOWN = "\uE015"
    INSERT = "\uE016"
    DELETE = "\uE017"
    SEMICOLON = "\uE018"
    EQUALS = "\uE019"

    NUMPAD0 = "\uE01A"
    NUMPAD1 = "\uE01B"
    NUMPAD2 = "\uE01C"
    NUMPAD3 = "\uE01D"
    NUMPAD4 = "\uE01E"
    NUMPAD5 = "\uE01F"
    NUMPAD6 = "\uE020"
    NUMPAD7 = "\uE021"
    NUMPAD8 = "\uE022"
    NUMPAD9 = "\uE023"
    MULTIPLY = "\uE024"
    ADD = "\uE025"
    SEPARATOR = "\uE026"
    SUBTRACT = "\uE027"
    DECIMAL = "\uE028"
    DIVIDE = "\uE029"

    F1 = "\uE031"
    F2 = "\uE032"
    F3 = "\uE033"
    F4 = "\uE034"
    F5 = "\uE035"
    F6 = "\uE036"
    F7 = "\uE037"
    F8 = "\uE038"
    F9 = "\uE039"
    F10 = "\uE03A"
    F11 = "\uE03B"
    F12 = "\uE03C"
    META = "\uE03D"


class LogicalKey(Enum):
    """Symbolic keyboard keys, independent of any character encoding."""

    BACKSPACE = "BACKSPACE"
    TAB = "TAB"
    ENTER = "ENTER"
    SHIFT = "SHIFT"
    CONTROL = "CONTROL"
    ALT = "ALT"
    META = "META"
    PAUSE = "PAUSE"
    ESC = "ESC"
    SPACE = "SPACE"
    PAGE_UP = "PAGE_UP"
    PAGE_DOWN = "PAGE_DOWN"
    END = "END"
    HOME = "HOME"
    LEFT = "LEFT"
    UP = "UP"
    RIGHT = "RIGHT"
    DOWN = "DOWN"
    INSERT = "INSERT"
    DELETE = "DELETE"
    SEMICOLON = "SEMICOLON"
    EQUALS = "EQUALS"

    NUM_ZERO = "NUM_ZERO"
    NUM_ONE = "NUM_ONE"
    NUM_TWO = "NUM_TWO"
    NUM_THREE = "NUM_THREE"
    NUM_FOUR = "NUM_FOUR"
    NUM_FIVE = "NUM_FIVE"
    NUM_SIX = "NUM_SIX"
    NUM_SEVEN = "NUM_SEVEN"
    NUM_EIGHT = "NUM_EIGHT"
    NUM_NINE = "NUM_NINE"
    NUM_MULTIPLY = "NUM_MULTIPLY"
    NUM_PLUS = "NUM_PLUS"
    NUM_MINUS = "NUM_MINUS"
    NUM_PERIOD = "NUM_PERIOD"
    NUM_DIVISION = "NUM_DIVISION"
    SEPARATOR = "SEPARATOR"

    F1 = "F1"
    F2 = "F2"
    F3 = "F3"
    F4 = "F4"
    F5 = "F5"
    F6 = "F6"
    F7 = "F7"
    F8 = "F8"
    F9 = "F9"
    F10 = "F10"
    F11 = "F11"
    F12 = "F12"

    @property
    def is_modifier(self) -> bool:
        return self in MODIFIER_KEYS


# A batch entry: a symbolic key or a single literal character
KeyEntry = LogicalKey | str

# Mapped value of ProtocolKey.NULL: release every held modifier
RELEASE_MODIFIERS: Final = None

MODIFIER_KEYS: Final = frozenset(
    {LogicalKey.SHIFT, LogicalKey.CONTROL, LogicalKey.ALT, LogicalKey.META}
)

KEY_CODE_MAP: Final = MappingProxyType(
    {
        ProtocolKey.NULL: RELEASE_MODIFIERS,
        ProtocolKey.BACK_SPACE: LogicalKey.BACKSPACE,
        ProtocolKey.TAB: LogicalKey.TAB,
        ProtocolKey.RETURN: LogicalKey.ENTER,
        # Not strictly the same key, but browsers treat them alike
        ProtocolKey.ENTER: LogicalKey.ENTER,
        ProtocolKey.SHIFT: LogicalKey.SHIFT,
        ProtocolKey.CONTROL: LogicalKey.CONTROL,
        ProtocolKey.ALT: LogicalKey.ALT,
        ProtocolKey.PAUSE: LogicalKey.PAUSE,
        ProtocolKey.ESCAPE: LogicalKey.ESC,
        ProtocolKey.SPACE: LogicalKey.SPACE,
        ProtocolKey.PAGE_UP: LogicalKey.PAGE_UP,
        ProtocolKey.PAGE_DOWN: LogicalKey.PAGE_DOWN,
        ProtocolKey.END: LogicalKey.END,
        ProtocolKey.HOME: LogicalKey.HOME,
        ProtocolKey.LEFT: LogicalKey.LEFT,
        ProtocolKey.UP: LogicalKey.UP,
        ProtocolKey.RIGHT: LogicalKey.RIGHT,
        ProtocolKey.DOWN: LogicalKey.DOWN,
        ProtocolKey.INSERT: LogicalKey.INSERT,
        ProtocolKey.DELETE: LogicalKey.DELETE,
        ProtocolKey.SEMICOLON: LogicalKey.SEMICOLON,
        ProtocolKey.EQUALS: LogicalKey.EQUALS,
        ProtocolKey.NUMPAD0: LogicalKey.NUM_ZERO,
        ProtocolKey.NUMPAD1: LogicalKey.NUM_ONE,
        ProtocolKey.NUMPAD2: LogicalKey.NUM_TWO,
        ProtocolKey.NUMPAD3: LogicalKey.NUM_THREE,
        ProtocolKey.NUMPAD4: LogicalKey.NUM_FOUR,
        ProtocolKey.NUMPAD5: LogicalKey.NUM_FIVE,
        ProtocolKey.NUMPAD6: LogicalKey.NUM_SIX,
        ProtocolKey.NUMPAD7: LogicalKey.NUM_SEVEN,
        ProtocolKey.NUMPAD8: LogicalKey.NUM_EIGHT,
        ProtocolKey.NUMPAD9: LogicalKey.NUM_NINE,
        ProtocolKey.MULTIPLY: LogicalKey.NUM_MULTIPLY,
        ProtocolKey.ADD: LogicalKey.NUM_PLUS,
        ProtocolKey.SUBTRACT: LogicalKey.NUM_MINUS,
        ProtocolKey.DECIMAL: LogicalKey.NUM_PERIOD,
        ProtocolKey.DIVIDE: LogicalKey.NUM_DIVISION,
        ProtocolKey.SEPARATOR: LogicalKey.SEPARATOR,
        ProtocolKey.F1: LogicalKey.F1,
        ProtocolKey.F2: LogicalKey.F2,
        ProtocolKey.F3: LogicalKey.F3,
        ProtocolKey.F4: LogicalKey.F4,
        ProtocolKey.F5: LogicalKey.F5,
        ProtocolKey.F6: LogicalKey.F6,
        ProtocolKey.F7: LogicalKey.F7,
        ProtocolKey.F8: LogicalKey.F8,
        ProtocolKey.F9: LogicalKey.F9,
        ProtocolKey.F10: LogicalKey.F10,
        ProtocolKey.F11: LogicalKey.F11,
        ProtocolKey.F12: LogicalKey.F12,
        ProtocolKey.META: LogicalKey.META,
    }
)

# Plain characters typed with a symbolic key instead of literally
CONTROL_ALIASES: Final = MappingProxyType(
    {
        "\n": LogicalKey.ENTER,
        "\t": LogicalKey.TAB,
        "\b": LogicalKey.BACKSPACE,
    }
)


def is_protocol_key(char: str) -> bool:
    """Check whether a character falls in the reserved protocol key range."""
    return PROTOCOL_KEY_MIN <= char <= PROTOCOL_KEY_MAX
