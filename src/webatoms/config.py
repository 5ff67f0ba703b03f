"""
WebAtoms Configuration.

Centralizes default values and protocol constants.
"""

from typing import Literal

# Wire-protocol key codes live in this private-use range (inclusive)
PROTOCOL_KEY_MIN = "\uE000"
PROTOCOL_KEY_MAX = "\uE03D"

# Browser Configuration
DEFAULT_BROWSER_WIDTH = 1280
DEFAULT_BROWSER_HEIGHT = 800
DEFAULT_NAVIGATION_TIMEOUT = 30.0
DEFAULT_CDP_TIMEOUT = 30.0

# Keyboard dispatch
KEY_EVENT_DELAY = 0.001

# CDP Input.dispatchKeyEvent modifier bits
MODIFIER_ALT = 1
MODIFIER_CONTROL = 2
MODIFIER_META = 4
MODIFIER_SHIFT = 8

# Environment
CDP_URL_ENV = "WEBATOMS_CDP_URL"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
