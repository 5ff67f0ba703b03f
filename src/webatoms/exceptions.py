"""
WebAtoms Exceptions.

Centralized exception hierarchy for the application.
"""


class WebAtomsError(Exception):
    """Base exception for all WebAtoms errors."""
    pass


class ConfigurationError(WebAtomsError):
    """Raised when configuration is invalid or missing."""
    pass


class BrowserError(WebAtomsError):
    """Raised when the browser session cannot be started or used."""
    pass


class DOMError(WebAtomsError):
    """Raised when DOM operations fail."""
    pass


class KeyboardError(WebAtomsError):
    """Raised when keyboard events cannot be dispatched."""
    pass


class UnsupportedKeyError(WebAtomsError):
    """Raised when a protocol key code has no keyboard counterpart."""

    def __init__(self, code_point: int):
        self.code_point = code_point
        super().__init__(f"Unsupported WebDriver key: \\u{code_point:04x}")
