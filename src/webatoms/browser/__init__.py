"""
WebAtoms Browser Module.

Provides browser session management over CDP.
"""

from webatoms.browser.launcher import ChromeLauncher
from webatoms.browser.session import BrowserConfig, BrowserSession

__all__ = [
    "BrowserConfig",
    "BrowserSession",
    "ChromeLauncher",
]
