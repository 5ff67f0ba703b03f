"""
Chrome Launcher - Start a local Chrome with remote debugging enabled.

Used by BrowserSession when no CDP URL is given.
"""

import asyncio
import logging
import platform
import shutil
import socket
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Final

import httpx

from webatoms.exceptions import BrowserError, ConfigurationError

if TYPE_CHECKING:
    from webatoms.browser.session import BrowserConfig

logger = logging.getLogger(__name__)

CHROME_CANDIDATES: Final[dict[str, tuple[str, ...]]] = {
    "Darwin": (
        "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
        "/Applications/Chromium.app/Contents/MacOS/Chromium",
    ),
    "Linux": ("google-chrome", "google-chrome-stable", "chromium", "chromium-browser"),
    "Windows": (
        r"C:\Program Files\Google\Chrome\Application\chrome.exe",
        r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
    ),
}

BASE_FLAGS: Final[tuple[str, ...]] = (
    "--no-first-run",
    "--no-default-browser-check",
    "--disable-extensions",
)


def find_chrome() -> str:
    """First installed Chrome/Chromium for this platform."""
    for candidate in CHROME_CANDIDATES.get(platform.system(), ()):
        if Path(candidate).exists() or shutil.which(candidate):
            return candidate
    raise BrowserError("Chrome not found. Install Chrome or set executable_path in config.")


async def fetch_websocket_url(client: httpx.AsyncClient, endpoint: str) -> str | None:
    """Browser WebSocket URL from a DevTools HTTP endpoint, or None if not up yet."""
    try:
        response = await client.get(f"{endpoint.rstrip('/')}/json/version", timeout=1.0)
    except httpx.HTTPError:
        return None
    if response.status_code != 200:
        return None
    return response.json().get("webSocketDebuggerUrl")


async def resolve_cdp_url(cdp_url: str) -> str:
    """
    Normalize a user supplied CDP address to a browser WebSocket URL.

    ``ws://`` and ``wss://`` URLs are used as given; ``http(s)://`` DevTools
    endpoints are asked for their WebSocket URL.
    """
    if cdp_url.startswith(("ws://", "wss://")):
        return cdp_url
    if not cdp_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"CDP URL must be ws(s):// or http(s)://, got {cdp_url!r}")

    async with httpx.AsyncClient() as client:
        ws_url = await fetch_websocket_url(client, cdp_url)
    if ws_url is None:
        raise BrowserError(f"No DevTools endpoint at {cdp_url}")
    return ws_url


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("", 0))
        return sock.getsockname()[1]


class ChromeLauncher:
    """Owns one Chrome process and knows how to reach its DevTools endpoint."""

    def __init__(self, config: "BrowserConfig"):
        self._config = config
        self._process: subprocess.Popen | None = None

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def command(self, port: int) -> list[str]:
        """Command line for a Chrome listening for CDP on ``port``."""
        config = self._config
        width, height = config.window_size
        executable = str(config.executable_path) if config.executable_path else find_chrome()

        command = [executable, f"--remote-debugging-port={port}", f"--window-size={width},{height}"]
        command.extend(BASE_FLAGS)
        if config.headless:
            command.append("--headless=new")
        if config.user_data_dir:
            command.append(f"--user-data-dir={config.user_data_dir}")
        command.extend(config.args)
        command.append("about:blank")
        return command

    async def launch(self) -> str:
        """Start Chrome and return its browser WebSocket URL."""
        port = free_port()
        command = self.command(port)
        logger.debug(f"Launching {command[0]} on port {port}")

        self._process = subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        return await self.websocket_url(port)

    async def websocket_url(self, port: int) -> str:
        """Poll ``/json/version`` until Chrome publishes its WebSocket URL."""
        endpoint = f"http://localhost:{port}"
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._config.cdp_timeout

        async with httpx.AsyncClient() as client:
            while loop.time() < deadline:
                ws_url = await fetch_websocket_url(client, endpoint)
                if ws_url:
                    return ws_url
                await asyncio.sleep(0.1)

        self.terminate()
        raise BrowserError(f"Chrome CDP not available after {self._config.cdp_timeout}s")

    def terminate(self) -> None:
        """Stop the Chrome process, killing it if it does not exit in time."""
        process, self._process = self._process, None
        if process is None:
            return
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            logger.warning("Chrome did not exit, killing it")
            process.kill()

