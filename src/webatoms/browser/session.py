"""
Browser Session - One CDP connection attached to one page.

Wraps a cdp-use CDPClient and exposes the page operations the atoms and
the CLI need: navigation, evaluation and element lookup by backend node id.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr

from webatoms.browser.launcher import ChromeLauncher, resolve_cdp_url
from webatoms.config import (
    DEFAULT_BROWSER_HEIGHT,
    DEFAULT_BROWSER_WIDTH,
    DEFAULT_CDP_TIMEOUT,
    DEFAULT_NAVIGATION_TIMEOUT,
)
from webatoms.exceptions import BrowserError, DOMError

logger = logging.getLogger(__name__)

_PAGE_DOMAINS = ("Page", "DOM", "Runtime")


class BrowserConfig(BaseModel):
    """Configuration for browser session."""

    headless: bool = True
    executable_path: str | Path | None = None
    user_data_dir: str | Path | None = None
    window_size: tuple[int, int] = (DEFAULT_BROWSER_WIDTH, DEFAULT_BROWSER_HEIGHT)
    args: list[str] = Field(default_factory=list)

    navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT
    cdp_timeout: float = DEFAULT_CDP_TIMEOUT


class BrowserSession(BaseModel):
    """
    CDP session on a single page target.

    Usage:
        async with BrowserSession() as session:
            await session.navigate("https://example.com")
            node_id = await session.query_selector("a")
    """

    model_config = {"arbitrary_types_allowed": True}

    config: BrowserConfig = Field(default_factory=BrowserConfig)

    _client: Any = PrivateAttr(default=None)
    _launcher: Any = PrivateAttr(default=None)
    _session_id: str | None = PrivateAttr(default=None)

    @property
    def is_connected(self) -> bool:
        return self._client is not None and self._session_id is not None

    @property
    def cdp_client(self) -> Any:
        if self._client is None:
            raise BrowserError("Browser session not started. Call start() first.")
        return self._client

    @property
    def session_id(self) -> str:
        if self._session_id is None:
            raise BrowserError("Browser session is not attached to a page.")
        return self._session_id

    async def start(self, cdp_url: str | None = None) -> None:
        """
        Connect to Chrome and attach to a page.

        Args:
            cdp_url: Browser WebSocket URL or DevTools HTTP endpoint.
                Chrome is launched when omitted.
        """
        from cdp_use import CDPClient

        if self.is_connected:
            logger.warning("Browser session already started")
            return

        try:
            if cdp_url is None:
                self._launcher = ChromeLauncher(self.config)
                cdp_url = await self._launcher.launch()
            else:
                cdp_url = await resolve_cdp_url(cdp_url)

            logger.info(f"Connecting to {cdp_url}")
            self._client = CDPClient(cdp_url)
            await self._client.start()
            await self.attach()
        except BaseException:
            # __aexit__ never runs when start fails
            await self.stop()
            raise

    async def attach(self) -> str:
        """Attach to the first page target, creating one if there is none."""
        client = self.cdp_client
        targets = await client.send.Target.getTargets()
        pages = [t["targetId"] for t in targets.get("targetInfos", []) if t.get("type") == "page"]
        if pages:
            target_id = pages[0]
        else:
            target_id = (await client.send.Target.createTarget({"url": "about:blank"}))["targetId"]

        attached = await client.send.Target.attachToTarget({"targetId": target_id, "flatten": True})
        self._session_id = attached.get("sessionId")
        if not self._session_id:
            raise BrowserError(f"Could not attach to target {target_id}")

        await asyncio.gather(
            *(getattr(client.send, domain).enable(session_id=self._session_id) for domain in _PAGE_DOMAINS)
        )
        logger.info(f"Attached to page {target_id[:8]}")
        return self._session_id

    async def stop(self) -> None:
        """Close the connection and any Chrome we launched."""
        client, self._client = self._client, None
        launcher, self._launcher = self._launcher, None
        self._session_id = None

        if client is not None:
            try:
                await client.stop()
            except Exception as e:
                logger.warning(f"Error stopping CDP client: {e}")
        if launcher is not None:
            launcher.terminate()
        logger.info("Browser session stopped")

    async def navigate(self, url: str) -> bool:
        """Navigate and wait for ``document.readyState`` to be complete."""
        logger.debug(f"Navigating to {url}")
        await self.cdp_client.send.Page.navigate({"url": url}, session_id=self.session_id)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.navigation_timeout
        while loop.time() < deadline:
            if await self.execute_js("document.readyState") == "complete":
                return True
            await asyncio.sleep(0.1)

        logger.warning(f"{url} still loading after {self.config.navigation_timeout}s")
        return False

    async def execute_js(self, expression: str) -> Any:
        """Evaluate an expression in the page and return its value."""
        response = await self.cdp_client.send.Runtime.evaluate(
            {"expression": expression, "returnByValue": True, "awaitPromise": True},
            session_id=self.session_id,
        )
        if "exceptionDetails" in response:
            details = response["exceptionDetails"]
            raise DOMError(f"JS error: {details.get('text', details)}")
        return response.get("result", {}).get("value")

    async def query_selector(self, selector: str) -> int:
        """
        Find the first element matching a CSS selector.

        Returns:
            The element's backend node id

        Raises:
            DOMError: Nothing matches the selector
        """
        client = self.cdp_client
        document = await client.send.DOM.getDocument({"depth": 0}, session_id=self.session_id)
        found = await client.send.DOM.querySelector(
            {"nodeId": document["root"]["nodeId"], "selector": selector},
            session_id=self.session_id,
        )
        if not found.get("nodeId"):
            raise DOMError(f"No element matches selector {selector!r}")

        described = await client.send.DOM.describeNode({"nodeId": found["nodeId"]}, session_id=self.session_id)
        return described["node"]["backendNodeId"]

    async def resolve_node(self, backend_node_id: int) -> str:
        """Runtime object id for a backend node id."""
        resolved = await self.cdp_client.send.DOM.resolveNode(
            {"backendNodeId": backend_node_id},
            session_id=self.session_id,
        )
        object_id = resolved.get("object", {}).get("objectId")
        if not object_id:
            raise DOMError(f"Could not resolve element {backend_node_id}")
        return object_id

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
