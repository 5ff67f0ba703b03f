"""Tests for BrowserSession and ChromeLauncher against a fake CDP client."""

import cdp_use
import pytest

from webatoms.browser import launcher as launcher_module
from webatoms.browser import session as session_module
from webatoms.browser.launcher import ChromeLauncher, find_chrome, resolve_cdp_url
from webatoms.browser.session import BrowserConfig, BrowserSession
from webatoms.exceptions import BrowserError, ConfigurationError, DOMError


def _connected(client) -> BrowserSession:
    session = BrowserSession()
    session._client = client
    session._session_id = "session-1"
    return session


# ── Lifecycle ────────────────────────────────────────────────────────────────


class TestLifecycle:
    def test_not_started(self):
        session = BrowserSession()
        assert session.is_connected is False
        with pytest.raises(BrowserError):
            session.cdp_client
        with pytest.raises(BrowserError):
            session.session_id

    @pytest.mark.asyncio
    async def test_attach_uses_existing_page(self, make_cdp_client):
        client = make_cdp_client()
        client.handlers["Target.getTargets"] = {
            "targetInfos": [
                {"type": "service_worker", "targetId": "sw-1"},
                {"type": "page", "targetId": "page-12345678"},
            ]
        }
        client.handlers["Target.attachToTarget"] = {"sessionId": "s-42"}
        session = BrowserSession()
        session._client = client

        assert await session.attach() == "s-42"
        assert client.commands("Target.attachToTarget") == [{"targetId": "page-12345678", "flatten": True}]
        assert client.commands("Target.createTarget") == []
        assert {name for name, _ in client.sent} >= {"Page.enable", "DOM.enable", "Runtime.enable"}

    @pytest.mark.asyncio
    async def test_attach_creates_page_when_none(self, make_cdp_client):
        client = make_cdp_client()
        client.handlers["Target.getTargets"] = {"targetInfos": []}
        client.handlers["Target.createTarget"] = {"targetId": "new-page-0001"}
        client.handlers["Target.attachToTarget"] = {"sessionId": "s-1"}
        session = BrowserSession()
        session._client = client

        await session.attach()
        assert client.commands("Target.createTarget") == [{"url": "about:blank"}]

    @pytest.mark.asyncio
    async def test_attach_without_session_id_fails(self, make_cdp_client):
        client = make_cdp_client()
        client.handlers["Target.getTargets"] = {"targetInfos": [{"type": "page", "targetId": "p-00000001"}]}
        session = BrowserSession()
        session._client = client

        with pytest.raises(BrowserError, match="Could not attach"):
            await session.attach()

    @pytest.mark.asyncio
    async def test_stop_clears_state(self, make_cdp_client):
        client = make_cdp_client()
        session = _connected(client)

        await session.stop()

        assert client.stopped is True
        assert session.is_connected is False

    @pytest.mark.asyncio
    async def test_failed_start_shuts_down_launched_chrome(self, make_cdp_client, monkeypatch):
        client = make_cdp_client()
        client.handlers["Target.getTargets"] = {"targetInfos": [{"type": "page", "targetId": "p-00000001"}]}
        launchers = []

        class StubLauncher:
            def __init__(self, config):
                self.terminated = False
                launchers.append(self)

            async def launch(self):
                return "ws://127.0.0.1:9222/devtools/browser/abc"

            def terminate(self):
                self.terminated = True

        monkeypatch.setattr(session_module, "ChromeLauncher", StubLauncher)
        monkeypatch.setattr(cdp_use, "CDPClient", lambda url: client)
        session = BrowserSession()

        with pytest.raises(BrowserError, match="Could not attach"):
            await session.start()

        assert client.started is True
        assert client.stopped is True
        assert [launcher.terminated for launcher in launchers] == [True]
        assert session.is_connected is False
        assert session._launcher is None


# ── Page operations ──────────────────────────────────────────────────────────


class TestPage:
    @pytest.mark.asyncio
    async def test_query_selector_returns_backend_node_id(self, make_cdp_client):
        client = make_cdp_client()
        client.handlers["DOM.getDocument"] = {"root": {"nodeId": 1}}
        client.handlers["DOM.querySelector"] = {"nodeId": 17}
        client.handlers["DOM.describeNode"] = {"node": {"backendNodeId": 170}}

        assert await _connected(client).query_selector("#q") == 170
        assert client.commands("DOM.querySelector") == [{"nodeId": 1, "selector": "#q"}]

    @pytest.mark.asyncio
    async def test_query_selector_without_match(self, make_cdp_client):
        client = make_cdp_client()
        client.handlers["DOM.getDocument"] = {"root": {"nodeId": 1}}
        client.handlers["DOM.querySelector"] = {"nodeId": 0}

        with pytest.raises(DOMError, match="No element matches"):
            await _connected(client).query_selector(".missing")

    @pytest.mark.asyncio
    async def test_execute_js_value(self, make_cdp_client):
        client = make_cdp_client()
        client.handlers["Runtime.evaluate"] = {"result": {"type": "string", "value": "complete"}}
        assert await _connected(client).execute_js("document.readyState") == "complete"

    @pytest.mark.asyncio
    async def test_execute_js_exception(self, make_cdp_client):
        client = make_cdp_client()
        client.handlers["Runtime.evaluate"] = {"exceptionDetails": {"text": "Uncaught ReferenceError"}}
        with pytest.raises(DOMError, match="ReferenceError"):
            await _connected(client).execute_js("nope()")

    @pytest.mark.asyncio
    async def test_navigate_waits_for_complete(self, make_cdp_client):
        client = make_cdp_client()
        client.handlers["Runtime.evaluate"] = {"result": {"value": "complete"}}

        assert await _connected(client).navigate("https://example.com") is True
        assert client.commands("Page.navigate") == [{"url": "https://example.com"}]

    @pytest.mark.asyncio
    async def test_resolve_node(self, make_cdp_client):
        assert await _connected(make_cdp_client()).resolve_node(5) == "obj-1"


# ── Launcher ─────────────────────────────────────────────────────────────────


class TestLauncher:
    def test_command_line(self):
        config = BrowserConfig(
            executable_path="/opt/chrome",
            window_size=(800, 600),
            user_data_dir="/tmp/profile",
            args=["--lang=en"],
        )
        command = ChromeLauncher(config).command(9222)

        assert command[:3] == ["/opt/chrome", "--remote-debugging-port=9222", "--window-size=800,600"]
        assert "--headless=new" in command
        assert "--user-data-dir=/tmp/profile" in command
        assert command[-2:] == ["--lang=en", "about:blank"]

    def test_headful_command_line(self):
        command = ChromeLauncher(BrowserConfig(executable_path="chrome", headless=False)).command(1)
        assert "--headless=new" not in command

    def test_chrome_not_found(self, monkeypatch):
        monkeypatch.setattr(launcher_module.platform, "system", lambda: "Plan9")
        with pytest.raises(BrowserError, match="Chrome not found"):
            find_chrome()

    def test_terminate_without_process(self):
        launcher = ChromeLauncher(BrowserConfig())
        launcher.terminate()
        assert launcher.running is False


class TestResolveCdpUrl:
    @pytest.mark.asyncio
    async def test_websocket_url_used_as_given(self):
        url = "ws://127.0.0.1:9222/devtools/browser/abc"
        assert await resolve_cdp_url(url) == url

    @pytest.mark.asyncio
    async def test_unknown_scheme_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            await resolve_cdp_url("localhost:9222")

    @pytest.mark.asyncio
    async def test_http_endpoint_is_asked_for_websocket_url(self, monkeypatch):
        async def fake_fetch(client, endpoint):
            assert endpoint == "http://127.0.0.1:9222"
            return "ws://127.0.0.1:9222/devtools/browser/xyz"

        monkeypatch.setattr(launcher_module, "fetch_websocket_url", fake_fetch)
        assert await resolve_cdp_url("http://127.0.0.1:9222") == "ws://127.0.0.1:9222/devtools/browser/xyz"

    @pytest.mark.asyncio
    async def test_unreachable_http_endpoint(self, monkeypatch):
        async def fake_fetch(client, endpoint):
            return None

        monkeypatch.setattr(launcher_module, "fetch_websocket_url", fake_fetch)
        with pytest.raises(BrowserError, match="No DevTools endpoint"):
            await resolve_cdp_url("http://127.0.0.1:1")
