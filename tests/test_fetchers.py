import asyncio

import httpx
import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from conftest import EVENT_URL, FOURSLINK_EVENT_HTML
from src.crawlers.errors import ContentNotRenderedError, FetchError, HttpStatusError, RenderTimeoutError
from src.crawlers.fetchers import rendered
from src.crawlers.fetchers.factory import build_fetcher
from src.crawlers.fetchers.rendered import RenderedPageFetcher
from src.crawlers.fetchers.static import StaticPageFetcher


class FakePage:
    def __init__(self, *, goto_error=None, marker_error=None):
        self.goto_error = goto_error
        self.marker_error = marker_error
        self.calls = []

    async def goto(self, url, *, wait_until, timeout):
        self.calls.append(("goto", url, wait_until, timeout))
        if self.goto_error is not None:
            raise self.goto_error

    async def wait_for_selector(self, selector, *, timeout):
        self.calls.append(("wait_for_selector", selector, timeout))
        if self.marker_error is not None:
            raise self.marker_error

    async def content(self):
        return FOURSLINK_EVENT_HTML


class FakeContext:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.contexts = []
        self.context_kwargs = None
        self.closed = False

    async def new_context(self, **kwargs):
        self.context_kwargs = kwargs
        context = FakeContext(self.page)
        self.contexts.append(context)
        return context

    async def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, browser):
        self.browser = browser
        self.launch_kwargs = None

    async def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        return self.browser


class FakePlaywright:
    def __init__(self, browser):
        self.chromium = FakeChromium(browser)
        self.exited = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.exited = True
        return False


@pytest.fixture
def fake_browser(monkeypatch):
    def _install(page: FakePage) -> tuple[FakeBrowser, FakePlaywright]:
        browser = FakeBrowser(page)
        driver = FakePlaywright(browser)
        monkeypatch.setattr(rendered, "async_playwright", lambda: driver)
        return browser, driver

    return _install


def _fetcher() -> RenderedPageFetcher:
    return RenderedPageFetcher(
        user_agent="TestAgent/1.0",
        navigation_timeout_ms=1234,
        marker_timeout_ms=567,
        content_marker='[class*="EventDetailOverviewScreen_title"]',
    )


def test_rendered_fetch_waits_for_network_idle_and_marker(fake_browser):
    page = FakePage()
    browser, driver = fake_browser(page)

    html = asyncio.run(_fetcher().fetch(EVENT_URL))

    assert html == FOURSLINK_EVENT_HTML
    assert page.calls == [
        ("goto", EVENT_URL, "networkidle", 1234),
        ("wait_for_selector", '[class*="EventDetailOverviewScreen_title"]', 567),
    ]
    assert browser.context_kwargs["user_agent"] == "TestAgent/1.0"
    assert driver.chromium.launch_kwargs["headless"] is True
    assert browser.closed
    assert browser.contexts[0].closed
    assert driver.exited


def test_rendered_fetch_marker_timeout_releases_browser(fake_browser):
    page = FakePage(marker_error=PlaywrightTimeoutError("Timeout 567ms exceeded"))
    browser, driver = fake_browser(page)

    with pytest.raises(ContentNotRenderedError) as exc_info:
        asyncio.run(_fetcher().fetch(EVENT_URL))

    assert exc_info.value.url == EVENT_URL
    assert isinstance(exc_info.value.__cause__, PlaywrightTimeoutError)
    assert browser.closed
    assert driver.exited


def test_rendered_fetch_navigation_timeout_releases_browser(fake_browser):
    page = FakePage(goto_error=PlaywrightTimeoutError("Timeout 1234ms exceeded"))
    browser, _ = fake_browser(page)

    with pytest.raises(RenderTimeoutError):
        asyncio.run(_fetcher().fetch(EVENT_URL))

    assert browser.closed
    assert ("wait_for_selector", '[class*="EventDetailOverviewScreen_title"]', 567) not in page.calls


def test_rendered_fetch_wraps_browser_crash(fake_browser):
    page = FakePage(goto_error=PlaywrightError("Target page, context or browser has been closed"))
    browser, _ = fake_browser(page)

    with pytest.raises(FetchError) as exc_info:
        asyncio.run(_fetcher().fetch(EVENT_URL))

    assert not isinstance(exc_info.value, RenderTimeoutError)
    assert browser.closed


def test_rendered_fetch_wraps_non_playwright_failure(fake_browser):
    page = FakePage(goto_error=OSError("pipe closed"))
    browser, driver = fake_browser(page)

    with pytest.raises(FetchError) as exc_info:
        asyncio.run(_fetcher().fetch(EVENT_URL))

    assert isinstance(exc_info.value.__cause__, OSError)
    assert browser.closed
    assert driver.exited


def _static_fetcher(handler) -> StaticPageFetcher:
    return StaticPageFetcher(user_agent="TestAgent/1.0", transport=httpx.MockTransport(handler))


def test_static_fetch_returns_body_and_sends_user_agent():
    seen_headers = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers.update(request.headers)
        return httpx.Response(200, text="<html>ok</html>")

    html = asyncio.run(_static_fetcher(handler).fetch(EVENT_URL))

    assert html == "<html>ok</html>"
    assert seen_headers["user-agent"] == "TestAgent/1.0"


def test_static_fetch_non_success_status_is_a_fetch_error():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    with pytest.raises(HttpStatusError) as exc_info:
        asyncio.run(_static_fetcher(handler).fetch(EVENT_URL))

    assert exc_info.value.status_code == 503
    assert len(calls) == 1


def test_static_fetch_transport_error_is_a_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError):
        asyncio.run(_static_fetcher(handler).fetch(EVENT_URL))


def test_build_fetcher_selects_variant_explicitly():
    assert isinstance(build_fetcher("rendered"), RenderedPageFetcher)
    assert isinstance(build_fetcher("static"), StaticPageFetcher)
    with pytest.raises(ValueError):
        build_fetcher("hybrid")
