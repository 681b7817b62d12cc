import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from src.core.config import settings
from src.crawlers.errors import ContentNotRenderedError, FetchError, RenderTimeoutError
from src.crawlers.fetchers.base import BaseDocumentFetcher

logger = logging.getLogger(__name__)

BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class RenderedPageFetcher(BaseDocumentFetcher):
    """Fetch a page through headless Chromium so client-side content is present.

    The event detail on the source site is rendered by script, so the raw
    document has no title, date or description. After navigation settles we
    additionally wait for ``content_marker`` (the title block) to appear.
    """

    fetcher_name = "rendered"

    def __init__(
        self,
        *,
        user_agent: str = settings.fetch_user_agent,
        navigation_timeout_ms: int = settings.fetch_navigation_timeout_ms,
        marker_timeout_ms: int = settings.fetch_marker_timeout_ms,
        content_marker: str = settings.fetch_content_marker,
    ):
        self.user_agent = user_agent
        self.navigation_timeout_ms = navigation_timeout_ms
        self.marker_timeout_ms = marker_timeout_ms
        self.content_marker = content_marker

    async def fetch(self, url: str) -> str:
        logger.info(
            "[fourslink-fetch] start url=%s navigation_timeout_ms=%s marker_timeout_ms=%s",
            url,
            self.navigation_timeout_ms,
            self.marker_timeout_ms,
        )
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=BROWSER_ARGS)
                try:
                    return await self._render(browser, url)
                finally:
                    await browser.close()
                    logger.debug("[fourslink-fetch] browser closed url=%s", url)
        except FetchError:
            raise
        except PlaywrightError as exc:
            logger.warning("[fourslink-fetch] playwright failure url=%s error=%s", url, exc)
            raise FetchError(f"Unable to render {url}", url=url) from exc
        except Exception as exc:
            logger.exception("[fourslink-fetch] unexpected failure url=%s", url)
            raise FetchError(f"Unable to render {url}", url=url) from exc

    async def _render(self, browser, url: str) -> str:
        context = await browser.new_context(user_agent=self.user_agent, locale="ja-JP")
        try:
            page = await context.new_page()
            try:
                await page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
            except PlaywrightTimeoutError as exc:
                logger.warning("[fourslink-fetch] network idle timeout url=%s", url)
                raise RenderTimeoutError(f"Timed out waiting for {url} to settle", url=url) from exc

            try:
                await page.wait_for_selector(self.content_marker, timeout=self.marker_timeout_ms)
            except PlaywrightTimeoutError as exc:
                logger.warning(
                    "[fourslink-fetch] content marker %r never appeared url=%s",
                    self.content_marker,
                    url,
                )
                raise ContentNotRenderedError(f"Event content was not rendered for {url}", url=url) from exc

            html = await page.content()
            logger.info("[fourslink-fetch] success url=%s bytes=%s", url, len(html))
            return html
        finally:
            await context.close()
