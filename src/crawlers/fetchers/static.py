import logging

import httpx

from src.core.config import settings
from src.crawlers.errors import FetchError, HttpStatusError
from src.crawlers.fetchers.base import BaseDocumentFetcher

logger = logging.getLogger(__name__)


def default_headers(user_agent: str = settings.fetch_user_agent) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "ja,en-US;q=0.9,en;q=0.8",
    }


class StaticPageFetcher(BaseDocumentFetcher):
    """Plain HTTP fetch for pages that render their content server-side.

    Single attempt: failures surface as ``FetchError`` and retry policy is left
    to the caller.
    """

    fetcher_name = "static"

    def __init__(
        self,
        *,
        user_agent: str = settings.fetch_user_agent,
        timeout_seconds: float = settings.fetch_static_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.headers = default_headers(user_agent)
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def fetch(self, url: str) -> str:
        logger.info("[fourslink-fetch] static start url=%s", url)
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            follow_redirects=True,
            headers=self.headers,
            transport=self.transport,
        ) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as exc:
                logger.warning("[fourslink-fetch] transport error url=%s error=%s", url, exc)
                raise FetchError(f"Unable to fetch {url}", url=url) from exc

        logger.info("[fourslink-fetch] status=%s url=%s", response.status_code, url)
        if response.status_code >= 400:
            raise HttpStatusError(
                f"Unexpected status {response.status_code} for {url}",
                url=url,
                status_code=response.status_code,
            )
        return response.text
