import asyncio
import logging

from src.core.config import settings
from src.crawlers.adapters.fourslink import FourSLinkEventAdapter
from src.crawlers.errors import InputError
from src.crawlers.extractors.datetime_parser import DateTimeInterpreter
from src.crawlers.fetchers.base import BaseDocumentFetcher
from src.crawlers.pipeline.types import EventRecord
from src.services.calendar_links import is_valid_fourslink_url

logger = logging.getLogger(__name__)

MISSING_URL_MESSAGE = "URLが提供されていません"
INVALID_URL_MESSAGE = f"有効な{settings.source_domain}のURLを入力してください"


def validate_event_url(url: object) -> str:
    if not url or not isinstance(url, str) or not url.strip():
        raise InputError(MISSING_URL_MESSAGE)
    if not is_valid_fourslink_url(url):
        raise InputError(INVALID_URL_MESSAGE)
    return url.strip()


async def parse_event_from_url(
    url: object,
    *,
    fetcher: BaseDocumentFetcher | None = None,
    interpreter: DateTimeInterpreter | None = None,
) -> EventRecord:
    """Validate ``url``, fetch its rendered page and extract one event record."""
    event_url = validate_event_url(url)
    adapter = FourSLinkEventAdapter(fetcher=fetcher, interpreter=interpreter)
    logger.info("[event-service] extracting url=%s fetcher=%s", event_url, adapter.fetcher.fetcher_name)
    return await adapter.extract(event_url)


async def parse_events_from_urls(
    urls: list[str],
    *,
    fetcher: BaseDocumentFetcher | None = None,
    interpreter: DateTimeInterpreter | None = None,
) -> list[EventRecord | Exception]:
    """Extract several URLs concurrently; failures are returned in place, not raised."""
    results = await asyncio.gather(
        *(parse_event_from_url(url, fetcher=fetcher, interpreter=interpreter) for url in urls),
        return_exceptions=True,
    )
    for url, result in zip(urls, results):
        if isinstance(result, Exception):
            logger.warning("[event-service] extraction failed url=%s error=%r", url, result)
    return list(results)
