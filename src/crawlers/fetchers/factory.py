from src.core.config import settings
from src.crawlers.fetchers.base import BaseDocumentFetcher
from src.crawlers.fetchers.rendered import RenderedPageFetcher
from src.crawlers.fetchers.static import StaticPageFetcher


def build_fetcher(mode: str | None = None) -> BaseDocumentFetcher:
    mode = mode or settings.fetch_mode
    if mode == "rendered":
        return RenderedPageFetcher()
    if mode == "static":
        return StaticPageFetcher()
    raise ValueError(f"Unknown fetch mode: {mode}")
