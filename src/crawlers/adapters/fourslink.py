from src.crawlers.adapters.base import BaseSourceAdapter
from src.crawlers.extractors.datetime_parser import DateTimeInterpreter
from src.crawlers.fetchers.base import BaseDocumentFetcher
from src.crawlers.fetchers.factory import build_fetcher
from src.crawlers.pipeline.runner import build_interpreter, extract_from_event_page
from src.crawlers.pipeline.types import EventRecord


class FourSLinkEventAdapter(BaseSourceAdapter):
    source_name = "fourslink_event"

    def __init__(
        self,
        fetcher: BaseDocumentFetcher | None = None,
        interpreter: DateTimeInterpreter | None = None,
    ):
        self.fetcher = fetcher or build_fetcher()
        self.interpreter = interpreter or build_interpreter()

    async def fetch(self, url: str) -> str:
        return await self.fetcher.fetch(url)

    async def parse(self, url: str, payload: str) -> EventRecord:
        return extract_from_event_page(url, payload, interpreter=self.interpreter)
