from abc import ABC, abstractmethod

from src.crawlers.pipeline.types import EventRecord


class BaseSourceAdapter(ABC):
    source_name: str

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """Fetch the raw page payload for one event URL."""

    @abstractmethod
    async def parse(self, url: str, payload: str) -> EventRecord:
        """Parse a payload into one event record."""

    async def extract(self, url: str) -> EventRecord:
        payload = await self.fetch(url)
        return await self.parse(url, payload)
