from abc import ABC, abstractmethod


class BaseDocumentFetcher(ABC):
    fetcher_name: str

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """Return the page HTML or raise ``FetchError``."""
