"""Ordered candidate selectors and the resolver that consumes them.

The source site regenerates hashed class names on every build
(``EventDetailOverviewScreen_title__a1b2c``), so site-specific candidates match
on a class substring or prefix, never on the full class name.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Protocol

from bs4 import BeautifulSoup, Tag


class SelectorStrategy(str, Enum):
    tag = "tag"
    class_name = "class_name"
    class_contains = "class_contains"
    class_prefix = "class_prefix"
    attribute = "attribute"


Predicate = Callable[[str], bool]


def _accept_any(text: str) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class CandidateSelector:
    strategy: SelectorStrategy
    value: str
    predicate: Predicate = _accept_any
    match_all: bool = False

    @property
    def css(self) -> str:
        if self.strategy is SelectorStrategy.tag:
            return self.value
        if self.strategy is SelectorStrategy.class_name:
            return f".{self.value}"
        if self.strategy is SelectorStrategy.class_contains:
            return f'[class*="{self.value}"]'
        if self.strategy is SelectorStrategy.class_prefix:
            return f'[class^="{self.value}"]'
        # attribute markers are written as "name=value" or a bare "name"
        name, sep, attr_value = self.value.partition("=")
        if not sep:
            return f"[{name}]"
        return f'[{name}="{attr_value}"]'

    def locate(self, soup: BeautifulSoup | Tag) -> list[Tag]:
        matches = soup.select(self.css)
        if self.match_all:
            return matches
        return matches[:1]

    def accepts(self, text: str) -> bool:
        return self.predicate(text)


class Candidate(Protocol):
    def locate(self, soup: BeautifulSoup | Tag) -> list[Tag]: ...

    def accepts(self, text: str) -> bool: ...


def tag(name: str, predicate: Predicate = _accept_any) -> CandidateSelector:
    return CandidateSelector(SelectorStrategy.tag, name, predicate)


def class_name(name: str, predicate: Predicate = _accept_any) -> CandidateSelector:
    return CandidateSelector(SelectorStrategy.class_name, name, predicate)


def class_contains(fragment: str, predicate: Predicate = _accept_any, *, match_all: bool = False) -> CandidateSelector:
    return CandidateSelector(SelectorStrategy.class_contains, fragment, predicate, match_all)


def class_prefix(prefix: str, predicate: Predicate = _accept_any) -> CandidateSelector:
    return CandidateSelector(SelectorStrategy.class_prefix, prefix, predicate)


def attribute(marker: str, predicate: Predicate = _accept_any) -> CandidateSelector:
    return CandidateSelector(SelectorStrategy.attribute, marker, predicate)


def element_text(element: Tag) -> str:
    return element.get_text().strip()


def resolve_element(soup: BeautifulSoup | Tag, candidates: Iterable[Candidate]) -> Tag | None:
    for candidate in candidates:
        for element in candidate.locate(soup):
            text = element_text(element)
            if text and candidate.accepts(text):
                return element
    return None


def resolve(soup: BeautifulSoup | Tag, candidates: Iterable[Candidate]) -> str | None:
    element = resolve_element(soup, candidates)
    if element is None:
        return None
    return element_text(element)
