import copy
import re

from bs4 import BeautifulSoup, Tag

from src.crawlers.extractors.datetime_parser import DateTimeInterpreter
from src.crawlers.extractors.filters import (
    looks_like_body_text,
    looks_like_datetime,
    looks_like_place,
    looks_like_plain_venue,
    min_length,
)
from src.crawlers.extractors.selectors import (
    CandidateSelector,
    SelectorStrategy,
    attribute,
    class_contains,
    class_name,
    resolve,
    resolve_element,
    tag,
)
from src.crawlers.pipeline.types import DateTimeRange

TITLE_MARKER = "EventDetailOverviewScreen_title"
INFO_VALUE_MARKER = "EventInfoItem_value"
RICH_TEXT_MARKER = "RichText_component"

UNKNOWN_TITLE = "不明なイベント"
UNKNOWN_LOCATION = "オンライン"
DESCRIPTION_PLACEHOLDER = "イベントの詳細情報"
CITATION_PREFIX = "詳細: "

_title_length = min_length(3)

TITLE_CANDIDATES: tuple[CandidateSelector, ...] = (
    class_contains(TITLE_MARKER, _title_length),
    tag("h1", _title_length),
    tag("h2", _title_length),
    class_name("event-title", _title_length),
    class_name("title", _title_length),
    attribute("data-testid=event-title", _title_length),
    tag("title", _title_length),
)

DATETIME_CANDIDATES: tuple[CandidateSelector, ...] = (
    class_contains(INFO_VALUE_MARKER, looks_like_datetime, match_all=True),
    class_name("date", looks_like_datetime),
    class_name("event-date", looks_like_datetime),
    class_name("datetime", looks_like_datetime),
    class_name("time", looks_like_datetime),
    attribute("data-testid=event-date", looks_like_datetime),
    class_name("event-time", looks_like_datetime),
    class_name("schedule", looks_like_datetime),
)

_location_length = min_length(2)

LOCATION_CANDIDATES: tuple[CandidateSelector, ...] = (
    class_contains(INFO_VALUE_MARKER, looks_like_place, match_all=True),
    class_name("location", _location_length),
    class_name("venue", _location_length),
    class_name("place", _location_length),
    class_name("address", _location_length),
    attribute("data-testid=location", _location_length),
    class_name("event-location", _location_length),
    class_contains(INFO_VALUE_MARKER, looks_like_plain_venue, match_all=True),
)

_description_length = min_length(10)

DESCRIPTION_CANDIDATES: tuple[CandidateSelector, ...] = (
    class_contains(RICH_TEXT_MARKER),
    class_name("description", _description_length),
    class_name("event-description", _description_length),
    class_name("content", _description_length),
    class_name("summary", _description_length),
    class_name("details", _description_length),
    attribute("data-testid=description", _description_length),
    class_name("event-content", _description_length),
    class_name("rich-text", _description_length),
    CandidateSelector(SelectorStrategy.tag, "p, div", looks_like_body_text, match_all=True),
)

_MANY_NEWLINES_RE = re.compile(r"\n\s*\n\s*\n+")
_HORIZONTAL_SPACE_RE = re.compile(r"[^\S\n]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")


def citation_line(source_url: str) -> str:
    return f"{CITATION_PREFIX}{source_url}"


def extract_title(soup: BeautifulSoup) -> str:
    return resolve(soup, TITLE_CANDIDATES) or UNKNOWN_TITLE


def extract_location(soup: BeautifulSoup) -> str:
    return resolve(soup, LOCATION_CANDIDATES) or UNKNOWN_LOCATION


def extract_datetime_text(soup: BeautifulSoup) -> str | None:
    return resolve(soup, DATETIME_CANDIDATES)


def extract_datetime(soup: BeautifulSoup, interpreter: DateTimeInterpreter) -> DateTimeRange:
    return interpreter.interpret(extract_datetime_text(soup))


def extract_description(soup: BeautifulSoup, source_url: str) -> str:
    element = resolve_element(soup, DESCRIPTION_CANDIDATES)
    if element is None:
        return f"{citation_line(source_url)}\n\n{DESCRIPTION_PLACEHOLDER}"
    return f"{citation_line(source_url)}\n\n{format_description_html(element)}"


def format_description_html(element: Tag) -> str:
    """Flatten a rich-text block into paragraphs separated by blank lines."""
    block = copy.copy(element)
    for line_break in block.find_all("br"):
        line_break.replace_with("\n")

    paragraphs = [p.get_text().strip() for p in block.find_all("p")]
    text = "".join(f"{paragraph}\n\n" for paragraph in paragraphs if paragraph)
    if not text.strip():
        text = block.get_text().strip()

    text = normalize_description_whitespace(text)
    return text or element.get_text().strip()


def normalize_description_whitespace(text: str) -> str:
    text = _MANY_NEWLINES_RE.sub("\n\n", text)
    text = _HORIZONTAL_SPACE_RE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE_RE.sub("\n", text)
    return text.strip()
