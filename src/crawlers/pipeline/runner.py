import logging

from bs4 import BeautifulSoup

from src.core.config import settings
from src.crawlers.extractors.datetime_parser import DateTimeInterpreter, UnrecognizedDatePolicy
from src.crawlers.extractors.fourslink import (
    extract_datetime,
    extract_description,
    extract_location,
    extract_title,
)
from src.crawlers.pipeline.types import DateTimeRange, EventRecord

logger = logging.getLogger(__name__)


def build_interpreter(policy: str | UnrecognizedDatePolicy | None = None) -> DateTimeInterpreter:
    return DateTimeInterpreter(
        settings.event_tzinfo,
        unrecognized_policy=UnrecognizedDatePolicy(policy or settings.unrecognized_date_policy),
    )


def assemble_event_record(
    *,
    title: str,
    when: DateTimeRange,
    location: str,
    description: str,
    source_url: str,
    timezone: str = settings.event_timezone,
) -> EventRecord:
    return EventRecord(
        title=title,
        start_at=when.start,
        end_at=when.end,
        location=location,
        description=description,
        timezone=timezone,
        source_url=source_url,
    )


def extract_from_event_page(
    source_url: str,
    html: str,
    *,
    interpreter: DateTimeInterpreter | None = None,
) -> EventRecord:
    """Extract one event record from a rendered event detail page.

    Title, location and description misses resolve to sentinel values; only
    the date interpreter can raise, and only under the ``raise`` policy.
    """
    interpreter = interpreter or build_interpreter()
    soup = BeautifulSoup(html, "html.parser")

    title = extract_title(soup)
    when = extract_datetime(soup, interpreter)
    location = extract_location(soup)
    description = extract_description(soup, source_url)

    record = assemble_event_record(
        title=title,
        when=when,
        location=location,
        description=description,
        source_url=source_url,
    )
    logger.info(
        "[fourslink-parse] url=%s title=%r start=%s end=%s location=%r",
        source_url,
        record.title,
        record.start_at.isoformat(),
        record.end_at.isoformat(),
        record.location,
    )
    return record
