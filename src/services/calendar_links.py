from datetime import datetime, timezone
from urllib.parse import urlencode, urlparse

from src.core.config import settings
from src.crawlers.pipeline.types import EventRecord

GOOGLE_CALENDAR_BASE_URL = "https://calendar.google.com/calendar/render"
GOOGLE_DATE_FORMAT = "%Y%m%dT%H%M%SZ"


def generate_google_calendar_url(event: EventRecord) -> str:
    params = {
        "action": "TEMPLATE",
        "text": event.title,
        "dates": format_dates_for_google(event.start_at, event.end_at),
        "details": event.description,
        "location": event.location,
        "ctz": event.timezone,
    }
    return f"{GOOGLE_CALENDAR_BASE_URL}?{urlencode(params)}"


def format_dates_for_google(start_at: datetime, end_at: datetime) -> str:
    return f"{_format_google_datetime(start_at)}/{_format_google_datetime(end_at)}"


def _format_google_datetime(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(GOOGLE_DATE_FORMAT)


def format_date_for_display(value: datetime) -> str:
    local = value.astimezone(settings.event_tzinfo)
    return f"{local.year}年{local.month}月{local.day}日 {local:%H:%M}"


def format_event_period(start_at: datetime, end_at: datetime) -> str:
    start = start_at.astimezone(settings.event_tzinfo)
    end = end_at.astimezone(settings.event_tzinfo)
    if start.date() == end.date():
        return f"{format_date_for_display(start)} - {end:%H:%M}"
    return f"{format_date_for_display(start)} - {format_date_for_display(end)}"


def is_valid_fourslink_url(url: object, *, domain: str = settings.source_domain) -> bool:
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    host = (parsed.hostname or "").lower()
    return host == domain or host.endswith(f".{domain}")
