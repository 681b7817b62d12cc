from datetime import datetime

from pydantic import BaseModel

from src.crawlers.pipeline.types import EventRecord
from src.services.calendar_links import format_event_period, generate_google_calendar_url


class ParseEventRequest(BaseModel):
    url: str | None = None


class EventRead(BaseModel):
    title: str
    start_at: datetime
    end_at: datetime
    description: str
    location: str
    timezone: str
    source_url: str
    display_period: str
    calendar_url: str

    @classmethod
    def from_record(cls, record: EventRecord) -> "EventRead":
        return cls(
            title=record.title,
            start_at=record.start_at,
            end_at=record.end_at,
            description=record.description,
            location=record.location,
            timezone=record.timezone,
            source_url=record.source_url,
            display_period=format_event_period(record.start_at, record.end_at),
            calendar_url=generate_google_calendar_url(record),
        )


class ParseEventResponse(BaseModel):
    success: bool
    event: EventRead | None = None
    error: str | None = None
