from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class DateTimeRange:
    start: datetime
    end: datetime


@dataclass(frozen=True, slots=True)
class EventRecord:
    title: str
    start_at: datetime
    end_at: datetime
    location: str
    description: str
    timezone: str
    source_url: str

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("EventRecord.title must not be empty")
        if self.start_at.tzinfo is None or self.end_at.tzinfo is None:
            raise ValueError("EventRecord instants must be timezone-aware")
        if self.end_at < self.start_at:
            raise ValueError(
                f"EventRecord.end_at ({self.end_at.isoformat()}) precedes start_at ({self.start_at.isoformat()})"
            )
