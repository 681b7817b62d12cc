"""Interpret the date/time strings shown on event detail pages.

Only an enumerated catalogue of shapes is recognized (Japanese and English,
single- or multi-day). Patterns are tried in catalogue order and the first one
that yields a valid range wins; a pattern that matches textually but carries an
unknown month name or an impossible date is skipped, not treated as a failure.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Callable

from src.crawlers.errors import NoRecognizedPatternError
from src.crawlers.pipeline.types import DateTimeRange

logger = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)
DEFAULT_WINDOW_LEAD = timedelta(hours=1)
DEFAULT_WINDOW_LENGTH = timedelta(hours=2)

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "sept": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_FULLWIDTH = str.maketrans("０１２３４５６７８９：／", "0123456789:/")

_WEEKDAY = r"(?:\s*[(（][^)）]{1,4}[)）])?"
_SEP = r"\s*(?:-|–|—|~|〜|～|ー|to)\s*"
_TIME = r"(?P<h>\d{1,2}):(?P<mi>\d{2})"
_EN_TIME = _TIME + r"(?:\s*(?P<ap>[ap]\.?m\.?))?"
_EN_DATE = r"(?P<mon>[A-Za-z]{3,9})\.?\s+(?P<d>\d{1,2}),?\s+(?P<y>\d{4})"
_EN_GAP = r"[\s,]+(?:at\s+)?"
_JP_DATE = r"(?P<y>\d{4})年\s*(?P<mo>\d{1,2})月\s*(?P<d>\d{1,2})日" + _WEEKDAY
_JP_MONTH_DAY = r"(?P<mo>\d{1,2})月\s*(?P<d>\d{1,2})日" + _WEEKDAY
_NUMERIC_DATE = r"(?P<y>\d{4})[-/](?P<mo>\d{1,2})[-/](?P<d>\d{1,2})" + _WEEKDAY
# a bare month/day must not start inside a fuller "YYYY年M月D日" date
_NOT_AFTER_YEAR = r"(?<!\d)(?<!年)(?<!年\s)"
_OPTIONAL_YEAR = r"(?:(?P<y>\d{4})年\s*)?"


def _end(fragment: str) -> str:
    """Rename every named group in ``fragment`` to its end-side counterpart."""
    return fragment.replace("(?P<", "(?P<e")


class UnrecognizedDatePolicy(str, Enum):
    default_window = "default_window"
    raise_error = "raise"


@dataclass(frozen=True, slots=True)
class DatePattern:
    name: str
    regex: re.Pattern


def _pattern(name: str, source: str) -> DatePattern:
    return DatePattern(name=name, regex=re.compile(source, re.IGNORECASE))


CATALOGUE: tuple[DatePattern, ...] = (
    _pattern(
        "en_cross_day",
        _EN_DATE + _EN_GAP + _EN_TIME + _SEP + _end(_EN_DATE) + _EN_GAP + _end(_EN_TIME),
    ),
    _pattern("en_same_day", _EN_DATE + _EN_GAP + _EN_TIME + _SEP + _end(_EN_TIME)),
    _pattern("en_single", _EN_DATE + _EN_GAP + _EN_TIME),
    _pattern(
        "ja_cross_day",
        _JP_DATE + r"\s*" + _TIME + _SEP + _end(_OPTIONAL_YEAR + _JP_MONTH_DAY) + r"\s*" + _end(_TIME),
    ),
    _pattern(
        "numeric_cross_day",
        _NUMERIC_DATE + r"\s*" + _TIME + _SEP + _end(_NUMERIC_DATE) + r"\s*" + _end(_TIME),
    ),
    _pattern(
        "ja_month_day_cross_day",
        _NOT_AFTER_YEAR
        + _JP_MONTH_DAY
        + r"\s*"
        + _TIME
        + _SEP
        + _end(_OPTIONAL_YEAR + _JP_MONTH_DAY)
        + r"\s*"
        + _end(_TIME),
    ),
    _pattern("ja_same_day", _JP_DATE + r"\s*" + _TIME + _SEP + _end(_TIME)),
    _pattern("ja_month_day_same_day", _NOT_AFTER_YEAR + _JP_MONTH_DAY + r"\s*" + _TIME + _SEP + _end(_TIME)),
    _pattern("numeric_same_day", _NUMERIC_DATE + r"\s*" + _TIME + _SEP + _end(_TIME)),
    _pattern("ja_single", _JP_DATE + r"\s*" + _TIME),
    _pattern("ja_month_day_single", _NOT_AFTER_YEAR + _JP_MONTH_DAY + r"\s*" + _TIME),
    _pattern("numeric_single", _NUMERIC_DATE + r"\s*" + _TIME),
)


def month_from_name(name: str | None) -> int | None:
    if not name:
        return None
    return MONTHS.get(name.strip().rstrip(".").lower())


def to_24h(hour: int, meridiem: str | None) -> int | None:
    """Convert a 12-hour clock reading; ``None`` meridiem means 24-hour input."""
    if not meridiem:
        return hour
    if not 1 <= hour <= 12:
        return None
    suffix = meridiem.lower().replace(".", "")
    if suffix == "pm" and hour != 12:
        return hour + 12
    if suffix == "am" and hour == 12:
        return 0
    return hour


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DateTimeInterpreter:
    """Turn a date/time string into an aware ``(start, end)`` range.

    The policy for text that matches nothing in the catalogue is fixed at
    construction: either a window relative to ``clock()`` or
    ``NoRecognizedPatternError``. A recognized start without an end always gets
    ``end = start + 1 hour``.
    """

    def __init__(
        self,
        tz: tzinfo,
        *,
        unrecognized_policy: UnrecognizedDatePolicy = UnrecognizedDatePolicy.default_window,
        clock: Callable[[], datetime] = _utc_now,
        catalogue: tuple[DatePattern, ...] = CATALOGUE,
    ):
        self.tz = tz
        self.unrecognized_policy = UnrecognizedDatePolicy(unrecognized_policy)
        self.clock = clock
        self.catalogue = catalogue

    def parse(self, text: str | None) -> DateTimeRange | None:
        if not text:
            return None
        normalized = " ".join(text.translate(_FULLWIDTH).split())
        for pattern in self.catalogue:
            match = pattern.regex.search(normalized)
            if match is None:
                continue
            parsed = self._build_range(match.groupdict())
            if parsed is None:
                logger.debug("[datetime] pattern=%s matched but was rejected text=%r", pattern.name, normalized)
                continue
            logger.debug("[datetime] pattern=%s start=%s end=%s", pattern.name, parsed.start, parsed.end)
            return parsed
        return None

    def interpret(self, text: str | None) -> DateTimeRange:
        parsed = self.parse(text)
        if parsed is not None:
            return parsed
        if self.unrecognized_policy is UnrecognizedDatePolicy.raise_error:
            raise NoRecognizedPatternError(text)
        logger.info("[datetime] no recognized pattern in %r, using default window", text)
        return self.default_window()

    def default_window(self) -> DateTimeRange:
        now = self._now().replace(second=0, microsecond=0)
        start = now + DEFAULT_WINDOW_LEAD
        return DateTimeRange(start=start, end=start + DEFAULT_WINDOW_LENGTH)

    def _now(self) -> datetime:
        return self.clock().astimezone(self.tz)

    def _build_range(self, parts: dict[str, str | None]) -> DateTimeRange | None:
        start_day = self._day(parts.get("y"), parts.get("mo"), parts.get("mon"), parts.get("d"))
        if start_day is None:
            return None

        start_meridiem = parts.get("ap") or parts.get("eap")
        start = self._at(start_day, parts.get("h"), parts.get("mi"), start_meridiem)
        if start is None:
            return None

        if parts.get("eh") is None:
            return DateTimeRange(start=start, end=start + DEFAULT_DURATION)

        cross_day = parts.get("ed") is not None
        if cross_day:
            end_day = self._day(
                parts.get("ey") or parts.get("y"),
                parts.get("emo"),
                parts.get("emon"),
                parts.get("ed"),
            )
            if end_day is None:
                return None
            if parts.get("ey") is None and end_day < start_day:
                # "12月31日 22:00 - 1月1日 02:00" ends in the following year
                end_day = self._next_year(end_day)
                if end_day is None:
                    return None
        else:
            end_day = start_day

        end = self._at(end_day, parts.get("eh"), parts.get("emi"), parts.get("eap") or parts.get("ap"))
        if end is None:
            return None
        if end < start:
            if cross_day:
                return None
            # same-day ranges that pass midnight, e.g. 23:00 - 01:00
            end += timedelta(days=1)
        return DateTimeRange(start=start, end=end)

    def _day(
        self,
        year: str | None,
        month: str | None,
        month_name: str | None,
        day: str | None,
    ) -> date | None:
        if day is None:
            return None
        if month_name is not None:
            month_number = month_from_name(month_name)
        elif month is not None:
            month_number = int(month)
        else:
            month_number = None
        if month_number is None:
            return None
        year_number = int(year) if year else self._now().year
        try:
            return date(year_number, month_number, int(day))
        except ValueError:
            return None

    @staticmethod
    def _next_year(day: date) -> date | None:
        try:
            return day.replace(year=day.year + 1)
        except ValueError:
            return None

    def _at(self, day: date, hour: str | None, minute: str | None, meridiem: str | None) -> datetime | None:
        if hour is None or minute is None:
            return None
        minute_number = int(minute)
        if minute_number > 59:
            return None
        hour_number = to_24h(int(hour), meridiem)
        if hour_number is None:
            return None
        # hours past 24 (e.g. "25:00") roll into the next day
        midnight = datetime(day.year, day.month, day.day, tzinfo=self.tz)
        return midnight + timedelta(hours=hour_number, minutes=minute_number)
