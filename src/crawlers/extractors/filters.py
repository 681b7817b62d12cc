import re

DATE_TOKENS = ("年", "月", "日", ":", "時")
DESCRIPTION_DATE_MARKERS = ("年", "時")
ENGLISH_MONTH_RE = re.compile(
    r"\b(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\b",
    re.IGNORECASE,
)

# The site renders date, venue and capacity in the same wrapper class, so the
# text itself is the only signal for which one is the venue.
PLACE_TOKENS = (
    "東京",
    "大阪",
    "京都",
    "〒",
    "日本",
    "羽田",
    "空港",
    "Zone",
    "階",
    "丁目",
    "区",
    "市",
    "県",
    "都",
    "府",
    "オンライン",
    "Zoom",
    "Teams",
    "Google Meet",
)
ONLINE_RE = re.compile(r"\bonline\b", re.IGNORECASE)


def min_length(length: int):
    def _predicate(text: str) -> bool:
        return len(text) > length

    return _predicate


def looks_like_datetime(text: str | None) -> bool:
    if not text:
        return False
    if any(token in text for token in DATE_TOKENS):
        return True
    return bool(ENGLISH_MONTH_RE.search(text))


def looks_like_place(text: str | None) -> bool:
    if not text:
        return False
    if any(token in text for token in PLACE_TOKENS):
        return True
    return bool(ONLINE_RE.search(text))


def looks_like_plain_venue(text: str | None) -> bool:
    if not text or len(text) <= 2:
        return False
    return not looks_like_datetime(text)


def looks_like_body_text(text: str | None) -> bool:
    """Long free text that is not itself a schedule line."""
    if not text or len(text) <= 50:
        return False
    return not any(marker in text for marker in DESCRIPTION_DATE_MARKERS)
