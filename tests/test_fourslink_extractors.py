from datetime import datetime

import pytest
from bs4 import BeautifulSoup

from conftest import EVENT_URL, FOURSLINK_EVENT_HTML, GENERIC_ONLY_HTML, TOKYO
from src.crawlers.extractors.fourslink import (
    DATETIME_CANDIDATES,
    DESCRIPTION_CANDIDATES,
    DESCRIPTION_PLACEHOLDER,
    LOCATION_CANDIDATES,
    TITLE_CANDIDATES,
    UNKNOWN_LOCATION,
    UNKNOWN_TITLE,
    extract_datetime,
    extract_datetime_text,
    extract_description,
    extract_location,
    extract_title,
    format_description_html,
    normalize_description_whitespace,
)
from src.crawlers.extractors.selectors import SelectorStrategy


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_title_prefers_site_specific_marker():
    assert extract_title(_soup(FOURSLINK_EVENT_HTML)) == "Startup Pitch Night 2025"


def test_title_falls_back_to_page_title_tag():
    assert extract_title(_soup(GENERIC_ONLY_HTML)) == "Community Meetup Tokyo"


def test_title_skips_too_short_candidates():
    soup = _soup("<html><head><title>Real Event Title</title></head><body><h1>Hi</h1></body></html>")

    assert extract_title(soup) == "Real Event Title"


def test_title_sentinel_when_nothing_matches():
    assert extract_title(_soup("<html><body><p>x</p></body></html>")) == UNKNOWN_TITLE


def test_datetime_text_comes_from_info_value_with_date_tokens():
    assert extract_datetime_text(_soup(FOURSLINK_EVENT_HTML)) == "2025年6月27日(金) 16:00 - 17:00"


def test_extract_datetime_delegates_to_interpreter(interpreter):
    window = extract_datetime(_soup(FOURSLINK_EVENT_HTML), interpreter)

    assert window.start == datetime(2025, 6, 27, 16, 0, tzinfo=TOKYO)
    assert window.end == datetime(2025, 6, 27, 17, 0, tzinfo=TOKYO)


def test_extract_datetime_without_date_element_uses_policy(interpreter):
    window = extract_datetime(_soup(GENERIC_ONLY_HTML), interpreter)

    assert window == interpreter.default_window()


def test_location_picks_the_info_value_that_looks_like_a_place():
    assert extract_location(_soup(FOURSLINK_EVENT_HTML)) == "東京都大田区羽田空港1丁目 Zone K 2階"


def test_location_detects_online_events():
    soup = _soup(
        """
        <dd class="EventInfoItem_value__1">2025年7月1日 19:00 - 20:00</dd>
        <dd class="EventInfoItem_value__1">Online (Zoom)</dd>
        """
    )

    assert extract_location(soup) == "Online (Zoom)"


def test_location_falls_back_to_generic_classes():
    assert extract_location(_soup('<div class="venue">Shibuya Hikarie</div>')) == "Shibuya Hikarie"


def test_location_uses_plain_info_value_that_is_not_a_date():
    soup = _soup(
        """
        <dd class="EventInfoItem_value__1">2025年7月1日 19:00 - 20:00</dd>
        <dd class="EventInfoItem_value__1">WeWork Shibuya Scramble Square</dd>
        """
    )

    assert extract_location(soup) == "WeWork Shibuya Scramble Square"


def test_location_sentinel():
    assert extract_location(_soup(GENERIC_ONLY_HTML)) == UNKNOWN_LOCATION


def test_description_is_prefixed_with_citation_and_formatted():
    description = extract_description(_soup(FOURSLINK_EVENT_HTML), EVENT_URL)

    assert description == (
        f"詳細: {EVENT_URL}\n\n"
        "スタートアップのピッチイベントです。\n\n"
        "登壇者:\n山田 太郎\n佐藤 花子\n\n"
        "お気軽にご参加ください。"
    )


def test_description_without_block_uses_placeholder():
    description = extract_description(_soup(GENERIC_ONLY_HTML), EVENT_URL)

    assert description == f"詳細: {EVENT_URL}\n\n{DESCRIPTION_PLACEHOLDER}"


def test_description_last_resort_uses_long_body_text():
    body = "This is a long paragraph about the event that easily exceeds fifty characters."
    soup = _soup(f"<html><body><p>short</p><p>{body}</p></body></html>")

    assert extract_description(soup, EVENT_URL) == f"詳細: {EVENT_URL}\n\n{body}"


def test_format_description_without_paragraphs_uses_block_text():
    element = _soup('<div class="RichText_component__a">line one<br>line   two</div>').div

    assert format_description_html(element) == "line one\nline two"


def test_format_description_does_not_mutate_the_document():
    soup = _soup('<div class="RichText_component__a"><p>a<br>b</p></div>')

    format_description_html(soup.div)

    assert soup.find("br") is not None


def test_normalize_description_whitespace():
    raw = "first  \t line \n\n\n\n  second\t\tline  \n third"

    assert normalize_description_whitespace(raw) == "first line\n\nsecond line\nthird"


def test_normalize_description_collapses_ideographic_and_nonbreaking_spaces():
    raw = "会場\u3000\u3000渋谷\u00a0\u00a0ホール \u3000\n\u3000受付は18:30から"

    assert normalize_description_whitespace(raw) == "会場 渋谷 ホール\n受付は18:30から"


@pytest.mark.parametrize(
    "candidates",
    [TITLE_CANDIDATES, DATETIME_CANDIDATES, LOCATION_CANDIDATES, DESCRIPTION_CANDIDATES],
)
def test_no_prefix_candidate_is_shadowed_by_a_substring_candidate(candidates):
    substrings = {c.value for c in candidates if c.strategy is SelectorStrategy.class_contains}
    prefixes = {c.value for c in candidates if c.strategy is SelectorStrategy.class_prefix}

    assert not substrings & prefixes
