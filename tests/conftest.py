from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.crawlers.extractors.datetime_parser import DateTimeInterpreter, UnrecognizedDatePolicy

TOKYO = ZoneInfo("Asia/Tokyo")
EVENT_URL = "https://4s.link/ja/events/abc123"

FOURSLINK_EVENT_HTML = """
<html>
  <head><title>イベント詳細 | 4s.link</title></head>
  <body>
    <div id="__next">
      <h1 class="EventDetailOverviewScreen_title__x8Kq2">Startup Pitch Night 2025</h1>
      <dl>
        <div class="EventInfoItem_component__a1">
          <dt>日時</dt>
          <dd class="EventInfoItem_value__Zz91c">2025年6月27日(金) 16:00 - 17:00</dd>
        </div>
        <div class="EventInfoItem_component__a1">
          <dt>定員</dt>
          <dd class="EventInfoItem_value__Zz91c">50名</dd>
        </div>
        <div class="EventInfoItem_component__a1">
          <dt>場所</dt>
          <dd class="EventInfoItem_value__Zz91c">東京都大田区羽田空港1丁目 Zone K 2階</dd>
        </div>
      </dl>
      <div class="RichText_component__Qp7Lm">
        <p>スタートアップのピッチイベントです。</p>
        <p>登壇者:<br>山田   太郎<br>佐藤 花子</p>
        <p>   </p>
        <p>お気軽にご参加ください。</p>
      </div>
    </div>
  </body>
</html>
"""

GENERIC_ONLY_HTML = """
<html>
  <head><title>Community Meetup Tokyo</title></head>
  <body><div class="nav">Hi</div></body>
</html>
"""


@pytest.fixture
def fixed_clock():
    def _clock() -> datetime:
        return datetime(2026, 3, 10, 1, 15, 42, tzinfo=timezone.utc)

    return _clock


@pytest.fixture
def interpreter(fixed_clock) -> DateTimeInterpreter:
    return DateTimeInterpreter(TOKYO, clock=fixed_clock)


@pytest.fixture
def strict_interpreter(fixed_clock) -> DateTimeInterpreter:
    return DateTimeInterpreter(
        TOKYO,
        unrecognized_policy=UnrecognizedDatePolicy.raise_error,
        clock=fixed_clock,
    )
