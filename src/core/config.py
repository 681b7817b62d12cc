from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    app_name: str = "fourslink-calendar"
    app_env: str = "dev"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    log_level: str = "INFO"

    source_domain: str = "4s.link"
    event_timezone: str = "Asia/Tokyo"

    fetch_mode: Literal["rendered", "static"] = "rendered"
    fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    )
    fetch_navigation_timeout_ms: int = 30000
    fetch_marker_timeout_ms: int = 10000
    fetch_content_marker: str = '[class*="EventDetailOverviewScreen_title"]'
    fetch_static_timeout_seconds: float = 30.0

    unrecognized_date_policy: Literal["default_window", "raise"] = "default_window"

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    @property
    def event_tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.event_timezone)


settings = Settings()
