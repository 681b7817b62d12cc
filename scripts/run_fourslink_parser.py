#!/usr/bin/env python3
import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from bs4 import BeautifulSoup

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.core.logging import configure_logging  # noqa: E402
from src.crawlers.errors import FetchError, InputError, NoRecognizedPatternError  # noqa: E402
from src.crawlers.extractors.datetime_parser import UnrecognizedDatePolicy  # noqa: E402
from src.crawlers.fetchers.factory import build_fetcher  # noqa: E402
from src.crawlers.pipeline.runner import build_interpreter, extract_from_event_page  # noqa: E402
from src.crawlers.pipeline.types import EventRecord  # noqa: E402
from src.services.calendar_links import generate_google_calendar_url  # noqa: E402
from src.services.event_service import parse_events_from_urls, validate_event_url  # noqa: E402


DEFAULT_CACHE_DIR = PROJECT_ROOT / "data" / "html" / "fourslink"


def _json_ready(record: EventRecord) -> dict:
    out = asdict(record)
    for key in ("start_at", "end_at"):
        value = out.get(key)
        if isinstance(value, datetime):
            out[key] = value.isoformat()
    out["calendar_url"] = generate_google_calendar_url(record)
    return out


def _stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _write_html_cache(html: str, cache_dir: Path, index: int) -> Path:
    cache_dir.mkdir(parents=True, exist_ok=True)
    output_path = cache_dir / f"fourslink_event_{_stamp()}_{index}.html"
    output_path.write_text(html, encoding="utf-8")
    return output_path


def _write_text_dump(html: str, dump_dir: Path, *, stem: str) -> Path:
    dump_dir.mkdir(parents=True, exist_ok=True)
    output_path = dump_dir / f"{stem}.txt"
    soup = BeautifulSoup(html, "html.parser")
    lines = [line.strip() for line in soup.get_text("\n").splitlines() if line.strip()]
    output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return output_path


async def _parse_local_file(args: argparse.Namespace, interpreter) -> int:
    input_path = Path(args.input_html)
    if not input_path.exists():
        print(f"Input HTML file not found: {input_path}")
        return 1
    source_url = args.url[0] if args.url else input_path.resolve().as_uri()
    print(f"Loading event HTML from file: {input_path}")
    html = input_path.read_text(encoding="utf-8")

    if args.dump_text:
        dump_path = _write_text_dump(html, Path(args.cache_dir), stem=input_path.stem)
        print(f"Saved text dump to: {dump_path}")

    try:
        record = extract_from_event_page(source_url, html, interpreter=interpreter)
    except NoRecognizedPatternError as exc:
        print(f"Date parse failed: {exc}")
        return 1
    print(json.dumps(_json_ready(record), ensure_ascii=False))
    return 0


async def _parse_remote(args: argparse.Namespace, interpreter) -> int:
    fetcher = build_fetcher("static" if args.static else "rendered")

    if args.save_html or args.dump_text:
        # fetch once up front so the raw page can be kept for parser debugging
        exit_code = 0
        for index, url in enumerate(args.url):
            try:
                event_url = validate_event_url(url)
                html = await fetcher.fetch(event_url)
            except (InputError, FetchError) as exc:
                print(f"Fetch failed ({url}): {exc}")
                exit_code = 1
                continue
            if args.save_html:
                cache_path = _write_html_cache(html, Path(args.cache_dir), index)
                print(f"Saved raw HTML cache to: {cache_path}")
            if args.dump_text:
                dump_path = _write_text_dump(html, Path(args.cache_dir), stem=f"fourslink_event_{_stamp()}_{index}")
                print(f"Saved text dump to: {dump_path}")
            try:
                record = extract_from_event_page(event_url, html, interpreter=interpreter)
            except NoRecognizedPatternError as exc:
                print(f"Date parse failed ({url}): {exc}")
                exit_code = 1
                continue
            print(json.dumps(_json_ready(record), ensure_ascii=False))
        return exit_code

    results = await parse_events_from_urls(args.url, fetcher=fetcher, interpreter=interpreter)
    exit_code = 0
    for url, result in zip(args.url, results):
        if isinstance(result, Exception):
            print(f"Extraction failed ({url}): {result}")
            exit_code = 1
            continue
        print(json.dumps(_json_ready(result), ensure_ascii=False))
    return exit_code


async def main() -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Fetch and parse 4s.link event pages. "
            "Print the extracted event records with their Google Calendar links."
        )
    )
    parser.add_argument("--url", action="append", default=[], help="Event URL (repeatable).")
    parser.add_argument("--input-html", default=None, help="Parse a saved HTML file instead of fetching.")
    parser.add_argument(
        "--static",
        action="store_true",
        help="Use a plain HTTP fetch instead of the headless browser.",
    )
    parser.add_argument(
        "--save-html",
        action="store_true",
        help="Save fetched raw HTML to cache directory for debugging.",
    )
    parser.add_argument(
        "--cache-dir",
        default=str(DEFAULT_CACHE_DIR),
        help="Directory used by --save-html and --dump-text (default: data/html/fourslink).",
    )
    parser.add_argument(
        "--dump-text",
        action="store_true",
        help="Write normalized page text lines to a .txt file for parser debugging.",
    )
    parser.add_argument(
        "--strict-dates",
        action="store_true",
        help="Fail instead of using a default time window when no date is recognized.",
    )
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    configure_logging(args.log_level)
    policy = UnrecognizedDatePolicy.raise_error if args.strict_dates else None
    interpreter = build_interpreter(policy)

    if args.input_html:
        return await _parse_local_file(args, interpreter)

    if not args.url:
        parser.error("pass --url at least once, or --input-html")

    return await _parse_remote(args, interpreter)


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
