import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.crawlers.errors import FetchError, InputError, NoRecognizedPatternError
from src.crawlers.fetchers.base import BaseDocumentFetcher
from src.crawlers.fetchers.factory import build_fetcher
from src.schemas.event import EventRead, ParseEventRequest, ParseEventResponse
from src.services.event_service import parse_event_from_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])

FETCH_FAILED_MESSAGE = "イベント情報の取得に失敗しました"
DATE_UNKNOWN_MESSAGE = "イベントの日時を特定できませんでした"


def get_fetcher() -> BaseDocumentFetcher:
    return build_fetcher()


def _failure(status_code: int, message: str) -> JSONResponse:
    body = ParseEventResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.post("/parse-event", response_model=ParseEventResponse)
async def parse_event(
    payload: ParseEventRequest,
    fetcher: BaseDocumentFetcher = Depends(get_fetcher),
):
    try:
        record = await parse_event_from_url(payload.url, fetcher=fetcher)
    except InputError as exc:
        return _failure(400, str(exc))
    except NoRecognizedPatternError as exc:
        logger.warning("[parse-event] %s", exc)
        return _failure(422, DATE_UNKNOWN_MESSAGE)
    except FetchError as exc:
        logger.error("[parse-event] fetch failed url=%s error=%r cause=%r", exc.url, exc, exc.__cause__)
        return _failure(502, FETCH_FAILED_MESSAGE)
    except Exception:
        logger.exception("[parse-event] unexpected failure url=%s", payload.url)
        return _failure(500, FETCH_FAILED_MESSAGE)

    return ParseEventResponse(success=True, event=EventRead.from_record(record))
