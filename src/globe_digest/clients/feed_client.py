from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from urllib.parse import quote, urlencode

import requests

from globe_digest.clients.feed_client_config import FeedClientConfig
from globe_digest.core.constants import FEED_SERVICE
from globe_digest.core.errors import ParseError, PipelineError, TransportError
from globe_digest.models.feed import QueryState, RawArticle

logger = logging.getLogger(__name__)

GetFunc = Callable[..., Any]


# -----------------------------
# Public return types
# -----------------------------
@dataclass(frozen=True)
class FeedPage:
    articles: list[RawArticle]
    next_page: Optional[str]
    total_results: Optional[int] = None
    notes: list[str] = field(default_factory=list)


def build_feed_url(
    query: QueryState,
    *,
    api_key: str,
    cursor: Optional[str] = None,
    config: FeedClientConfig | None = None,
) -> str:
    """QueryState(+커서)로 피드 요청 URL을 만든다. 커서는 해석하지 않고 그대로 붙인다."""
    cfg = config or FeedClientConfig()
    q = query.normalized()
    params: list[tuple[str, str]] = [
        ("apikey", api_key),
        ("country", q.country),
        ("language", q.language),
        ("category", q.category),
    ]
    if q.search_text:
        params.append((cfg.search_param, q.search_text))
    if cursor:
        params.append((cfg.page_param, cursor))
    return f"{cfg.api_base}?{urlencode(params, quote_via=quote)}"


def _coerce_cursor(value: Any) -> Optional[str]:
    if value is None:
        return None
    cursor = str(value).strip()
    return cursor or None


def parse_feed_payload(payload: Any) -> FeedPage:
    """피드 JSON을 FeedPage로 변환. 형태가 어긋나면 ParseError."""
    if not isinstance(payload, dict):
        raise ParseError("응답이 JSON 객체가 아님", service=FEED_SERVICE)
    if payload.get("status") == "error":
        results = payload.get("results")
        message = results.get("message", "") if isinstance(results, dict) else str(results or "")
        raise ParseError(f"피드 오류 응답: {message}", service=FEED_SERVICE)

    results = payload.get("results")
    if results is None:
        results = []
    if not isinstance(results, list):
        raise ParseError("results가 배열이 아님", service=FEED_SERVICE)

    notes: list[str] = []
    articles: list[RawArticle] = []
    for idx, raw in enumerate(results):
        if not isinstance(raw, dict):
            notes.append(f"skip_non_object:{idx}")
            continue
        articles.append(raw)  # type: ignore[arg-type]

    total = payload.get("totalResults")
    return FeedPage(
        articles=articles,
        next_page=_coerce_cursor(payload.get("nextPage")),
        total_results=total if isinstance(total, int) else None,
        notes=notes,
    )


class NewsFeedClient:
    def __init__(
        self,
        *,
        api_key: str,
        config: FeedClientConfig | None = None,
        get_func: GetFunc | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._api_key = api_key
        self._config = config or FeedClientConfig()
        self._get = get_func or requests.get
        self._log = log or logger

    def fetch_page(
        self,
        query: QueryState,
        cursor: Optional[str] = None,
    ) -> tuple[Optional[FeedPage], Optional[PipelineError]]:
        url = build_feed_url(query, api_key=self._api_key, cursor=cursor, config=self._config)
        try:
            resp = self._get(
                url,
                headers={"Accept": "application/json", "User-Agent": self._config.user_agent},
                timeout=self._config.timeout_sec,
            )
        except requests.Timeout as e:
            self._log.warning("피드 요청 타임아웃: country=%s category=%s", query.country, query.category)
            return None, TransportError(str(e), service=FEED_SERVICE, timeout=True)
        except requests.RequestException as e:
            self._log.warning("피드 요청 실패: %s", type(e).__name__)
            return None, TransportError(f"{type(e).__name__}: {e}", service=FEED_SERVICE)

        if not resp.ok:
            body = (resp.text or "")[: self._config.error_body_log_chars]
            self._log.warning("피드 HTTP 오류: %s %s", resp.status_code, body)
            return None, TransportError(f"{resp.status_code} {body}", service=FEED_SERVICE, status=resp.status_code)

        try:
            payload = resp.json()
        except ValueError:
            self._log.warning("피드 응답 JSON 파싱 실패")
            return None, ParseError("응답 JSON 파싱 실패", service=FEED_SERVICE)

        try:
            page = parse_feed_payload(payload)
        except ParseError as e:
            self._log.warning("피드 응답 형식 오류: %s", e.to_note())
            return None, e

        if page.notes:
            self._log.info("피드 응답 정리: %s", ", ".join(page.notes[:10]))
        return page, None
