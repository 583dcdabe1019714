from __future__ import annotations

from dataclasses import dataclass

from globe_digest.core.config import FEED_TIMEOUT_SEC, NEWSDATA_API_BASE, _env_int


@dataclass(frozen=True)
class FeedClientConfig:
    api_base: str = NEWSDATA_API_BASE
    timeout_sec: float = FEED_TIMEOUT_SEC
    page_param: str = "page"
    search_param: str = "q"
    # 로그에 남길 응답 본문 길이
    error_body_log_chars: int = _env_int("FEED_ERROR_BODY_LOG_CHARS", 200)
    user_agent: str = "globe-digest/0.1 (+https://newsdata.io)"
