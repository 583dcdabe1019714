from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from globe_digest.core.config import OPENAI_API_BASE, OPENAI_MODEL, SUMMARY_TIMEOUT_SEC
from globe_digest.core.constants import SUMMARY_SERVICE
from globe_digest.core.errors import ParseError, PipelineError, TransportError

logger = logging.getLogger(__name__)

_AI_UNAVAILABLE_LOGGED: set[str] = set()

PostFunc = Callable[..., Any]


def log_ai_unavailable(reason: str) -> None:
    # AI 요약 비활성 사유를 중복 없이 로그 출력
    if reason in _AI_UNAVAILABLE_LOGGED:
        return
    logger.warning("AI 요약 비활성: %s", reason)
    _AI_UNAVAILABLE_LOGGED.add(reason)


def _extract_chat_text(payload: dict[str, Any]) -> str:
    # chat/completions 응답에서 첫 번째 메시지 본문만 추출
    try:
        return (payload["choices"][0]["message"]["content"] or "").strip()
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


def chat_complete(
    system_prompt: str,
    user_prompt: str,
    *,
    api_key: str,
    model: str = OPENAI_MODEL,
    api_base: str = OPENAI_API_BASE,
    timeout_sec: float = SUMMARY_TIMEOUT_SEC,
    post_func: PostFunc | None = None,
) -> tuple[str | None, PipelineError | None]:
    """요약 서비스에 한 번만 요청한다. 재시도 없음.

    Returns:
        (text, None) on success, (None, TransportError | ParseError) otherwise.
    """
    post = post_func or requests.post
    url = f"{api_base.rstrip('/')}/chat/completions"
    request_payload = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
    }
    try:
        resp = post(
            url,
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            json=request_payload,
            timeout=timeout_sec,
        )
    except requests.Timeout as e:
        return None, TransportError(str(e), service=SUMMARY_SERVICE, timeout=True)
    except requests.RequestException as e:
        return None, TransportError(f"{type(e).__name__}: {e}", service=SUMMARY_SERVICE)

    if not resp.ok:
        return None, TransportError(
            f"{resp.status_code} {resp.text[:200]}",
            service=SUMMARY_SERVICE,
            status=resp.status_code,
        )

    try:
        data = resp.json()
    except ValueError:
        return None, ParseError("응답 JSON 파싱 실패", service=SUMMARY_SERVICE)

    text = _extract_chat_text(data) if isinstance(data, dict) else ""
    if not text:
        return None, ParseError("응답 텍스트 비어있음", service=SUMMARY_SERVICE)
    return text, None
