from __future__ import annotations

import logging
import re
from typing import Callable

from globe_digest.core.config import FALLBACK_SENTENCE_COUNT, OPENAI_API_KEY, SUMMARY_ENABLED
from globe_digest.core.constants import SUMMARY_SYSTEM_PROMPT
from globe_digest.core.errors import ParseError, PipelineError, TransportError
from globe_digest.processing.fallback import summarize_fallback
from globe_digest.processing.llm_client import chat_complete, log_ai_unavailable

logger = logging.getLogger(__name__)

# 줄 머리의 "N. " / "N) " 번호 표기. 번호를 키로 쓰므로 순서가 뒤섞여도 매칭된다.
_NUMBERED_ITEM_RE = re.compile(r"^[ \t]*(\d+)[.)]\s+", re.MULTILINE)

ChatFunc = Callable[..., tuple[str | None, PipelineError | None]]


def build_numbered_prompt(texts: list[str]) -> str:
    return "\n\n".join(f"{i}. {text}" for i, text in enumerate(texts, start=1))


def parse_numbered_response(response: str) -> dict[int, str]:
    """번호 목록 응답을 {번호: 본문}으로 분해. 같은 번호가 반복되면 먼저 나온 것을 쓴다."""
    segments: dict[int, str] = {}
    if not response:
        return segments
    matches = list(_NUMBERED_ITEM_RE.finditer(response))
    for pos, match in enumerate(matches):
        end = matches[pos + 1].start() if pos + 1 < len(matches) else len(response)
        number = int(match.group(1))
        body = response[match.end() : end].strip()
        if body and number not in segments:
            segments[number] = body
    return segments


class BatchSummarizer:
    def __init__(
        self,
        *,
        api_key: str | None = None,
        chat_func: ChatFunc = chat_complete,
        fallback_func: Callable[[str, int], str] = summarize_fallback,
        max_sentences: int = FALLBACK_SENTENCE_COUNT,
        enabled: bool = True,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._chat = chat_func
        self._fallback = fallback_func
        self._max_sentences = max_sentences
        self._enabled = enabled

    @property
    def available(self) -> bool:
        return self._enabled and bool(self._api_key)

    def _fallback_all(self, texts: list[str]) -> list[str]:
        return [self._fallback(t, self._max_sentences) for t in texts]

    def summarize_batch(self, texts: list[str]) -> list[str]:
        """입력과 같은 길이/순서의 요약 목록을 반환한다. 예외는 밖으로 나가지 않는다."""
        texts = list(texts)
        if not texts:
            return []
        if not self.available:
            if not self._api_key:
                log_ai_unavailable("OPENAI_API_KEY 미설정")
            return self._fallback_all(texts)

        try:
            response, err = self._chat(
                SUMMARY_SYSTEM_PROMPT,
                build_numbered_prompt(texts),
                api_key=self._api_key,
            )
        except Exception as e:  # chat_func 구현이 예외를 던져도 배치를 깨뜨리지 않는다.
            logger.exception("요약 호출 중 예기치 않은 오류")
            err, response = TransportError(f"{type(e).__name__}: {e}"), None

        if err is not None or response is None:
            if isinstance(err, ParseError):
                logger.warning("요약 응답 파싱 실패, 폴백 요약 사용: %s", err.to_note())
            else:
                logger.warning("요약 서비스 호출 실패, 폴백 요약 사용: %s", err.to_note() if err else "empty")
            return self._fallback_all(texts)

        segments = parse_numbered_response(response)
        missing = [i for i in range(1, len(texts) + 1) if i not in segments]
        if missing:
            logger.info("요약 응답에 누락된 항목 %d개, 원문으로 대체: %s", len(missing), missing[:10])
        # 누락된 번호는 해당 항목만 원문 그대로 사용
        return [segments.get(i, text) for i, text in enumerate(texts, start=1)]

    __call__ = summarize_batch


def build_default_summarizer() -> BatchSummarizer:
    return BatchSummarizer(api_key=OPENAI_API_KEY, enabled=SUMMARY_ENABLED)


def summarize_batch(texts: list[str]) -> list[str]:
    return build_default_summarizer().summarize_batch(texts)
