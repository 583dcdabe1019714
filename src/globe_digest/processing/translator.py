from __future__ import annotations

import logging

from globe_digest.clients.translation_client import TranslationClient
from globe_digest.core.errors import ParseError

logger = logging.getLogger(__name__)


class SummaryTranslator:
    """번역 서비스 래퍼. 실패 시 원문을 그대로 돌려준다.

    호출 간 메모이제이션은 하지 않는다. 이미 번역된 기사에 대해 다시 호출하지 않는
    것은 호출자(스토어/오케스트레이터)의 몫이다.
    """

    def __init__(self, *, client: TranslationClient | None = None) -> None:
        self._client = client or TranslationClient()

    def translate(self, text: str, target_language: str) -> str:
        if not text or not (target_language or "").strip():
            return text
        try:
            translated, err = self._client.translate(text, target_language)
        except Exception:
            logger.exception("번역 호출 중 예기치 않은 오류 (lang=%s)", target_language)
            return text
        if err is not None:
            if isinstance(err, ParseError):
                logger.warning("번역 응답 형식 오류, 원문 유지: %s", err.to_note())
            else:
                logger.warning("번역 실패, 원문 유지: %s", err.to_note())
            return text
        return translated or text


def translate(text: str, target_language: str) -> str:
    return SummaryTranslator().translate(text, target_language)
