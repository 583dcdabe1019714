from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import requests

from globe_digest.core.config import MYMEMORY_API_BASE, TRANSLATE_TIMEOUT_SEC, TRANSLATION_SOURCE_LANG
from globe_digest.core.constants import TRANSLATION_SERVICE
from globe_digest.core.errors import ParseError, PipelineError, TransportError

logger = logging.getLogger(__name__)

GetFunc = Callable[..., Any]


def _extract_translated_text(payload: Any) -> str:
    # {"responseData": {"translatedText": "..."}} 형태에서 번역문만 추출
    if not isinstance(payload, dict):
        return ""
    data = payload.get("responseData")
    if not isinstance(data, dict):
        return ""
    text = data.get("translatedText")
    return text.strip() if isinstance(text, str) else ""


class TranslationClient:
    def __init__(
        self,
        *,
        api_base: str = MYMEMORY_API_BASE,
        source_lang: str = TRANSLATION_SOURCE_LANG,
        timeout_sec: float = TRANSLATE_TIMEOUT_SEC,
        get_func: GetFunc | None = None,
    ) -> None:
        self._api_base = api_base
        self._source_lang = source_lang
        self._timeout_sec = timeout_sec
        self._get = get_func or requests.get

    def language_pair(self, target_language: str) -> str:
        return f"{self._source_lang}|{(target_language or '').strip().lower()}"

    def translate(self, text: str, target_language: str) -> tuple[Optional[str], Optional[PipelineError]]:
        """번역 서비스에 한 번 요청. (번역문, None) 또는 (None, 오류)."""
        try:
            resp = self._get(
                self._api_base,
                params={"q": text, "langpair": self.language_pair(target_language)},
                timeout=self._timeout_sec,
            )
        except requests.Timeout as e:
            return None, TransportError(str(e), service=TRANSLATION_SERVICE, timeout=True)
        except requests.RequestException as e:
            return None, TransportError(f"{type(e).__name__}: {e}", service=TRANSLATION_SERVICE)

        if not resp.ok:
            return None, TransportError(
                f"{resp.status_code} {(resp.text or '')[:200]}",
                service=TRANSLATION_SERVICE,
                status=resp.status_code,
            )
        try:
            payload = resp.json()
        except ValueError:
            return None, ParseError("응답 JSON 파싱 실패", service=TRANSLATION_SERVICE)

        translated = _extract_translated_text(payload)
        if not translated:
            return None, ParseError("translatedText 없음", service=TRANSLATION_SERVICE)
        return translated, None
