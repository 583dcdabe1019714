from __future__ import annotations

from typing import Optional
from urllib.parse import quote, urlencode

from globe_digest.core.config import VOICERSS_API_BASE, VOICERSS_API_KEY, VOICERSS_LOCALE


def build_speech_url(
    text: str,
    *,
    api_key: Optional[str] = None,
    locale: str = VOICERSS_LOCALE,
    api_base: str = VOICERSS_API_BASE,
) -> Optional[str]:
    """음성 합성 재생 URL을 만든다. 자격 증명이나 텍스트가 없으면 None."""
    key = (api_key if api_key is not None else VOICERSS_API_KEY).strip()
    if not key or not text:
        return None
    params = [("key", key), ("hl", locale), ("src", text)]
    return f"{api_base}?{urlencode(params, quote_via=quote)}"
