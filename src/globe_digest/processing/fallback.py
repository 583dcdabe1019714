from __future__ import annotations

from globe_digest.core.config import FALLBACK_SENTENCE_COUNT
from globe_digest.core.constants import SENTENCE_DELIMITER
from globe_digest.utils import split_sentences


def summarize_fallback(text: str, max_sentences: int = FALLBACK_SENTENCE_COUNT) -> str:
    """요약 서비스를 쓸 수 없을 때의 오프라인 요약: 앞의 N개 문장만 남긴다.

    순수 함수이며 실패하지 않는다. 빈 입력은 빈 출력.
    """
    if not text:
        return ""
    sentences = split_sentences(text, SENTENCE_DELIMITER)
    if len(sentences) <= max_sentences:
        return text
    return SENTENCE_DELIMITER.join(sentences[: max(1, max_sentences)])


def summarize_fallback_batch(texts: list[str], max_sentences: int = FALLBACK_SENTENCE_COUNT) -> list[str]:
    return [summarize_fallback(t, max_sentences) for t in texts]
