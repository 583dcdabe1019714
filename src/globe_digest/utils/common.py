from __future__ import annotations

import datetime
import html
import re

from bs4 import BeautifulSoup

_WS_RE = re.compile(r"\s+")  # 연속 공백을 단일 공백으로 축약
_TAG_HINT_RE = re.compile(r"<[a-zA-Z/!][^>]*>")  # HTML 태그가 섞였는지 빠르게 판단


def clean_text(s: str) -> str:
    """HTML 엔티티/태그를 제거하고 공백을 정리한 깔끔한 텍스트로 정규화."""
    if not s:
        return ""
    # 1) &nbsp; 같은 HTML 엔티티를 문자로 변환
    s = html.unescape(s)

    # 2) NBSP(유니코드) -> 일반 스페이스로
    s = s.replace("\u00a0", " ")

    # 3) 피드 description에 섞여 들어온 HTML 제거
    if _TAG_HINT_RE.search(s):
        s = BeautifulSoup(s, "html.parser").get_text(" ")

    # 4) 공백 정리
    return _WS_RE.sub(" ", s).strip()


def split_sentences(text: str, delimiter: str = ". ") -> list[str]:
    # "마침표 + 공백" 기준의 단순 문장 분리. 구분자는 결과에서 제거된다.
    if not text:
        return []
    return text.split(delimiter)


def utc_now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0).isoformat()
