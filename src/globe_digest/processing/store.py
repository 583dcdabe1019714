from __future__ import annotations

import copy
import threading
from typing import Iterable, Optional

from globe_digest.models.feed import EnrichedArticle
from globe_digest.processing.types import MergeStats


def _link_of(item: EnrichedArticle) -> str:
    return str(item.get("link") or "").strip()


class EnrichmentStore:
    """순서가 보존되고 link 기준으로 중복이 제거된 기사 목록.

    모든 변경은 내부 락으로 직렬화된다. 중복 정책은 first-seen-wins:
    이미 있는 link는 절대 덮어쓰지 않는다. link가 비어 있는 기사는 식별할 수
    없으므로 중복 검사 없이 그대로 추가된다.
    """

    def __init__(self) -> None:
        self._items: list[EnrichedArticle] = []
        self._links: set[str] = set()
        self._revision = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def revision(self) -> int:
        # reset(replace)마다 증가. 같은 revision 안에서는 인덱스가 같은 기사를 가리킨다.
        with self._lock:
            return self._revision

    def articles(self) -> list[EnrichedArticle]:
        with self._lock:
            return [copy.copy(item) for item in self._items]

    def get(self, index: int) -> EnrichedArticle:
        with self._lock:
            return copy.copy(self._items[index])

    def find_index(self, link: str) -> Optional[int]:
        key = (link or "").strip()
        if not key:
            return None
        with self._lock:
            for idx, item in enumerate(self._items):
                if _link_of(item) == key:
                    return idx
        return None

    def _merge_locked(self, incoming: Iterable[EnrichedArticle]) -> MergeStats:
        added = 0
        dropped = 0
        for item in incoming:
            link = _link_of(item)
            if link and link in self._links:
                dropped += 1
                continue
            if link:
                self._links.add(link)
            self._items.append(item)
            added += 1
        return MergeStats(added=added, dropped=dropped)

    def replace(self, items: Iterable[EnrichedArticle]) -> MergeStats:
        # reset 사이클: 기존 내용을 통째로 교체 (새 배치 내부 중복도 제거)
        with self._lock:
            self._items = []
            self._links = set()
            self._revision += 1
            return self._merge_locked(items)

    def append(self, items: Iterable[EnrichedArticle]) -> MergeStats:
        # 이어받기 사이클: 기존 항목 뒤에 새 항목만 붙인다
        with self._lock:
            return self._merge_locked(items)

    def merge(self, items: Iterable[EnrichedArticle], *, reset: bool) -> MergeStats:
        return self.replace(items) if reset else self.append(items)

    def set_translation(
        self,
        index: int,
        translated: str,
        language: str | None = None,
        *,
        revision: int | None = None,
    ) -> Optional[EnrichedArticle]:
        """기존 기사에 대한 유일한 변경 경로. summary는 건드리지 않는다.

        revision이 주어지고 그 사이 스토어가 교체됐다면 아무것도 쓰지 않고 None을 돌려준다.
        """
        with self._lock:
            if revision is not None and revision != self._revision:
                return None
            item = self._items[index]
            item["translatedSummary"] = translated
            item["translatedLanguage"] = language
            return copy.copy(item)

    def get_translation(self, index: int, language: str) -> Optional[str]:
        with self._lock:
            item = self._items[index]
            if item.get("translatedLanguage") != language:
                return None
            return item.get("translatedSummary")

    def display_summary(self, index: int) -> str:
        # 화면/음성에 쓰일 텍스트: 번역본이 있으면 번역본
        with self._lock:
            item = self._items[index]
            return str(item.get("translatedSummary") or item.get("summary") or "")
