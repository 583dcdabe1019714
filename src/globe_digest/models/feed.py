from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class RawArticle(TypedDict, total=False):
    title: str
    description: str | None
    content: str | None
    source_id: str | None
    link: str
    pubDate: NotRequired[str]
    image_url: NotRequired[str | None]
    category: NotRequired[list[str]]


class EnrichedArticle(RawArticle, total=False):
    summary: str
    translatedSummary: str | None
    translatedLanguage: NotRequired[str | None]


class FeedQuery(TypedDict):
    country: str
    language: str
    category: str
    searchText: str


class FeedPagination(TypedDict):
    nextPage: str | None
    hasMore: bool


class FeedSnapshot(TypedDict):
    query: FeedQuery
    pagination: FeedPagination
    lastUpdatedAt: str
    items: list[EnrichedArticle]


@dataclass(frozen=True)
class QueryState:
    country: str = "in"
    language: str = "en"
    category: str = "top"
    search_text: str = ""

    def normalized(self) -> "QueryState":
        # 카테고리는 소문자로, 검색어는 양끝 공백 제거
        return QueryState(
            country=(self.country or "").strip().lower(),
            language=(self.language or "").strip().lower(),
            category=(self.category or "").strip().lower(),
            search_text=(self.search_text or "").strip(),
        )

    def with_changes(self, **changes: Any) -> "QueryState":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> FeedQuery:
        return {
            "country": self.country,
            "language": self.language,
            "category": self.category,
            "searchText": self.search_text,
        }


@dataclass
class PaginationState:
    next_page_cursor: str | None = None
    has_more: bool = False

    def update_from_cursor(self, cursor: Any) -> None:
        # 커서는 해석하지 않고 그대로 보관한다.
        if cursor is None or cursor == "":
            self.next_page_cursor = None
            self.has_more = False
            return
        self.next_page_cursor = str(cursor)
        self.has_more = True

    def reset(self) -> None:
        self.next_page_cursor = None
        self.has_more = False

    def to_dict(self) -> FeedPagination:
        return {"nextPage": self.next_page_cursor, "hasMore": self.has_more}
