from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from globe_digest.models.feed import EnrichedArticle, FeedSnapshot, PaginationState, QueryState
from globe_digest.utils import utc_now_iso

# 스냅샷에 남길 기사 필드 (순서 유지)
_EXPORT_FIELDS = (
    "title",
    "link",
    "source_id",
    "pubDate",
    "summary",
    "translatedSummary",
    "translatedLanguage",
)


def _atomic_write_json(path: str, payload: Any) -> None:
    """임시 파일로 저장 후 원자적 교체."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    os.replace(tmp_path, path)


def _export_item(article: EnrichedArticle) -> EnrichedArticle:
    item: dict[str, Any] = {}
    for key in _EXPORT_FIELDS:
        if key in article:
            item[key] = article[key]  # type: ignore[literal-required]
    item.setdefault("translatedSummary", None)
    return item  # type: ignore[return-value]


def build_feed_snapshot(
    articles: list[EnrichedArticle],
    query: QueryState,
    pagination: PaginationState,
) -> FeedSnapshot:
    return {
        "query": query.to_dict(),
        "pagination": pagination.to_dict(),
        "lastUpdatedAt": utc_now_iso(),
        "items": [_export_item(a) for a in articles],
    }


def export_feed_snapshot_json(
    articles: list[EnrichedArticle],
    output_path: str,
    query: QueryState,
    pagination: PaginationState,
) -> FeedSnapshot:
    """현재 스토어 내용을 스냅샷 스키마로 변환해 JSON으로 저장."""
    snapshot = build_feed_snapshot(articles, query, pagination)
    _atomic_write_json(output_path, snapshot)
    return snapshot
