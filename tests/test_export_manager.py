from __future__ import annotations

import json
import os

from globe_digest.export import export_manager as em
from globe_digest.models.feed import PaginationState, QueryState


def _articles() -> list[dict]:
    return [
        {
            "title": "A",
            "link": "http://a",
            "source_id": "wire",
            "summary": "Short.",
            "translatedSummary": "Court.",
            "translatedLanguage": "fr",
            "content": "should not be exported",
        },
        {"title": "B", "link": "http://b", "summary": "Other.", "translatedSummary": None},
    ]


def test_export_writes_snapshot_atomically(tmp_path) -> None:
    path = tmp_path / "out" / "feed.json"
    query = QueryState("in", "en", "top", "ipl")
    pagination = PaginationState(next_page_cursor="p2", has_more=True)

    snapshot = em.export_feed_snapshot_json(_articles(), str(path), query, pagination)

    assert path.exists()
    assert not os.path.exists(f"{path}.tmp")
    loaded = json.loads(path.read_text(encoding="utf-8"))
    assert loaded == snapshot
    assert loaded["query"] == {"country": "in", "language": "en", "category": "top", "searchText": "ipl"}
    assert loaded["pagination"] == {"nextPage": "p2", "hasMore": True}
    assert [it["link"] for it in loaded["items"]] == ["http://a", "http://b"]
    assert "content" not in loaded["items"][0]
    assert loaded["items"][1]["translatedSummary"] is None
    assert loaded["lastUpdatedAt"]
