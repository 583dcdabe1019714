from __future__ import annotations

from globe_digest.processing.store import EnrichmentStore


def _item(link: str, summary: str = "s", **extra) -> dict:
    return {"title": link.upper(), "link": link, "summary": summary, "translatedSummary": None, **extra}


def test_append_keeps_first_seen_and_counts_new_links() -> None:
    store = EnrichmentStore()
    store.replace([_item("a", "first a"), _item("b")])
    stats = store.append([_item("a", "second a"), _item("c")])
    assert (stats.added, stats.dropped) == (1, 1)
    assert [a["link"] for a in store.articles()] == ["a", "b", "c"]
    assert store.get(0)["summary"] == "first a"


def test_replace_discards_previous_contents() -> None:
    store = EnrichmentStore()
    store.replace([_item("a"), _item("b"), _item("c")])
    stats = store.merge([_item("x"), _item("a")], reset=True)
    assert stats.added == 2
    assert [a["link"] for a in store.articles()] == ["x", "a"]


def test_duplicates_inside_one_batch_are_dropped() -> None:
    store = EnrichmentStore()
    stats = store.replace([_item("a", "one"), _item("a", "two"), _item("b")])
    assert (stats.added, stats.dropped) == (2, 1)
    assert store.get(0)["summary"] == "one"


def test_articles_without_link_are_never_deduplicated() -> None:
    store = EnrichmentStore()
    store.replace([_item(""), _item("")])
    assert len(store) == 2
    assert store.find_index("") is None


def test_translation_never_touches_summary_and_last_request_wins() -> None:
    store = EnrichmentStore()
    store.replace([_item("a", "Canonical summary")])
    store.set_translation(0, "Résumé", "fr")
    store.set_translation(0, "Zusammenfassung", "de")
    item = store.get(0)
    assert item["summary"] == "Canonical summary"
    assert item["translatedSummary"] == "Zusammenfassung"
    assert store.get_translation(0, "de") == "Zusammenfassung"
    assert store.get_translation(0, "fr") is None
    assert store.display_summary(0) == "Zusammenfassung"


def test_returned_articles_are_copies() -> None:
    store = EnrichmentStore()
    store.replace([_item("a", "keep")])
    snapshot = store.articles()
    snapshot[0]["summary"] = "mutated"
    assert store.get(0)["summary"] == "keep"


def test_find_index_after_replace() -> None:
    store = EnrichmentStore()
    store.replace([_item("a"), _item("b")])
    assert store.find_index("b") == 1
    store.replace([_item("c")])
    assert store.find_index("b") is None
    stats = store.append([_item("b")])
    assert stats.added == 1
    assert store.find_index("b") == 1


def test_translation_for_replaced_contents_is_rejected() -> None:
    store = EnrichmentStore()
    store.replace([_item("", "old summary")])
    revision = store.revision
    store.append([_item("", "appended")])
    assert store.revision == revision

    store.replace([_item("", "new summary")])
    assert store.set_translation(0, "stale", "fr", revision=revision) is None
    assert store.get(0)["translatedSummary"] is None

    updated = store.set_translation(0, "fresh", "fr", revision=store.revision)
    assert updated is not None
    assert updated["translatedSummary"] == "fresh"
