from __future__ import annotations

import requests

from globe_digest.core.errors import ParseError, TransportError
from globe_digest.processing import llm_client
from globe_digest.processing.summarizer import (
    BatchSummarizer,
    build_numbered_prompt,
    parse_numbered_response,
)


class _Chat:
    def __init__(self, response: str | None = None, error: Exception | None = None, raises: bool = False) -> None:
        self._response = response
        self._error = error
        self._raises = raises
        self.calls: list[tuple[str, str, dict]] = []

    def __call__(self, system_prompt: str, user_prompt: str, **kwargs):
        self.calls.append((system_prompt, user_prompt, kwargs))
        if self._raises:
            raise RuntimeError("boom")
        if self._error is not None:
            return None, self._error
        return self._response, None


class _Resp:
    def __init__(self, status: int = 200, payload=None, text: str = "", bad_json: bool = False) -> None:
        self.status_code = status
        self.ok = 200 <= status < 400
        self._payload = payload
        self.text = text
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


TEXTS = [
    "Alpha rises. Beta falls. Gamma holds.",
    "Delta merges. Epsilon exits. Zeta waits.",
    "Eta only.",
]


def test_no_credential_uses_fallback_without_calls() -> None:
    chat = _Chat("1. should not be used")
    summarizer = BatchSummarizer(api_key="", chat_func=chat, max_sentences=2)
    assert summarizer.summarize_batch(TEXTS) == ["Alpha rises. Beta falls", "Delta merges. Epsilon exits", "Eta only."]
    assert chat.calls == []


def test_empty_input_makes_no_calls() -> None:
    chat = _Chat("1. x")
    summarizer = BatchSummarizer(api_key="key", chat_func=chat)
    assert summarizer.summarize_batch([]) == []
    assert chat.calls == []


def test_single_request_with_numbered_prompt() -> None:
    chat = _Chat("1. Sum A\n2. Sum B\n3. Sum C")
    summarizer = BatchSummarizer(api_key="key", chat_func=chat)
    assert summarizer.summarize_batch(TEXTS) == ["Sum A", "Sum B", "Sum C"]
    assert len(chat.calls) == 1
    _system, user_prompt, kwargs = chat.calls[0]
    assert user_prompt == build_numbered_prompt(TEXTS)
    assert user_prompt.startswith("1. Alpha rises.")
    assert "\n\n2. Delta merges." in user_prompt
    assert kwargs["api_key"] == "key"


def test_missing_entry_falls_back_to_raw_text_for_that_index_only() -> None:
    chat = _Chat("1. Sum A\n3. Sum C")
    summarizer = BatchSummarizer(api_key="key", chat_func=chat)
    assert summarizer.summarize_batch(TEXTS) == ["Sum A", TEXTS[1], "Sum C"]


def test_unparseable_response_returns_raw_texts() -> None:
    chat = _Chat("I cannot summarize these articles.")
    summarizer = BatchSummarizer(api_key="key", chat_func=chat)
    assert summarizer.summarize_batch(TEXTS) == TEXTS


def test_transport_failure_falls_back_for_whole_batch() -> None:
    chat = _Chat(error=TransportError("503", service="openai", status=503))
    summarizer = BatchSummarizer(api_key="key", chat_func=chat, max_sentences=1)
    assert summarizer.summarize_batch(TEXTS) == ["Alpha rises", "Delta merges", "Eta only."]


def test_unexpected_exception_does_not_escape() -> None:
    summarizer = BatchSummarizer(api_key="key", chat_func=_Chat(raises=True), max_sentences=1)
    out = summarizer.summarize_batch(TEXTS)
    assert len(out) == len(TEXTS)


def test_output_length_matches_input_regardless_of_service() -> None:
    texts = [f"Story {i}. Detail {i}. More {i}." for i in range(12)]
    for chat in (_Chat("1. only one"), _Chat(error=ParseError("bad")), _Chat("")):
        out = BatchSummarizer(api_key="key", chat_func=chat).summarize_batch(texts)
        assert len(out) == len(texts)


def test_parse_numbered_response_handles_preamble_and_order() -> None:
    response = "Here are the summaries:\n2. Second\nstill second\n1. First"
    assert parse_numbered_response(response) == {2: "Second\nstill second", 1: "First"}


def test_parse_numbered_response_first_duplicate_wins() -> None:
    assert parse_numbered_response("1. A\n1. B") == {1: "A"}


def test_parse_numbered_response_accepts_body_on_next_line() -> None:
    assert parse_numbered_response("1.\nSum A\n2.\nSum B") == {1: "Sum A", 2: "Sum B"}


def test_chat_complete_extracts_message_text() -> None:
    captured: dict = {}

    def _post(url, **kwargs):
        captured["url"] = url
        captured.update(kwargs)
        return _Resp(payload={"choices": [{"message": {"content": "  1. ok  "}}]})

    text, err = llm_client.chat_complete("sys", "user", api_key="k", post_func=_post, api_base="http://ai/v1/")
    assert err is None
    assert text == "1. ok"
    assert captured["url"] == "http://ai/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer k"
    assert captured["json"]["messages"][0] == {"role": "system", "content": "sys"}


def test_chat_complete_maps_errors() -> None:
    def _timeout(url, **kwargs):
        raise requests.Timeout("slow")

    text, err = llm_client.chat_complete("s", "u", api_key="k", post_func=_timeout)
    assert text is None and isinstance(err, TransportError) and err.kind == "timeout"

    text, err = llm_client.chat_complete("s", "u", api_key="k", post_func=lambda url, **kw: _Resp(status=500, text="down"))
    assert isinstance(err, TransportError) and err.status == 500

    text, err = llm_client.chat_complete("s", "u", api_key="k", post_func=lambda url, **kw: _Resp(bad_json=True))
    assert isinstance(err, ParseError)

    text, err = llm_client.chat_complete("s", "u", api_key="k", post_func=lambda url, **kw: _Resp(payload={"choices": []}))
    assert isinstance(err, ParseError)
