from __future__ import annotations

from globe_digest.processing.fallback import summarize_fallback, summarize_fallback_batch


def test_keeps_first_two_sentences() -> None:
    text = "First point. Second point. Third point. Fourth point."
    assert summarize_fallback(text, 2) == "First point. Second point"


def test_short_text_is_returned_unchanged() -> None:
    assert summarize_fallback("Only one sentence.", 2) == "Only one sentence."
    assert summarize_fallback("One. Two.", 2) == "One. Two."


def test_empty_input_yields_empty_output() -> None:
    assert summarize_fallback("", 2) == ""


def test_fallback_is_deterministic() -> None:
    text = "Markets rallied. Bonds slipped. Oil was flat. Gold rose."
    outputs = {summarize_fallback(text, 3) for _ in range(5)}
    assert outputs == {"Markets rallied. Bonds slipped. Oil was flat"}


def test_only_period_space_splits() -> None:
    # 줄바꿈이나 물음표는 구분자가 아니다
    text = "Is it raining?\nYes it is. Bring an umbrella. Or not."
    assert summarize_fallback(text, 2) == "Is it raining?\nYes it is. Bring an umbrella"


def test_batch_preserves_order_and_length() -> None:
    texts = ["A. B. C.", "", "Solo"]
    assert summarize_fallback_batch(texts, 1) == ["A", "", "Solo"]
