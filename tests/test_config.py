from __future__ import annotations

import pytest

from globe_digest.clients.speech import build_speech_url
from globe_digest.core import config
from globe_digest.core.errors import ConfigurationError, TransportError


def test_require_feed_api_key_rejects_blank() -> None:
    with pytest.raises(ConfigurationError):
        config.require_feed_api_key("   ")


def test_require_feed_api_key_strips_value() -> None:
    assert config.require_feed_api_key("  abc ") == "abc"


def test_build_default_pipeline_fails_fast_without_feed_key(monkeypatch) -> None:
    from globe_digest.processing import pipeline as pipeline_mod

    monkeypatch.setattr(config, "NEWSDATA_API_KEY", "")
    with pytest.raises(ConfigurationError):
        pipeline_mod.build_default_pipeline(logger=lambda _msg: None)


def test_env_helpers_fall_back_on_bad_values(monkeypatch) -> None:
    monkeypatch.setenv("GLOBE_TEST_INT", "x")
    monkeypatch.setenv("GLOBE_TEST_FLOAT", "1.5")
    monkeypatch.setenv("GLOBE_TEST_BOOL", "yes")
    assert config._env_int("GLOBE_TEST_INT", 7) == 7
    assert config._env_float("GLOBE_TEST_FLOAT", 0.0) == 1.5
    assert config._env_bool("GLOBE_TEST_BOOL", False) is True
    assert config._env_bool("GLOBE_TEST_MISSING", True) is True


def test_error_notes() -> None:
    err = TransportError("503 down\nretry|later", service="newsdata", status=503)
    assert err.to_note() == "newsdata:transport:503 down retry later"
    assert TransportError("", timeout=True).to_note() == "timeout"


def test_speech_url_encodes_text() -> None:
    url = build_speech_url("Hello world & more", api_key="k", locale="en-us", api_base="https://voice.test/")
    assert url == "https://voice.test/?key=k&hl=en-us&src=Hello%20world%20%26%20more"
    assert build_speech_url("", api_key="k") is None
