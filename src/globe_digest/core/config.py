from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from globe_digest.core.errors import ConfigurationError

_repo_root = Path(__file__).resolve().parents[3]
load_dotenv(dotenv_path=_repo_root / ".env")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    return raw in {"1", "true", "True", "yes", "YES"}


# ==========================================
# 외부 서비스 자격 증명
# ==========================================

NEWSDATA_API_KEY = os.getenv("NEWSDATA_API_KEY", "").strip()
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
VOICERSS_API_KEY = os.getenv("VOICERSS_API_KEY", "").strip()

# ==========================================
# 엔드포인트 / 모델
# ==========================================

NEWSDATA_API_BASE = os.getenv("NEWSDATA_API_BASE", "https://newsdata.io/api/1/news")
OPENAI_API_BASE = os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
MYMEMORY_API_BASE = os.getenv("MYMEMORY_API_BASE", "https://api.mymemory.translated.net/get")
TRANSLATION_SOURCE_LANG = os.getenv("TRANSLATION_SOURCE_LANG", "en")
VOICERSS_API_BASE = os.getenv("VOICERSS_API_BASE", "https://api.voicerss.org/")
VOICERSS_LOCALE = os.getenv("VOICERSS_LOCALE", "en-us")

# 외부 호출당 타임아웃 (초). 타임아웃은 전송 실패와 동일하게 취급.
FEED_TIMEOUT_SEC = _env_float("FEED_TIMEOUT_SEC", 8.0)
SUMMARY_TIMEOUT_SEC = _env_float("SUMMARY_TIMEOUT_SEC", 8.0)
TRANSLATE_TIMEOUT_SEC = _env_float("TRANSLATE_TIMEOUT_SEC", 8.0)

# ==========================================
# 파이프라인 동작
# ==========================================

FALLBACK_SENTENCE_COUNT = _env_int("FALLBACK_SENTENCE_COUNT", 2)
TRANSLATE_MAX_WORKERS = _env_int("TRANSLATE_MAX_WORKERS", 4)
SUMMARY_ENABLED = _env_bool("SUMMARY_ENABLED", True)

DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "in")
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")
DEFAULT_CATEGORY = os.getenv("DEFAULT_CATEGORY", "top")

REPO_ROOT = _repo_root
DATA_DIR = Path(os.getenv("DATA_DIR", str(REPO_ROOT / "data")))
OUTPUT_JSON = os.getenv("OUTPUT_JSON", str(DATA_DIR / "news_feed.json"))


def require_feed_api_key(api_key: str | None = None) -> str:
    """피드 자격 증명을 반환하고, 없으면 ConfigurationError."""
    key = (api_key if api_key is not None else NEWSDATA_API_KEY).strip()
    if not key:
        raise ConfigurationError("NEWSDATA_API_KEY is not set", service="newsdata")
    return key
