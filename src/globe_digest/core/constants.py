from __future__ import annotations

# ==========================================
# 피드 쿼리 카탈로그
# ==========================================

CATEGORIES = (
    "Top",
    "Technology",
    "Business",
    "Sports",
    "Entertainment",
    "Health",
    "Science",
)

COUNTRIES = {
    "in": "India",
    "us": "USA",
    "gb": "UK",
    "au": "Australia",
    "ca": "Canada",
}

# 피드 언어이자 번역 대상 언어
LANGUAGES = {
    "en": "English",
    "hi": "Hindi",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
}

SEARCH_SUGGESTIONS = ("IPL", "climate change", "Apple Vision Pro")

# ==========================================
# 요약/번역
# ==========================================

NO_CONTENT_PLACEHOLDER = "No content available"
SENTENCE_DELIMITER = ". "
SUMMARY_SYSTEM_PROMPT = "Summarize each article in 2-3 lines and number them accordingly."

FEED_SERVICE = "newsdata"
SUMMARY_SERVICE = "openai"
TRANSLATION_SERVICE = "mymemory"
