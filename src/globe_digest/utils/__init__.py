from globe_digest.utils.common import clean_text, split_sentences, utc_now_iso

__all__ = ["clean_text", "split_sentences", "utc_now_iso"]
