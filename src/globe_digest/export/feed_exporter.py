from __future__ import annotations

import argparse
import datetime
import logging
import sys

from globe_digest.core.config import (
    DEFAULT_CATEGORY,
    DEFAULT_COUNTRY,
    DEFAULT_LANGUAGE,
    OUTPUT_JSON,
)
from globe_digest.core.constants import CATEGORIES, COUNTRIES, LANGUAGES, SEARCH_SUGGESTIONS
from globe_digest.core.errors import ConfigurationError
from globe_digest.export.export_manager import export_feed_snapshot_json
from globe_digest.models.feed import QueryState
from globe_digest.processing.pipeline import build_default_pipeline
from globe_digest.processing.types import PipelineStatus


def _log(message: str) -> None:
    ts = datetime.datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {message}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch, summarize and export a news feed snapshot.")
    parser.add_argument("--country", default=DEFAULT_COUNTRY, help=f"Country code, e.g. {', '.join(COUNTRIES)}.")
    parser.add_argument("--language", default=DEFAULT_LANGUAGE, help=f"Feed language, e.g. {', '.join(LANGUAGES)}.")
    parser.add_argument("--category", default=DEFAULT_CATEGORY, help=f"One of: {', '.join(CATEGORIES)}.")
    parser.add_argument(
        "--search",
        default="",
        help=f"Free-text filter (sent as q=), e.g. {', '.join(repr(s) for s in SEARCH_SUGGESTIONS)}.",
    )
    parser.add_argument("--pages", type=int, default=1, help="Number of pages to load (>=1).")
    parser.add_argument(
        "--translate",
        default="",
        help=f"Translate every summary into one of: {', '.join(LANGUAGES)}.",
    )
    parser.add_argument("--output", default=OUTPUT_JSON)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    query = QueryState(args.country, args.language, args.category, args.search)
    try:
        pipeline = build_default_pipeline(logger=_log, query=query)
    except ConfigurationError as e:
        print(f"❌ 설정 오류: {e}", file=sys.stderr)
        return 2

    _log("프로그램 시작")
    if query.search_text.strip():
        outcome = pipeline.submit_search()
    else:
        outcome = pipeline.start()
    if outcome.status is PipelineStatus.FAILED:
        _log("첫 페이지 수집 실패, 기존 스냅샷 유지")
        return 1

    for _ in range(max(0, args.pages - 1)):
        if not pipeline.has_more:
            break
        outcome = pipeline.load_more()
        if outcome.status is PipelineStatus.FAILED:
            _log("다음 페이지 수집 실패, 지금까지의 결과로 저장")
            break

    if args.translate:
        pipeline.request_translations(range(len(pipeline.store)), args.translate)

    state = pipeline.snapshot()
    export_feed_snapshot_json(pipeline.articles(), args.output, state.query, state.pagination)
    _log(f"완료! {args.output} 파일이 생성되었습니다. ({state.article_count}건)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
