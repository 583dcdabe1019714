from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Iterable, Optional, Protocol

from globe_digest.clients.feed_client import FeedPage, NewsFeedClient
from globe_digest.clients.speech import build_speech_url
from globe_digest.core.config import (
    DEFAULT_CATEGORY,
    DEFAULT_COUNTRY,
    DEFAULT_LANGUAGE,
    TRANSLATE_MAX_WORKERS,
    VOICERSS_API_KEY,
    require_feed_api_key,
)
from globe_digest.core.constants import FEED_SERVICE, NO_CONTENT_PLACEHOLDER
from globe_digest.core.errors import PipelineError, TransportError
from globe_digest.processing.fallback import summarize_fallback, summarize_fallback_batch
from globe_digest.processing.store import EnrichmentStore
from globe_digest.processing.summarizer import build_default_summarizer
from globe_digest.processing.translator import SummaryTranslator
from globe_digest.processing.types import (
    CycleOutcome,
    EnrichedArticle,
    LogFunc,
    PaginationState,
    PipelineState,
    PipelineStatus,
    QueryState,
    RawArticle,
)
from globe_digest.utils import clean_text


class FeedSource(Protocol):
    def fetch_page(
        self, query: QueryState, cursor: Optional[str] = None
    ) -> tuple[Optional[FeedPage], Optional[PipelineError]]: ...


class Translator(Protocol):
    def translate(self, text: str, target_language: str) -> str: ...


SummarizeFunc = Callable[[list[str]], list[str]]


def pick_input_text(article: RawArticle) -> str:
    # 요약 입력 우선순위: description > content > 고정 문구
    for key in ("description", "content"):
        text = clean_text(str(article.get(key) or ""))
        if text:
            return text
    return NO_CONTENT_PLACEHOLDER


def enrich_articles(articles: list[RawArticle], summaries: list[str], texts: list[str]) -> list[EnrichedArticle]:
    enriched: list[EnrichedArticle] = []
    for article, summary, text in zip(articles, summaries, texts):
        summary = (summary or "").strip() or summarize_fallback(text) or NO_CONTENT_PLACEHOLDER
        item: EnrichedArticle = {**article, "summary": summary, "translatedSummary": None}  # type: ignore[typeddict-item]
        enriched.append(item)
    return enriched


class NewsPipeline:
    """피드 수집 → 일괄 요약 → 스토어 병합 → 페이지네이션 갱신을 한 사이클로 조율한다.

    한 번에 하나의 사이클만 FETCHING 상태일 수 있다. 진행 중에 들어온 이어받기
    트리거는 무시되고, reset 트리거는 진행 중인 사이클 결과를 무효화(세대 증가)한
    뒤 사이클 종료 직후 한 번의 reset 사이클로 합쳐진다.
    """

    def __init__(
        self,
        *,
        feed_client: FeedSource,
        summarizer: SummarizeFunc,
        translator: Translator,
        logger: LogFunc,
        store: EnrichmentStore | None = None,
        query: QueryState | None = None,
        speech_api_key: str | None = None,
        translate_max_workers: int = TRANSLATE_MAX_WORKERS,
    ) -> None:
        self._feed_client = feed_client
        self._summarize = summarizer
        self._translator = translator
        self._log = logger
        self._store = store or EnrichmentStore()
        self._query = (query or QueryState()).normalized()
        self._pagination = PaginationState()
        self._speech_api_key = speech_api_key
        self._translate_max_workers = max(1, translate_max_workers)

        self._lock = threading.Lock()
        self._status = PipelineStatus.IDLE
        self._last_status = PipelineStatus.IDLE
        self._last_error: PipelineError | None = None
        self._searching = False
        self._generation = 0
        self._pending_reset = False

    # -----------------------------
    # 상태 조회
    # -----------------------------
    @property
    def store(self) -> EnrichmentStore:
        return self._store

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def status(self) -> PipelineStatus:
        return self._status

    @property
    def last_status(self) -> PipelineStatus:
        return self._last_status

    @property
    def searching(self) -> bool:
        return self._searching

    @property
    def has_more(self) -> bool:
        return self._pagination.has_more

    def articles(self) -> list[EnrichedArticle]:
        return self._store.articles()

    def snapshot(self) -> PipelineState:
        with self._lock:
            return PipelineState(
                query=self._query,
                pagination=PaginationState(self._pagination.next_page_cursor, self._pagination.has_more),
                status=self._status,
                searching=self._searching,
                generation=self._generation,
                article_count=len(self._store),
                last_error=self._last_error,
            )

    # -----------------------------
    # 사이클
    # -----------------------------
    def run_fetch_cycle(self, reset: bool) -> CycleOutcome:
        with self._lock:
            if self._status is PipelineStatus.FETCHING:
                if reset:
                    # 진행 중 결과는 버리고, 종료 후 reset 사이클을 한 번 더 돌린다
                    self._generation += 1
                    self._pending_reset = True
                    self._pagination.reset()
                    self._log(f"사이클 진행 중 reset 요청 → 대기 (generation={self._generation})")
                else:
                    self._log("사이클 진행 중 이어받기 요청 무시")
                return CycleOutcome(
                    status=PipelineStatus.FETCHING,
                    reset=reset,
                    generation=self._generation,
                    skipped=True,
                )
            if not reset and not self._pagination.has_more:
                return CycleOutcome(
                    status=self._last_status,
                    reset=False,
                    generation=self._generation,
                    skipped=True,
                )
            if reset:
                self._generation += 1
                self._pagination.reset()
            generation = self._generation
            query = self._query
            cursor = None if reset else self._pagination.next_page_cursor
            self._status = PipelineStatus.FETCHING

        try:
            outcome = self._run_cycle(reset=reset, generation=generation, query=query, cursor=cursor)
        finally:
            with self._lock:
                self._status = PipelineStatus.IDLE
                pending = self._pending_reset
                self._pending_reset = False

        if pending:
            return self.run_fetch_cycle(True)
        return outcome

    def _finish(self, generation: int, status: PipelineStatus, error: PipelineError | None = None) -> None:
        # self._lock 보유 상태에서 호출. 대체된 사이클은 상태를 건드리지 않는다.
        if generation != self._generation:
            return
        self._last_status = status
        self._last_error = error
        self._searching = False

    def _run_cycle(
        self,
        *,
        reset: bool,
        generation: int,
        query: QueryState,
        cursor: Optional[str],
    ) -> CycleOutcome:
        self._log(
            f"뉴스 수집 시작: country={query.country} language={query.language} "
            f"category={query.category} q={query.search_text!r} reset={reset} page={cursor or '-'}"
        )
        try:
            page, err = self._feed_client.fetch_page(query, cursor)
        except Exception as e:  # 피드 클라이언트 구현이 예외를 던져도 사이클만 실패시킨다
            page, err = None, TransportError(f"{type(e).__name__}: {e}", service=FEED_SERVICE)

        if err is not None or page is None:
            with self._lock:
                stale = generation != self._generation
                self._finish(generation, PipelineStatus.FAILED, err)
            self._log(f"⚠️ 뉴스 수집 실패: {err.to_note() if err else 'empty response'}")
            return CycleOutcome(
                status=PipelineStatus.FAILED,
                reset=reset,
                generation=generation,
                stale=stale,
                error=err,
            )

        articles = list(page.articles or [])
        texts = [pick_input_text(a) for a in articles]
        try:
            summaries = self._summarize(texts) if texts else []
        except Exception as e:  # 요약기 예외도 폴백 요약으로 흡수한다
            self._log(f"⚠️ 요약 실패 ({type(e).__name__}: {e}) → 폴백 요약 사용")
            summaries = summarize_fallback_batch(texts)
        if len(summaries) != len(texts):
            self._log(f"⚠️ 요약 개수 불일치 {len(summaries)}/{len(texts)} → 폴백 요약 사용")
            summaries = summarize_fallback_batch(texts)
        enriched = enrich_articles(articles, summaries, texts)

        with self._lock:
            if generation != self._generation:
                # 더 최신 reset이 이미 이 결과를 대체했다
                stale_outcome = CycleOutcome(
                    status=PipelineStatus.SUCCESS,
                    reset=reset,
                    generation=generation,
                    stale=True,
                )
            else:
                stale_outcome = None
                stats = self._store.merge(enriched, reset=reset)
                self._pagination.update_from_cursor(page.next_page)
                self._finish(generation, PipelineStatus.SUCCESS)

        if stale_outcome is not None:
            self._log(f"오래된 사이클 결과 폐기 (generation={generation})")
            return stale_outcome

        self._log(
            f"수집 완료: 신규 {stats.added}건, 중복 {stats.dropped}건, "
            f"총 {len(self._store)}건, hasMore={self._pagination.has_more}"
        )
        return CycleOutcome(
            status=PipelineStatus.SUCCESS,
            reset=reset,
            generation=generation,
            added=stats.added,
            dropped=stats.dropped,
        )

    # -----------------------------
    # 트리거
    # -----------------------------
    def start(self) -> CycleOutcome:
        return self.run_fetch_cycle(True)

    def set_query(
        self,
        *,
        country: str | None = None,
        language: str | None = None,
        category: str | None = None,
    ) -> CycleOutcome | None:
        changes: dict[str, Any] = {}
        if country is not None:
            changes["country"] = country
        if language is not None:
            changes["language"] = language
        if category is not None:
            changes["category"] = category
        with self._lock:
            updated = self._query.with_changes(**changes).normalized()
            if updated == self._query:
                return None
            self._query = updated
        return self.run_fetch_cycle(True)

    def set_search_text(self, text: str) -> None:
        # 입력 중인 검색어만 반영. 사이클은 submit_search에서 시작된다.
        with self._lock:
            self._query = self._query.with_changes(search_text=text or "").normalized()

    def submit_search(self, text: str | None = None) -> CycleOutcome:
        with self._lock:
            if text is not None:
                self._query = self._query.with_changes(search_text=text).normalized()
            self._searching = True
        return self.run_fetch_cycle(True)

    def clear_search(self) -> CycleOutcome:
        with self._lock:
            self._query = self._query.with_changes(search_text="")
        return self.run_fetch_cycle(True)

    def load_more(self) -> CycleOutcome:
        return self.run_fetch_cycle(False)

    def on_sentinel_visible(self) -> CycleOutcome | None:
        # 무한 스크롤 센티널: 더 가져올 것이 있고 진행 중인 사이클이 없을 때만
        if not self._pagination.has_more or self._status is PipelineStatus.FETCHING:
            return None
        return self.run_fetch_cycle(False)

    # -----------------------------
    # 번역 / 음성
    # -----------------------------
    def request_translation(self, index: int, target_language: str) -> str:
        """기사의 원본 summary를 번역해 translatedSummary에 기록한다 (마지막 요청 우선)."""
        revision = self._store.revision
        article = self._store.get(index)
        link = str(article.get("link") or "").strip()
        summary = str(article.get("summary") or "")
        translated = self._translator.translate(summary, target_language)

        # 번역 중 스토어가 교체됐을 수 있다: link가 있으면 새 위치를 찾고, 없으면 같은 revision일 때만 기록
        target_index: Optional[int] = index
        if link:
            revision = self._store.revision
            target_index = self._store.find_index(link)
        updated = None
        if target_index is not None:
            updated = self._store.set_translation(target_index, translated, target_language, revision=revision)
        if updated is None:
            self._log(f"번역 결과 폐기: 스토어에서 사라진 기사 ({link or f'index={index}'})")
        return translated

    def request_translations(self, indices: Iterable[int], target_language: str) -> dict[int, str]:
        """여러 기사를 병렬 번역. 이미 같은 언어로 번역된 기사는 건너뛴다."""
        results: dict[int, str] = {}
        pending: list[int] = []
        for idx in indices:
            cached = self._store.get_translation(idx, target_language)
            if cached is not None:
                results[idx] = cached
            else:
                pending.append(idx)
        if not pending:
            return results

        workers = min(self._translate_max_workers, len(pending))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.request_translation, idx, target_language): idx for idx in pending}
            for future in as_completed(futures):
                results[futures[future]] = future.result()
        return results

    def speech_url_for(self, index: int) -> Optional[str]:
        return build_speech_url(self._store.display_summary(index), api_key=self._speech_api_key)


def build_default_feed_client(*, api_key: str | None = None) -> NewsFeedClient:
    return NewsFeedClient(api_key=require_feed_api_key(api_key))


def build_default_pipeline(*, logger: LogFunc, query: QueryState | None = None) -> NewsPipeline:
    feed_client = build_default_feed_client()
    summarizer = build_default_summarizer()
    return NewsPipeline(
        feed_client=feed_client,
        summarizer=summarizer.summarize_batch,
        translator=SummaryTranslator(),
        logger=logger,
        query=query or QueryState(DEFAULT_COUNTRY, DEFAULT_LANGUAGE, DEFAULT_CATEGORY, ""),
        speech_api_key=VOICERSS_API_KEY,
    )
