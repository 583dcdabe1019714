"""Typed models for feed payloads, query/pagination state and exported snapshots."""

from .feed import EnrichedArticle, FeedSnapshot, PaginationState, QueryState, RawArticle

__all__ = ["EnrichedArticle", "FeedSnapshot", "PaginationState", "QueryState", "RawArticle"]
