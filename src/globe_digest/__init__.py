"""GlobeDigest: paginated news aggregation with AI summaries and on-demand translation."""

__version__ = "0.1.0"
