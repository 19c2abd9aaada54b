class FeedFetchError(Exception):
    """Raised when a single upstream feed cannot be fetched or decoded."""


class FeedAggregationError(Exception):
    """Raised when an aggregation pass yields nothing usable."""


class LLMError(Exception):
    """Raised when the summarization service cannot be reached or answers garbage."""


class SummaryStreamError(Exception):
    """Raised inside a streaming phase; surfaced to subscribers as an error event."""
