"""Daily Taho: Philippine news aggregation with bilingual summaries."""

__version__ = "0.1.0"
