from .common import (
    clean_text,
    estimate_read_time_minutes,
    format_display_date,
    generate_slug,
    normalize_title_key,
    parse_datetime_utc,
    published_timestamp,
    read_time_label,
    short_hash,
    strip_tags,
    to_rfc822,
    truncate_text,
)
from .storage import atomic_write_json, safe_read_json

__all__ = [
    "atomic_write_json",
    "clean_text",
    "estimate_read_time_minutes",
    "format_display_date",
    "generate_slug",
    "normalize_title_key",
    "parse_datetime_utc",
    "published_timestamp",
    "read_time_label",
    "safe_read_json",
    "short_hash",
    "strip_tags",
    "to_rfc822",
    "truncate_text",
]
