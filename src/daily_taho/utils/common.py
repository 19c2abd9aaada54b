from __future__ import annotations

import datetime
import email.utils
import hashlib
import html
import math
import re

from daily_taho.core.constants import DISPLAY_DATE_FALLBACK

_WS_RE = re.compile(r"\s+")  # collapse runs of whitespace
_TAG_RE = re.compile(r"<[^>]*>?")  # tags, including an unterminated trailing one
_TZ_SUFFIX_RE = re.compile(r"\s[+-]\d{4}$")  # "... +0800"
_GMT_SUFFIX_RE = re.compile(r"\sGMT[+-]\d+$")  # "... GMT+8"
_SLUG_STRIP_RE = re.compile(r"[^A-Za-z0-9_\s-]")  # ASCII word chars, whitespace, hyphen survive
_SLUG_SEP_RE = re.compile(r"[\s_-]+")
_SLUG_EDGE_RE = re.compile(r"^-+|-+$")
_MANILA = datetime.timezone(datetime.timedelta(hours=8))

_WORDS_PER_MINUTE = 200


def strip_tags(s: str) -> str:
    """Remove HTML tags without touching entities or whitespace."""
    if not s:
        return ""
    return _TAG_RE.sub("", s)


def clean_text(s: str) -> str:
    """Strip HTML tags and entities and normalize whitespace."""
    if not s:
        return ""
    s = html.unescape(s)
    s = s.replace("\u00a0", " ")
    s = strip_tags(s)
    return _WS_RE.sub(" ", s).strip()


def truncate_text(s: str, max_chars: int, suffix: str = "") -> str:
    if max_chars <= 0 or len(s) <= max_chars:
        return s
    return s[:max_chars].rstrip() + suffix


def parse_datetime_utc(value: str, *, default_tz: datetime.tzinfo | None = None) -> datetime.datetime | None:
    if not value:
        return None
    raw = value.strip()
    try:
        dt = datetime.datetime.fromisoformat(raw)
    except ValueError:
        try:
            dt = email.utils.parsedate_to_datetime(raw)
        except (TypeError, ValueError):
            return None
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz or _MANILA)
    return dt.astimezone(datetime.timezone.utc)


def published_timestamp(value: str) -> float:
    """Epoch seconds for ordering; unparseable dates sort last."""
    dt = parse_datetime_utc(value)
    if dt is None:
        return 0.0
    return dt.timestamp()


def format_display_date(value: str) -> str:
    if not value:
        return DISPLAY_DATE_FALLBACK
    out = _TZ_SUFFIX_RE.sub("", value)
    out = _GMT_SUFFIX_RE.sub("", out)
    return out.strip()


def to_rfc822(value: str) -> str:
    dt = parse_datetime_utc(value)
    if dt is None:
        return ""
    return email.utils.format_datetime(dt)


def estimate_read_time_minutes(text: str) -> int:
    """~200 words per minute, never below one minute."""
    words = len((text or "").split())
    if words <= 0:
        return 1
    return max(1, math.ceil(words / _WORDS_PER_MINUTE))


def read_time_label(text: str) -> str:
    return f"{estimate_read_time_minutes(text)} min read"


def generate_slug(title: str) -> str:
    """Deep-link slug; must stay byte-compatible with the web client."""
    s = (title or "").lower().strip()
    s = _SLUG_STRIP_RE.sub("", s)
    s = _SLUG_SEP_RE.sub("-", s)
    return _SLUG_EDGE_RE.sub("", s)


def short_hash(*parts: str, length: int = 8) -> str:
    joined = "||".join(p or "" for p in parts)
    return hashlib.sha1(joined.encode("utf-8")).hexdigest()[:length]


def normalize_title_key(title: str) -> str:
    t = clean_text(title).lower()
    t = re.sub(r"[^\w\s]", " ", t)
    return _WS_RE.sub(" ", t).strip()
