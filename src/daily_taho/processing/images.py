from __future__ import annotations

import re
from typing import Any

from bs4 import BeautifulSoup

from daily_taho.core.constants import TRACKER_IMAGE_HINTS

_OG_IMAGE_RE = re.compile(r"^og:image$", re.IGNORECASE)
_FB_IMAGE_RE = re.compile(r"^facebook:image:src$", re.IGNORECASE)


def _finalize(url: str) -> str:
    url = (url or "").strip()
    if not url:
        return ""
    if url.startswith("//"):
        url = f"https:{url}"
    lowered = url.lower()
    if any(hint in lowered for hint in TRACKER_IMAGE_HINTS):
        return ""
    return url


def _meta_content(soup: BeautifulSoup, attr: str, pattern: re.Pattern[str]) -> str:
    for tag in soup.find_all("meta", attrs={attr: pattern}):
        content = (tag.get("content") or "").strip()
        if content:
            return content
    return ""


def extract_image_url(html: str) -> str:
    """og:image, then facebook:image:src, then the first <img src>; "" when nothing usable."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")

    candidate = _meta_content(soup, "property", _OG_IMAGE_RE)
    if not candidate:
        candidate = _meta_content(soup, "name", _FB_IMAGE_RE)
    if not candidate:
        img = soup.find("img", src=lambda v: bool(v and v.strip()))
        if img:
            candidate = img.get("src") or ""
    return _finalize(candidate)


def resolve_item_image(entry: dict[str, Any]) -> str:
    enclosure = entry.get("enclosure")
    if isinstance(enclosure, dict):
        url = _finalize(str(enclosure.get("link") or ""))
        if url:
            return url
    thumbnail = entry.get("thumbnail")
    if isinstance(thumbnail, str):
        url = _finalize(thumbnail)
        if url:
            return url
    return extract_image_url(str(entry.get("content") or entry.get("description") or ""))
