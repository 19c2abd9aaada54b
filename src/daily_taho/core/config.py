from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[3]
load_dotenv(dotenv_path=REPO_ROOT / ".env")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    return raw in {"1", "true", "True", "yes", "YES"}


DATA_DIR = Path(os.getenv("DATA_DIR", str(REPO_ROOT / "data")))

# ==========================================
# Site / serving
# ==========================================

SITE_URL = os.getenv("SITE_URL", "https://daily-taho.vercel.app").rstrip("/")
DISPLAY_LIMIT = _env_int("DISPLAY_LIMIT", 10)
RSS_ITEM_LIMIT = _env_int("RSS_ITEM_LIMIT", 20)

# ==========================================
# Selection
# ==========================================

DIVERSITY_CAP = _env_int("DIVERSITY_CAP", 30)
DIVERSITY_MAX_DEPTH = _env_int("DIVERSITY_MAX_DEPTH", 10)

# ==========================================
# Cache
# ==========================================

CACHE_PATH = os.getenv("CACHE_PATH", str(DATA_DIR / "feed_cache.json"))
CACHE_TTL_SEC = _env_int("CACHE_TTL_SEC", 15 * 60)

# ==========================================
# Enrichment (Gemini)
# ==========================================

ENRICHMENT_ENABLED = _env_bool("ENRICHMENT_ENABLED", True)
ENRICHMENT_PRIORITY_SIZE = _env_int("ENRICHMENT_PRIORITY_SIZE", 3)
ENRICHMENT_LIMIT = _env_int("ENRICHMENT_LIMIT", 10)

GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_STREAM_MODEL = os.getenv("GEMINI_STREAM_MODEL", GEMINI_MODEL)
GEMINI_TIMEOUT_SEC = _env_int("GEMINI_TIMEOUT_SEC", 60)
GEMINI_MAX_RETRIES = _env_int("GEMINI_MAX_RETRIES", 2)
GEMINI_RETRY_BACKOFF_SEC = _env_float("GEMINI_RETRY_BACKOFF_SEC", 1.5)
GEMINI_MAX_OUTPUT_TOKENS = _env_int("GEMINI_MAX_OUTPUT_TOKENS", 4000)

_PLACEHOLDER_KEYS = {"", "PLACEHOLDER_API_KEY"}


def get_gemini_api_key() -> str | None:
    """Return the configured key, or None when missing or left as a placeholder."""
    key = (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip()
    if key in _PLACEHOLDER_KEYS:
        return None
    return key


# ==========================================
# Politics webhook
# ==========================================

FEED_API_URL = os.getenv("FEED_API_URL", f"{SITE_URL}/api/feed")
MAKE_WEBHOOK_URL = os.getenv("MAKE_WEBHOOK_URL", "").strip()
WEBHOOK_STATE_PATH = os.getenv("WEBHOOK_STATE_PATH", str(DATA_DIR / "processed_politics.json"))
WEBHOOK_STATE_MAX_IDS = _env_int("WEBHOOK_STATE_MAX_IDS", 500)
