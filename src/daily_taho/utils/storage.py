from __future__ import annotations

import json
import os
from typing import Any


def safe_read_json(path: str, default: Any) -> Any:
    """Load a JSON file; missing, unreadable or malformed files give `default`."""
    if not path or not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return default


def atomic_write_json(path: str, payload: Any) -> None:
    """Write to a sibling temp file, then swap it into place."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    os.replace(tmp_path, path)
