"""Core configuration and constants.

Import what you need from `daily_taho.core.config` and
`daily_taho.core.constants` to avoid heavy side effects at import time.
"""

__all__ = ["config", "constants", "exceptions"]
