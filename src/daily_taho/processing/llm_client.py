from __future__ import annotations

import ast
import json
import logging
import re
import time
from typing import Any, Callable, Iterator

import requests

from daily_taho.core import config
from daily_taho.core.exceptions import LLMError

logger = logging.getLogger(__name__)

_AI_UNAVAILABLE_LOGGED: set[str] = set()
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def log_ai_unavailable(reason: str) -> None:
    # one line per distinct reason
    if reason in _AI_UNAVAILABLE_LOGGED:
        return
    logger.warning("AI summaries unavailable: %s", reason)
    _AI_UNAVAILABLE_LOGGED.add(reason)


def _extract_gemini_text(payload: dict[str, Any]) -> str:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict))


def _strip_code_fences(text: str) -> str:
    raw = re.sub(r"```(?:json)?", "", text, flags=re.IGNORECASE)
    return raw.replace("```", "").strip()


def _strip_trailing_commas(payload: str) -> str:
    return re.sub(r",\s*([}\]])", r"\1", payload)


def parse_json_array(text: str) -> list[dict[str, Any]] | None:
    """Pull a JSON array of objects out of model output.

    Tolerates markdown fences, prose around the array and trailing commas.
    Returns None when no array can be recovered.
    """
    if not text:
        return None
    raw = _strip_code_fences(text)

    def _try_load(payload: str) -> list[dict[str, Any]] | None:
        try:
            obj = json.loads(payload)
        except ValueError:
            try:
                obj = ast.literal_eval(payload)
            except (ValueError, SyntaxError, TypeError):
                return None
        if isinstance(obj, dict):
            # some answers wrap the list: {"articles": [...]}
            lists = [v for v in obj.values() if isinstance(v, list)]
            obj = lists[0] if len(lists) == 1 else None
        if not isinstance(obj, list):
            return None
        return [row for row in obj if isinstance(row, dict)]

    parsed = _try_load(raw)
    if parsed is not None:
        return parsed

    match = re.search(r"\[[\s\S]*\]", raw)
    if not match:
        return None
    candidate = match.group(0)
    parsed = _try_load(candidate)
    if parsed is not None:
        return parsed
    return _try_load(_strip_trailing_commas(candidate))


class GeminiClient:
    def __init__(
        self,
        *,
        api_key_provider: Callable[[], str | None] = config.get_gemini_api_key,
        api_base: str = config.GEMINI_API_BASE,
        model: str = config.GEMINI_MODEL,
        stream_model: str = config.GEMINI_STREAM_MODEL,
        timeout_sec: int = config.GEMINI_TIMEOUT_SEC,
        max_retries: int = config.GEMINI_MAX_RETRIES,
        retry_backoff_sec: float = config.GEMINI_RETRY_BACKOFF_SEC,
        max_output_tokens: int = config.GEMINI_MAX_OUTPUT_TOKENS,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api_key_provider = api_key_provider
        self._api_base = api_base.rstrip("/")
        self._model = model
        self._stream_model = stream_model
        self._timeout_sec = timeout_sec
        self._max_retries = max_retries
        self._retry_backoff_sec = retry_backoff_sec
        self._max_output_tokens = max_output_tokens
        self._session = session or requests.Session()
        self._sleep = sleep

    @property
    def available(self) -> bool:
        return bool(self._api_key_provider())

    def _require_key(self) -> str:
        api_key = self._api_key_provider()
        if not api_key:
            raise LLMError("GEMINI_API_KEY is not set")
        return api_key

    def _request_payload(self, prompt: str, *, json_mode: bool) -> dict[str, Any]:
        generation_config: dict[str, Any] = {
            "temperature": 0.3,
            "maxOutputTokens": self._max_output_tokens,
        }
        if json_mode:
            generation_config["responseMimeType"] = "application/json"
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

    def _backoff(self, attempt: int) -> None:
        self._sleep(self._retry_backoff_sec * (2 ** (attempt - 1)))

    def generate_text(self, prompt: str, *, json_mode: bool = False) -> str:
        """One-shot generation with retry on transport errors and 429/5xx."""
        api_key = self._require_key()
        url = f"{self._api_base}/models/{self._model}:generateContent"
        payload = self._request_payload(prompt, json_mode=json_mode)
        max_attempts = max(1, self._max_retries + 1)
        last_err = ""
        for attempt in range(1, max_attempts + 1):
            try:
                resp = self._session.post(
                    url,
                    headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                    json=payload,
                    timeout=self._timeout_sec,
                )
            except requests.RequestException as e:
                last_err = f"{type(e).__name__}: {e}"
                if attempt < max_attempts:
                    self._backoff(attempt)
                    continue
                raise LLMError(f"Gemini request failed: {last_err}") from e

            if not resp.ok:
                last_err = f"{resp.status_code} {resp.text[:200]}"
                if resp.status_code in _RETRYABLE_STATUS and attempt < max_attempts:
                    self._backoff(attempt)
                    continue
                raise LLMError(f"Gemini request failed: {last_err}")

            try:
                data = resp.json()
            except ValueError as e:
                last_err = "Gemini response is not JSON"
                if attempt < max_attempts:
                    self._backoff(attempt)
                    continue
                raise LLMError(last_err) from e

            text = _extract_gemini_text(data).strip()
            if not text:
                last_err = "Gemini response text is empty"
                if attempt < max_attempts:
                    self._backoff(attempt)
                    continue
                raise LLMError(last_err)
            return text

        raise LLMError(f"Gemini request failed: {last_err}")

    def generate_json_array(self, prompt: str) -> list[dict[str, Any]]:
        text = self.generate_text(prompt, json_mode=True)
        parsed = parse_json_array(text)
        if parsed is None:
            snippet = re.sub(r"\s+", " ", text)[:160]
            raise LLMError(f"Gemini response is not a JSON array: {snippet}")
        return parsed

    def stream_text(self, prompt: str) -> Iterator[str]:
        """Yield text deltas from the server-sent-event stream endpoint."""
        api_key = self._require_key()
        url = f"{self._api_base}/models/{self._stream_model}:streamGenerateContent"
        try:
            resp = self._session.post(
                url,
                params={"alt": "sse"},
                headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                json=self._request_payload(prompt, json_mode=False),
                timeout=self._timeout_sec,
                stream=True,
            )
        except requests.RequestException as e:
            raise LLMError(f"Gemini stream failed: {type(e).__name__}: {e}") from e

        with resp:
            if not resp.ok:
                raise LLMError(f"Gemini stream failed: {resp.status_code} {resp.text[:200]}")
            # event streams usually omit the charset and requests would assume Latin-1
            resp.encoding = "utf-8"
            try:
                for line in resp.iter_lines(decode_unicode=True):
                    if not line or not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if not data or data == "[DONE]":
                        continue
                    try:
                        chunk = json.loads(data)
                    except ValueError as e:
                        raise LLMError("Gemini stream chunk is not JSON") from e
                    delta = _extract_gemini_text(chunk)
                    if delta:
                        yield delta
            except requests.RequestException as e:
                raise LLMError(f"Gemini stream interrupted: {type(e).__name__}: {e}") from e
