from __future__ import annotations

import json

import requests

from daily_taho.core.constants import Category
from daily_taho.core.exceptions import LLMError
from daily_taho.models import Article, NewsSource
from daily_taho.processing.llm_client import GeminiClient
from daily_taho.processing.streaming import (
    EventKind,
    StreamingSummaryState,
    SummaryEvent,
    SummaryPhase,
    SummarySession,
    SummaryStreamer,
)


def _article() -> Article:
    return Article(
        id="a-1",
        slug="a",
        title="Typhoon nears Luzon",
        source=NewsSource(name="GMA"),
        category=Category.BREAKING,
        publish_time="",
        read_time="1 min read",
        image_url="",
        summary_short="short",
        summary_english="Raw english text.",
        url="https://gma.ph/a",
        summary_filipino="Isinasalin...",
    )


class _StreamClient:
    def __init__(self, *, fail_translation: bool = False, available: bool = True) -> None:
        self.available = available
        self.prompts: list[str] = []
        self._fail_translation = fail_translation

    def stream_text(self, prompt: str):
        self.prompts.append(prompt)
        if prompt.startswith("Translate"):
            yield "Papalapit "
            if self._fail_translation:
                raise LLMError("connection reset")
            yield "ang bagyo."
        else:
            yield "A typhoon "
            yield "is approaching."


def test_english_then_filipino_events() -> None:
    client = _StreamClient()
    events = list(SummaryStreamer(client=client).stream(_article()))  # type: ignore[arg-type]

    assert [(e.kind, e.phase) for e in events] == [
        (EventKind.PARTIAL, SummaryPhase.ENGLISH),
        (EventKind.PARTIAL, SummaryPhase.ENGLISH),
        (EventKind.COMPLETE, SummaryPhase.ENGLISH),
        (EventKind.PARTIAL, SummaryPhase.FILIPINO),
        (EventKind.PARTIAL, SummaryPhase.FILIPINO),
        (EventKind.COMPLETE, SummaryPhase.FILIPINO),
    ]
    assert events[2].text == "A typhoon is approaching."
    assert events[-1].text == "Papalapit ang bagyo."
    assert "A typhoon is approaching." in client.prompts[1]


def test_translation_failure_surfaces_error_and_keeps_partial_text() -> None:
    seen: list[tuple[str, str, bool, bool]] = []
    session = SummarySession(
        streamer=SummaryStreamer(client=_StreamClient(fail_translation=True)),  # type: ignore[arg-type]
        on_change=lambda s: seen.append((s.english_summary, s.filipino_summary, s.is_streaming_english, s.is_streaming_filipino)),
    )
    state = session.start(_article())

    assert state.english_summary == "A typhoon is approaching."
    assert state.filipino_summary == "Papalapit "
    assert state.error == "connection reset"
    assert state.is_streaming_english is False
    assert state.is_streaming_filipino is False
    assert seen[0] == ("", "", True, True)
    assert seen[1] == ("A typhoon ", "", True, True)


def test_no_credential_completes_with_existing_summaries() -> None:
    session = SummarySession(streamer=SummaryStreamer(client=_StreamClient(available=False)))  # type: ignore[arg-type]
    state = session.start(_article())
    assert state.english_summary == "Raw english text."
    assert state.filipino_summary == "Isinasalin..."
    assert state.error is None
    assert not state.is_streaming_english and not state.is_streaming_filipino
    assert state.filipino_pending


def test_state_merges_partials_independently() -> None:
    state = StreamingSummaryState()
    state.reset()
    state.apply(SummaryEvent.partial(SummaryPhase.ENGLISH, "One "))
    state.apply(SummaryEvent.partial(SummaryPhase.ENGLISH, "two."))
    assert state.english_summary == "One two."
    assert state.is_streaming_english and state.is_streaming_filipino
    state.apply(SummaryEvent.complete(SummaryPhase.ENGLISH, "One two."))
    assert not state.is_streaming_english and state.is_streaming_filipino
    state.apply(SummaryEvent.error(SummaryPhase.FILIPINO, "quota"))
    assert state.error == "quota"
    assert state.english_summary == "One two."


class _DroppingRaw:
    """One SSE chunk, then the connection breaks."""

    def __init__(self, first: bytes) -> None:
        self._chunks = [first]

    def read(self, _size: int = -1) -> bytes:
        if self._chunks:
            return self._chunks.pop(0)
        raise requests.exceptions.ChunkedEncodingError("connection broken mid-stream")

    def close(self) -> None:
        return None


class _DroppingSession:
    def post(self, url, **kwargs) -> requests.Response:
        payload = {"candidates": [{"content": {"parts": [{"text": "A typhoon "}]}}]}
        resp = requests.Response()
        resp.status_code = 200
        resp.headers["Content-Type"] = "text/event-stream"
        resp.raw = _DroppingRaw(f"data: {json.dumps(payload)}\n\n".encode("utf-8"))
        return resp


def test_dropped_connection_becomes_an_error_event() -> None:
    client = GeminiClient(api_key_provider=lambda: "k", session=_DroppingSession())  # type: ignore[arg-type]
    session = SummarySession(streamer=SummaryStreamer(client=client))

    state = session.start(_article())

    assert state.english_summary == "A typhoon "
    assert state.filipino_summary == ""
    assert state.error is not None and "interrupted" in state.error
    assert state.is_streaming_english is False
    assert state.is_streaming_filipino is False
