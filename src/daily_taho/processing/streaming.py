from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator

from daily_taho.core.constants import FILIPINO_PLACEHOLDER
from daily_taho.core.exceptions import LLMError, SummaryStreamError
from daily_taho.models import Article
from daily_taho.processing.llm_client import GeminiClient
from daily_taho.processing.prompts import build_english_prompt, build_filipino_prompt

logger = logging.getLogger(__name__)


class SummaryPhase(str, Enum):
    ENGLISH = "english"
    FILIPINO = "filipino"


class EventKind(str, Enum):
    PARTIAL = "partial"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class SummaryEvent:
    kind: EventKind
    phase: SummaryPhase
    text: str

    @classmethod
    def partial(cls, phase: SummaryPhase, delta: str) -> "SummaryEvent":
        return cls(EventKind.PARTIAL, phase, delta)

    @classmethod
    def complete(cls, phase: SummaryPhase, text: str) -> "SummaryEvent":
        return cls(EventKind.COMPLETE, phase, text)

    @classmethod
    def error(cls, phase: SummaryPhase, message: str) -> "SummaryEvent":
        return cls(EventKind.ERROR, phase, message)


class SummaryStreamer:
    """Two-phase summary: English streamed first, then a Filipino translation of it."""

    def __init__(self, *, client: GeminiClient) -> None:
        self._client = client

    def _run_phase(self, phase: SummaryPhase, prompt: str) -> Iterator[SummaryEvent]:
        text = ""
        try:
            for delta in self._client.stream_text(prompt):
                text += delta
                yield SummaryEvent.partial(phase, delta)
        except LLMError as e:
            raise SummaryStreamError(str(e)) from e
        yield SummaryEvent.complete(phase, text.strip())

    def stream(self, article: Article) -> Iterator[SummaryEvent]:
        if not self._client.available:
            # no credential: settle on what the article already carries
            yield SummaryEvent.complete(SummaryPhase.ENGLISH, article.summary_english)
            yield SummaryEvent.complete(SummaryPhase.FILIPINO, article.summary_filipino or "")
            return

        phase = SummaryPhase.ENGLISH
        english = ""
        try:
            for event in self._run_phase(phase, build_english_prompt(article.title, article.summary_english)):
                if event.kind == EventKind.COMPLETE:
                    english = event.text
                yield event
            phase = SummaryPhase.FILIPINO
            yield from self._run_phase(phase, build_filipino_prompt(english))
        except SummaryStreamError as e:
            logger.warning("summary stream failed during %s phase: %s", phase.value, e)
            yield SummaryEvent.error(phase, str(e) or "Failed to generate summary.")


@dataclass
class StreamingSummaryState:
    english_summary: str = ""
    filipino_summary: str = ""
    is_streaming_english: bool = False
    is_streaming_filipino: bool = False
    error: str | None = None

    def reset(self) -> None:
        self.english_summary = ""
        self.filipino_summary = ""
        self.is_streaming_english = True
        self.is_streaming_filipino = True
        self.error = None

    def apply(self, event: SummaryEvent) -> None:
        if event.kind == EventKind.ERROR:
            # partial text stays visible
            self.error = event.text
            self.is_streaming_english = False
            self.is_streaming_filipino = False
            return
        if event.phase == SummaryPhase.ENGLISH:
            if event.kind == EventKind.PARTIAL:
                self.english_summary += event.text
            else:
                self.english_summary = event.text
                self.is_streaming_english = False
        else:
            if event.kind == EventKind.PARTIAL:
                self.filipino_summary += event.text
            else:
                self.filipino_summary = event.text
                self.is_streaming_filipino = False

    @property
    def filipino_pending(self) -> bool:
        return self.is_streaming_filipino or self.filipino_summary == FILIPINO_PLACEHOLDER


class SummarySession:
    """Binds one streamer to one state object and a single change listener."""

    def __init__(
        self,
        *,
        streamer: SummaryStreamer,
        on_change: Callable[[StreamingSummaryState], None] | None = None,
    ) -> None:
        self._streamer = streamer
        self._on_change = on_change
        self.state = StreamingSummaryState()

    def start(self, article: Article) -> StreamingSummaryState:
        self.state.reset()
        self._notify()
        for event in self._streamer.stream(article):
            self.state.apply(event)
            self._notify()
        return self.state

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.state)
