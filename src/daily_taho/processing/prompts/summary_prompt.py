"""Prompt templates for bilingual news summaries."""

from __future__ import annotations

import json
from typing import Any

BATCH_PROMPT_TEMPLATE = """Task: Summarize these Philippine news headlines.
Return ONLY a JSON array of objects with keys: title, source, summary_en, summary_tl, url, date.
Rules:
1. "summary_en": English summary, MUST be 3-5 complete sentences. Do NOT truncate sentences.
2. "summary_tl": Tagalog summary, MUST be 3-5 complete sentences. Do NOT truncate sentences.
3. Ensure summaries capture the main point of the news.
4. Copy "url" exactly as given so each summary can be matched to its article.
Data: {data}"""

ENGLISH_PROMPT_TEMPLATE = """Summarize this news article in 3 to 5 detailed English sentences.
Article Title: {title}
Article Content: {content}

STRICT RULES:
- Exactly 3 to 5 sentences.
- Raw text ONLY. No markdown, no bolding, no prefixes.
- Focus on the factual core."""

FILIPINO_PROMPT_TEMPLATE = """Translate this news summary into high-quality Filipino (Tagalog).
English Summary: {english}

STRICT RULES:
- Match the 3 to 5 sentence count of the source.
- Raw text ONLY. No markdown.
- Use natural Filipino suitable for a premium news app."""


def build_batch_prompt(rows: list[dict[str, Any]]) -> str:
    return BATCH_PROMPT_TEMPLATE.format(data=json.dumps(rows, ensure_ascii=False))


def build_english_prompt(title: str, content: str) -> str:
    return ENGLISH_PROMPT_TEMPLATE.format(title=title, content=content or title)


def build_filipino_prompt(english: str) -> str:
    return FILIPINO_PROMPT_TEMPLATE.format(english=english)
