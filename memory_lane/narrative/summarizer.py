"""Nostalgic summaries of time-machine buckets.

The Summarizer protocol is the only seam between recall and the language
model.  Implementations MUST NOT raise: a missing key, a network error or
an unusable response all degrade to a fixed fallback string so the buckets
can still be shown.

LLM usage:
    GeminiSummarizer uses Google Gemini via langchain-google-genai.  The
    model sees dates, titles, captions and notes of the recalled memories,
    never ids, owners or coordinates.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Protocol, Sequence

from memory_lane.config import settings
from memory_lane.domain.memory import Memory

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Here's a blast from the past!"
FALLBACK_MESSAGE = "Rediscover your memories from this day in history! ✨"

LLMFactory = Callable[[], Any]  # Returns a langchain BaseChatModel


class Summarizer(Protocol):
    """Turns recalled memories into one short human-readable message."""

    def summarize(
        self,
        on_this_day: Sequence[Memory],
        exactly_one_month_ago: Sequence[Memory],
        around_one_month_ago: Sequence[Memory],
    ) -> str:
        ...


class StaticSummarizer:
    """Always returns the same message.  Used offline and in tests."""

    def __init__(self, message: str = MISSING_KEY_MESSAGE) -> None:
        self.message = message

    def summarize(
        self,
        on_this_day: Sequence[Memory],
        exactly_one_month_ago: Sequence[Memory],
        around_one_month_ago: Sequence[Memory],
    ) -> str:
        return self.message


# ── Prompt ───────────────────────────────────────────────────────────────────

_SUMMARY_PROMPT = """You are a warm, nostalgic memory assistant.
Look at these memories from the user's past:

{descriptions}

Write a short, heartwarming, 1-2 sentence message inviting the user to revisit these moments.
Acknowledge the mix of timeframes if present (e.g., "From last year and last month...").
Don't be too specific about details, just capture the vibe.
Use emojis."""


def _format_bucket(memories: Sequence[Memory], label: str) -> str:
    if not memories:
        return ""
    lines = [f"{label}:"]
    for m in memories:
        lines.append(f"- [{m.date}] {m.title}: {m.caption} ({', '.join(m.notes)})")
    return "\n".join(lines)


def build_summary_prompt(
    on_this_day: Sequence[Memory],
    exactly_one_month_ago: Sequence[Memory],
    around_one_month_ago: Sequence[Memory],
) -> str:
    """Render the prompt, omitting empty buckets entirely."""
    sections = [
        _format_bucket(on_this_day, "ON THIS DAY (Previous Years)"),
        _format_bucket(exactly_one_month_ago, "EXACTLY ONE MONTH AGO"),
        _format_bucket(around_one_month_ago, "AROUND THIS TIME LAST MONTH"),
    ]
    return _SUMMARY_PROMPT.format(descriptions="\n\n".join(s for s in sections if s))


# ── Gemini ───────────────────────────────────────────────────────────────────

def _default_llm_factory(api_key: str | None):
    """Create a Gemini chat model from settings, authenticated with *api_key*."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=api_key,
        temperature=settings.gemini_temperature,
        max_output_tokens=settings.gemini_max_output_tokens,
    )


class GeminiSummarizer:
    """Summarizer backed by Gemini.

    Args:
        llm_factory: Optional override for LLM construction (for testing).
        api_key: Overrides the configured key.  Passed to the default
                 factory; a custom llm_factory handles its own auth.
    """

    def __init__(
        self,
        llm_factory: LLMFactory | None = None,
        api_key: str | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.resolved_gemini_api_key()
        self._llm_factory = llm_factory or partial(_default_llm_factory, self._api_key)

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def summarize(
        self,
        on_this_day: Sequence[Memory],
        exactly_one_month_ago: Sequence[Memory],
        around_one_month_ago: Sequence[Memory],
    ) -> str:
        if not self.configured:
            logger.error("Gemini API key is missing — using fallback message")
            return MISSING_KEY_MESSAGE

        prompt = build_summary_prompt(on_this_day, exactly_one_month_ago, around_one_month_ago)
        try:
            llm = self._llm_factory()
            response = llm.invoke(prompt)
            text = response.content if hasattr(response, "content") else str(response)
        except Exception as exc:
            logger.exception("Gemini summary failed: %s — using fallback message", exc)
            return FALLBACK_MESSAGE

        if not isinstance(text, str) or not text.strip():
            logger.warning("Gemini returned an empty summary — using fallback message")
            return FALLBACK_MESSAGE

        logger.info("Gemini summary length: %d chars", len(text))
        return text.strip()
