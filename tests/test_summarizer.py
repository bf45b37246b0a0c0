"""Tests for the nostalgic summarizer and the time machine.

LLM responses are mocked at the LangChain invoke level — production uses
real Gemini.
"""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from memory_lane.narrative.summarizer import (
    FALLBACK_MESSAGE,
    MISSING_KEY_MESSAGE,
    GeminiSummarizer,
    StaticSummarizer,
    build_summary_prompt,
)
from memory_lane.narrative.time_machine import build_time_machine

from tests.test_memory import _memory

_TODAY = date(2024, 7, 15)


def _mock_llm(content) -> MagicMock:
    mock = MagicMock()
    mock.invoke.return_value = SimpleNamespace(content=content)
    return mock


def _anniversary():
    return [_memory(id="a", date="2022-07-15", title="Beach day", caption="Sunset", notes=["sand", "waves"])]


class TestBuildSummaryPrompt:
    def test_formats_memory_lines(self) -> None:
        prompt = build_summary_prompt(_anniversary(), [], [])
        assert "ON THIS DAY (Previous Years):" in prompt
        assert "- [2022-07-15] Beach day: Sunset (sand, waves)" in prompt

    def test_omits_empty_buckets(self) -> None:
        prompt = build_summary_prompt(_anniversary(), [], [])
        assert "EXACTLY ONE MONTH AGO" not in prompt
        assert "AROUND THIS TIME LAST MONTH" not in prompt

    def test_includes_all_labels_when_present(self) -> None:
        exact = [_memory(id="b", date="2024-06-15")]
        around = [_memory(id="c", date="2024-06-13")]
        prompt = build_summary_prompt(_anniversary(), exact, around)
        assert "EXACTLY ONE MONTH AGO:" in prompt
        assert "AROUND THIS TIME LAST MONTH:" in prompt

    def test_no_ids_or_owners_leak(self) -> None:
        prompt = build_summary_prompt(_anniversary(), [], [])
        assert "couple-1" not in prompt
        assert "alice" not in prompt


class TestGeminiSummarizer:
    def test_missing_key_returns_fallback_without_calling_llm(self) -> None:
        factory = MagicMock()
        summarizer = GeminiSummarizer(llm_factory=factory, api_key="")
        assert not summarizer.configured
        assert summarizer.summarize(_anniversary(), [], []) == MISSING_KEY_MESSAGE
        factory.assert_not_called()

    def test_returns_llm_text(self) -> None:
        llm = _mock_llm("  Remember that sunset? 🌅  ")
        summarizer = GeminiSummarizer(llm_factory=lambda: llm, api_key="test-key")
        assert summarizer.summarize(_anniversary(), [], []) == "Remember that sunset? 🌅"
        prompt = llm.invoke.call_args[0][0]
        assert "Beach day" in prompt

    def test_llm_error_returns_fallback(self) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("quota exceeded")
        summarizer = GeminiSummarizer(llm_factory=lambda: llm, api_key="test-key")
        assert summarizer.summarize(_anniversary(), [], []) == FALLBACK_MESSAGE

    def test_factory_error_returns_fallback(self) -> None:
        def broken_factory():
            raise ImportError("langchain_google_genai not installed")

        summarizer = GeminiSummarizer(llm_factory=broken_factory, api_key="test-key")
        assert summarizer.summarize(_anniversary(), [], []) == FALLBACK_MESSAGE

    def test_empty_response_returns_fallback(self) -> None:
        summarizer = GeminiSummarizer(llm_factory=lambda: _mock_llm("   "), api_key="test-key")
        assert summarizer.summarize(_anniversary(), [], []) == FALLBACK_MESSAGE

    def test_non_text_response_returns_fallback(self) -> None:
        summarizer = GeminiSummarizer(llm_factory=lambda: _mock_llm(["part"]), api_key="test-key")
        assert summarizer.summarize(_anniversary(), [], []) == FALLBACK_MESSAGE

    def test_explicit_key_reaches_default_model(self) -> None:
        with patch("langchain_google_genai.ChatGoogleGenerativeAI") as chat_cls:
            chat_cls.return_value = _mock_llm("Remember? 🌅")
            summarizer = GeminiSummarizer(api_key="explicit-key")
            assert summarizer.summarize(_anniversary(), [], []) == "Remember? 🌅"
        assert chat_cls.call_args.kwargs["google_api_key"] == "explicit-key"


class TestTimeMachine:
    def test_nothing_recalled_skips_summarizer(self) -> None:
        summarizer = MagicMock()
        result = build_time_machine([_memory(date="2024-01-01")], _TODAY, summarizer)
        assert result.buckets.is_empty
        assert result.message == ""
        summarizer.summarize.assert_not_called()

    def test_message_attached_when_buckets_filled(self) -> None:
        result = build_time_machine(_anniversary(), _TODAY, StaticSummarizer("Look back ✨"))
        assert [m.id for m in result.buckets.on_this_day] == ["a"]
        assert result.message == "Look back ✨"
        assert result.window.last_month_date == date(2024, 6, 15)

    def test_summarizer_receives_buckets_in_order(self) -> None:
        summarizer = MagicMock()
        summarizer.summarize.return_value = "hi"
        memories = _anniversary() + [_memory(id="b", date="2024-06-15"), _memory(id="c", date="2024-06-14")]
        build_time_machine(memories, _TODAY, summarizer)
        on_this_day, exact, around = summarizer.summarize.call_args[0]
        assert [m.id for m in on_this_day] == ["a"]
        assert [m.id for m in exact] == ["b"]
        assert [m.id for m in around] == ["c"]

    def test_unconfigured_gemini_does_not_affect_buckets(self) -> None:
        result = build_time_machine(_anniversary(), _TODAY, GeminiSummarizer(api_key=""))
        assert len(result.buckets.on_this_day) == 1
        assert result.message == MISSING_KEY_MESSAGE
