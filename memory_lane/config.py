"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "memory-lane"
    debug: bool = False
    log_level: str = "INFO"

    # Map clustering
    cluster_radius_km: float = 1.0

    # Time machine
    recall_window_days: int = 3
    recent_memories_count: int = 6

    # Gemini LLM (nostalgic summaries)
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_temperature: float = 0.7
    gemini_max_output_tokens: int = 256

    model_config = {"env_prefix": "MEMORY_LANE_"}

    def resolved_gemini_api_key(self) -> str | None:
        """Prefer the prefixed setting, fall back to the SDK's own variable."""
        return self.gemini_api_key or os.environ.get("GOOGLE_API_KEY")


settings = Settings()
