"""Application settings and configuration management."""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    PERSONA_DEFAULT: str = "recruiter"
    LANGUAGE_DEFAULT: str = "English"
    QUESTION_COUNT: int = Field(default=5, ge=1)

    # Deliberate interviewer pause between the candidate's answer and the next prompt.
    THINK_DELAY_MIN_S: float = Field(default=1.5, ge=0.0)
    THINK_DELAY_MAX_S: float = Field(default=3.0, ge=0.0)
    TRANSITION_PAUSE_S: float = Field(default=0.5, ge=0.0)

    MIN_ANSWERS_FOR_FEEDBACK: int = Field(default=1, ge=1)
    SKIP_MARKER: str = "[Skipped]"
    CHALLENGE_FOLLOW_UPS: bool = False

    MAX_ACTIVE_SESSIONS: int = Field(default=100, ge=1)
    LLM_CONFIG_PATH: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
