from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration for LinguaSync.

    All settings are loaded from environment variables with the
    `LINGUASYNC_` prefix and optional `.env` support.
    """

    model_config = SettingsConfigDict(
        env_prefix="LINGUASYNC_",
        env_file=".env",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Runtime
    # ------------------------------------------------------------------
    workdir: str = Field(
        default=".linguasync",
        description="Root directory for job workspaces.",
    )
    source_language: str = Field(
        default="auto",
        description="Source language code for transcription ('auto' lets the service detect).",
    )
    target_language: str = Field(
        default="vi",
        description="Default target language code for translation.",
    )

    # ------------------------------------------------------------------
    # Model provider (OpenAI-compatible API, e.g. Groq)
    # ------------------------------------------------------------------
    api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible provider.",
    )
    api_base_url: str | None = Field(
        default="https://api.groq.com/openai/v1",
        description="Base URL of the OpenAI-compatible provider (None for api.openai.com).",
    )
    request_timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for provider and dictionary requests.",
    )

    # ------------------------------------------------------------------
    # Transcription
    # ------------------------------------------------------------------
    transcription_backend: str = Field(
        default="openai",
        description="Transcription backend: openai or faster-whisper.",
    )
    transcription_model: str = Field(
        default="whisper-large-v3-turbo",
        description="Transcription model name.",
    )

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------
    translation_model: str = Field(
        default="llama-3.3-70b-versatile",
        description="Chat model used to translate cue batches.",
    )
    translation_temperature: float = Field(
        default=0.3,
        description="Sampling temperature for translation.",
    )
    translation_batch_size: int = Field(
        default=20,
        ge=1,
        description="Number of cue texts sent per translation request.",
    )
    translation_max_retries: int = Field(
        default=2,
        ge=0,
        description="Additional attempts per batch after the first one fails.",
    )

    # ------------------------------------------------------------------
    # Learning aids
    # ------------------------------------------------------------------
    dictionary_url: str = Field(
        default="https://api.dictionaryapi.dev/api/v2/entries/en",
        description="Base URL of the word-definition service.",
    )
    auto_pause_lead_seconds: float = Field(
        default=0.1,
        description="How close to a cue end auto-pause fires.",
    )
    restart_threshold_seconds: float = Field(
        default=2.0,
        description="Seconds into a cue after which 'previous' restarts it.",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )

    def to_public_dict(self) -> dict:
        """
        Return a dictionary of non-sensitive settings suitable
        for logging or CLI display.
        """
        return {
            "workdir": self.workdir,
            "source_language": self.source_language,
            "target_language": self.target_language,
            "api_base_url": self.api_base_url,
            "api_key_set": bool(self.api_key),
            "request_timeout": self.request_timeout,
            "transcription_backend": self.transcription_backend,
            "transcription_model": self.transcription_model,
            "translation_model": self.translation_model,
            "translation_temperature": self.translation_temperature,
            "translation_batch_size": self.translation_batch_size,
            "translation_max_retries": self.translation_max_retries,
            "dictionary_url": self.dictionary_url,
            "auto_pause_lead_seconds": self.auto_pause_lead_seconds,
            "restart_threshold_seconds": self.restart_threshold_seconds,
            "log_level": self.log_level,
        }
