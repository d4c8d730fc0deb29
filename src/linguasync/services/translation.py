"""
Batch translation service for LinguaSync.

Translates an ordered list of cue texts through a chat-style LLM, in fixed-size
batches, and guarantees exactly one output text per input text in input order.

Responsibilities:
- Split texts into batches and process them sequentially
- Decode and validate each reply (same count as the batch)
- Retry a failing batch a bounded number of times with identical input
- Report fractional progress after every accepted batch

Does NOT:
- Touch cue timing (see subtitles.vtt.build_from_translation)
- Persist anything or update job status (the pipeline does)
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence

from linguasync.exceptions import (
    ConfigurationError,
    TranslationCountMismatchError,
    TranslationResponseError,
    TranslationServiceError,
)
from linguasync.languages import language_name
from linguasync.prompts.base import PromptSpec
from linguasync.prompts.translation import SUBTITLE_TRANSLATION_PROMPT
from linguasync.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_BATCH_SIZE = 20
DEFAULT_MAX_RETRIES = 2

ProgressCallback = Callable[[float], None]


# ---------------------------------------------------------------------
# LLM Client Protocol (keeps the provider isolated & mockable)
# ---------------------------------------------------------------------
class LLMClient(Protocol):
    def generate(
        self,
        *,
        system: str,
        prompt: str,
        model: str,
        temperature: float,
    ) -> str: ...


# ---------------------------------------------------------------------
# OpenAI-compatible client (OpenAI, Groq, ...)
# ---------------------------------------------------------------------
class OpenAIChatClient:
    def __init__(self, api_key: str, *, base_url: str | None = None, timeout: float = 60.0):
        from openai import OpenAI  # local import (optional dependency)

        self._client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    def generate(
        self,
        *,
        system: str,
        prompt: str,
        model: str,
        temperature: float,
    ) -> str:
        response = self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content if response.choices else None
        return content or ""


# ---------------------------------------------------------------------
# Reply decoding
# ---------------------------------------------------------------------
def decode_translations(content: str) -> list[Any]:
    """
    Decode a model reply into the translations array.

    Accepted shapes: a bare JSON array, or a JSON object whose first
    array-valued field holds the translations (e.g. {"translations": [...]}).
    """
    if not content or not content.strip():
        raise TranslationResponseError("Empty response from translation model")
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as exc:
        raise TranslationResponseError("Invalid JSON response from translation model") from exc

    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        for value in parsed.values():
            if isinstance(value, list):
                return value
        raise TranslationResponseError("Could not find translations array in response")
    raise TranslationResponseError(
        f"Unexpected response format from translation model: {type(parsed).__name__}"
    )


def coerce_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def batch_count(total: int, batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    return math.ceil(total / batch_size) if total > 0 else 0


# ---------------------------------------------------------------------
# Batch translator
# ---------------------------------------------------------------------
@dataclass
class BatchTranslator:
    """
    Sequential, order-preserving batch translation.

    Batch i maps to input positions [i * batch_size, (i + 1) * batch_size).
    Each call owns its retry counters, so one translator can serve several
    jobs as long as the LLM client is safe to share.
    """

    llm: LLMClient
    model: str
    temperature: float = 0.3
    batch_size: int = DEFAULT_BATCH_SIZE
    max_retries: int = DEFAULT_MAX_RETRIES
    prompt: PromptSpec = SUBTITLE_TRANSLATION_PROMPT

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")

    def translate(
        self,
        texts: Sequence[str],
        *,
        source_language: str,
        target_language: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[str]:
        total_batches = batch_count(len(texts), self.batch_size)
        source_name = language_name(source_language)
        target_name = language_name(target_language)
        log.info(
            "Translating %d texts %s -> %s in %d batches (model=%s)",
            len(texts),
            source_name,
            target_name,
            total_batches,
            self.model,
        )

        results: list[str] = []
        for batch_index in range(total_batches):
            offset = batch_index * self.batch_size
            batch = list(texts[offset : offset + self.batch_size])
            results.extend(
                self.translate_batch(
                    batch,
                    source_name=source_name,
                    target_name=target_name,
                )
            )
            if on_progress is not None:
                on_progress((batch_index + 1) / total_batches)
        return results

    def translate_batch(
        self,
        batch: Sequence[str],
        *,
        source_name: str,
        target_name: str,
    ) -> list[str]:
        system = self.prompt.render(
            source_language=source_name,
            target_language=target_name,
            count=len(batch),
        )
        prompt = json.dumps(list(batch), ensure_ascii=False)
        attempts = self.max_retries + 1
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                content = self.llm.generate(
                    system=system,
                    prompt=prompt,
                    model=self.model,
                    temperature=self.temperature,
                )
                translations = decode_translations(content)
            except Exception as exc:  # transport, provider or decode failure
                last_error = exc
                log.warning(
                    "Translation attempt %d/%d failed: %s",
                    attempt,
                    attempts,
                    exc,
                )
                continue

            if len(translations) != len(batch):
                last_error = TranslationCountMismatchError(
                    expected=len(batch),
                    actual=len(translations),
                )
                log.warning(
                    "Translation count mismatch (%d vs %d) on attempt %d/%d",
                    len(translations),
                    len(batch),
                    attempt,
                    attempts,
                )
                continue

            return [coerce_text(value) for value in translations]

        if isinstance(last_error, TranslationCountMismatchError):
            raise last_error
        raise TranslationServiceError(
            f"Translation batch failed after {attempts} attempts: {last_error}"
        ) from last_error


# ---------------------------------------------------------------------
# Factory helper (used by Pipeline)
# ---------------------------------------------------------------------
def create_translator(settings) -> BatchTranslator:
    if not settings.api_key:
        raise ConfigurationError("Missing API key. Set LINGUASYNC_API_KEY.")

    return BatchTranslator(
        llm=OpenAIChatClient(
            api_key=settings.api_key,
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
        ),
        model=settings.translation_model,
        temperature=settings.translation_temperature,
        batch_size=settings.translation_batch_size,
        max_retries=settings.translation_max_retries,
    )
