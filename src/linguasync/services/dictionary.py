"""
Word lookup for the learning player.

Responsibilities:
- Clean a clicked word into a dictionary key
- Ask a DictionaryClient for entries and render a short definition

Does NOT:
- Raise on lookup failures (they become user-facing text)
- Cache results
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import requests

from linguasync.utils.logging import get_logger
from linguasync.utils.text import clean_word

log = get_logger(__name__)

NOT_FOUND_MESSAGE = "Word not found in the dictionary."
NO_DEFINITION_MESSAGE = "No definition found."
LOOKUP_FAILED_MESSAGE = "Dictionary lookup failed."


class DictionaryClient(Protocol):
    def fetch(self, word: str) -> list[dict[str, Any]] | None: ...


class FreeDictionaryClient:
    """dictionaryapi.dev-compatible HTTP client."""

    def __init__(self, base_url: str, *, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch(self, word: str) -> list[dict[str, Any]] | None:
        response = requests.get(f"{self.base_url}/{word}", timeout=self.timeout)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        payload = response.json()
        return payload if isinstance(payload, list) else None


@dataclass(frozen=True)
class WordDefinition:
    word: str
    phonetic: str = ""
    part_of_speech: str = ""
    definition: str = ""

    def render(self) -> str:
        result = ""
        if self.phonetic:
            result += f"{self.phonetic}\n"
        if self.part_of_speech:
            result += f"[{self.part_of_speech}] "
        result += self.definition or NO_DEFINITION_MESSAGE
        return result


def _first(items: Any) -> dict[str, Any]:
    """First element of a JSON list when it is an object; {} for any other shape."""
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _first_definition(entries: list[dict[str, Any]], word: str) -> WordDefinition:
    entry = _first(entries)
    meaning = _first(entry.get("meanings"))
    definition = _first(meaning.get("definitions"))
    return WordDefinition(
        word=word,
        phonetic=_string(entry.get("phonetic")),
        part_of_speech=_string(meaning.get("partOfSpeech")),
        definition=_string(definition.get("definition")),
    )


@dataclass
class WordLookupService:
    client: DictionaryClient

    def define(self, word: str) -> WordDefinition | None:
        key = clean_word(word)
        if not key:
            return None
        entries = self.client.fetch(key)
        if not entries:
            return None
        return _first_definition(entries, key)

    def lookup(self, word: str) -> str:
        try:
            found = self.define(word)
        except (requests.RequestException, ValueError, AttributeError) as exc:
            log.warning("Dictionary lookup for %r failed: %s", word, exc)
            return LOOKUP_FAILED_MESSAGE
        if found is None:
            return NOT_FOUND_MESSAGE
        return found.render()


def create_lookup_service(settings) -> WordLookupService:
    return WordLookupService(
        client=FreeDictionaryClient(settings.dictionary_url, timeout=settings.request_timeout),
    )
