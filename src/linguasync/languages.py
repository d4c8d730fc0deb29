from __future__ import annotations

# English names are what the translation model sees in its instructions.
LANGUAGE_NAMES_EN: dict[str, str] = {
    "en": "English",
    "vi": "Vietnamese",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "pt": "Portuguese",
    "ru": "Russian",
    "ar": "Arabic",
    "hi": "Hindi",
    "th": "Thai",
    "id": "Indonesian",
}

AUTO_DETECT = "auto"
UNKNOWN_SOURCE_NAME = "the original language"


def is_auto(code: str | None) -> bool:
    return not code or code.strip().lower() == AUTO_DETECT


def language_name(code: str | None) -> str:
    if is_auto(code):
        return UNKNOWN_SOURCE_NAME
    return LANGUAGE_NAMES_EN.get(code.strip().lower(), code)
