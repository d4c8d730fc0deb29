from __future__ import annotations

import hashlib
import re

_NON_WORD_RE = re.compile(r"[^\w\s'-]")


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def clean_word(word: str) -> str:
    # keep letters, digits and internal apostrophes/hyphens: "Don't," -> "don't"
    cleaned = _NON_WORD_RE.sub("", word.lower()).strip()
    return cleaned.strip("'-")
