from __future__ import annotations

from .base import PromptSpec
from .translation import SUBTITLE_TRANSLATION_PROMPT

__all__ = ["PromptSpec", "SUBTITLE_TRANSLATION_PROMPT"]
