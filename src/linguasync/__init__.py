"""LinguaSync: subtitle timing engine for dual-language learning playback."""

__version__ = "0.1.0"
