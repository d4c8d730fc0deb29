from __future__ import annotations

from .controller import (
    CommandKind,
    PlaybackCommand,
    PlaybackController,
    PlaybackState,
    TickResult,
    create_controller,
)
from .resolver import find_active, find_preceding, is_sorted

__all__ = [
    "CommandKind",
    "PlaybackCommand",
    "PlaybackController",
    "PlaybackState",
    "TickResult",
    "create_controller",
    "find_active",
    "find_preceding",
    "is_sorted",
]
