"""
Playback synchronization for the dual-subtitle learning player.

The host (a UI frame callback or timer) calls `tick(current_time)` with the
media clock. Each tick resolves the active cue on both tracks and applies the
learning-mode policies, issuing at most one command to the media engine.

Responsibilities:
- Keep original/translated active indices in step with the same clock value
- Enforce the cue loop window and auto-pause at cue ends
- Sentence-relative navigation (prev/next/jump)

Does NOT:
- Own the clock (seek/pause/play are fire-and-forget requests)
- Mutate cue sequences (tracks are swapped whole)
- Raise for "no active cue"; that is a normal None
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Sequence

from linguasync.domain.cues import Cue, SubtitleTrack, TrackRole
from linguasync.playback.resolver import find_active, find_preceding, is_sorted
from linguasync.utils.logging import get_logger

log = get_logger(__name__)

AUTO_PAUSE_LEAD_SECONDS = 0.1
RESTART_THRESHOLD_SECONDS = 2.0
MIN_PLAYBACK_RATE = 0.5
MAX_PLAYBACK_RATE = 2.0


class MediaEngine(Protocol):
    def seek(self, seconds: float) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def set_rate(self, rate: float) -> None: ...


class WordLookup(Protocol):
    def lookup(self, word: str) -> str: ...


class PlaybackState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class CommandKind(str, Enum):
    SEEK = "seek"
    PAUSE = "pause"
    PLAY = "play"


@dataclass(frozen=True)
class PlaybackCommand:
    kind: CommandKind
    position: float | None = None


@dataclass(frozen=True)
class TickResult:
    time: float
    original_index: int | None
    translated_index: int | None
    command: PlaybackCommand | None = None


@dataclass
class TrackView:
    visible: bool = True
    blurred: bool = False


@dataclass
class PlaybackController:
    media: MediaEngine
    auto_pause_lead: float = AUTO_PAUSE_LEAD_SECONDS
    restart_threshold: float = RESTART_THRESHOLD_SECONDS

    state: PlaybackState = PlaybackState.IDLE
    current_time: float = 0.0
    playback_rate: float = 1.0
    auto_pause: bool = False
    views: dict[TrackRole, TrackView] = field(
        default_factory=lambda: {role: TrackView() for role in TrackRole}
    )

    _tracks: dict[TrackRole, tuple[Cue, ...]] = field(default_factory=dict, init=False, repr=False)
    _active: dict[TrackRole, Optional[int]] = field(default_factory=dict, init=False, repr=False)
    _loop_index: int | None = field(default=None, init=False, repr=False)
    _last_paused_index: int | None = field(default=None, init=False, repr=False)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def begin_loading(self) -> None:
        self.state = PlaybackState.LOADING

    def mark_ready(self) -> None:
        if self.state in {PlaybackState.IDLE, PlaybackState.LOADING}:
            self.state = PlaybackState.READY

    def on_ended(self) -> None:
        self.state = PlaybackState.ENDED

    def load_track(self, track: SubtitleTrack) -> None:
        """Replace a track's cues in one assignment; the next tick sees all of it."""
        cues: tuple[Cue, ...] = track.cues
        if not is_sorted(cues):
            log.warning(
                "%s track cues are not sorted by start; sorting %d cues",
                track.role.value,
                len(cues),
            )
            cues = tuple(sorted(cues, key=lambda c: c.start))
        self._tracks[track.role] = cues
        self._active[track.role] = None
        if track.role is TrackRole.ORIGINAL:
            self._loop_index = None
            self._last_paused_index = None
        log.debug("Loaded %s track (%s, %d cues)", track.role.value, track.language, len(cues))

    def cues(self, role: TrackRole) -> Sequence[Cue]:
        return self._tracks.get(role, ())

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def original_index(self) -> int | None:
        return self._active.get(TrackRole.ORIGINAL)

    @property
    def translated_index(self) -> int | None:
        return self._active.get(TrackRole.TRANSLATED)

    @property
    def looping(self) -> bool:
        return self._loop_index is not None

    @property
    def loop_index(self) -> int | None:
        return self._loop_index

    @property
    def loop_window(self) -> tuple[float, float] | None:
        cue = self._cue_at(self._loop_index)
        return (cue.start, cue.end) if cue else None

    def active_cue(self, role: TrackRole) -> Cue | None:
        index = self._active.get(role)
        if index is None:
            return None
        cues = self.cues(role)
        return cues[index] if index < len(cues) else None

    def active_text(self, role: TrackRole) -> str:
        cue = self.active_cue(role)
        if cue is None or not self.views[role].visible:
            return ""
        return cue.text

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def tick(self, current_time: float) -> TickResult:
        self.current_time = current_time
        for role in TrackRole:
            self._active[role] = find_active(self.cues(role), current_time)

        command = self._enforce_loop(current_time) or self._enforce_auto_pause(current_time)
        return TickResult(
            time=current_time,
            original_index=self.original_index,
            translated_index=self.translated_index,
            command=command,
        )

    def _enforce_loop(self, current_time: float) -> PlaybackCommand | None:
        target = self._cue_at(self._loop_index)
        if target is None or current_time < target.end:
            return None
        # a stale clock after our own seek re-issues the same seek
        return self._seek(target.start)

    def _enforce_auto_pause(self, current_time: float) -> PlaybackCommand | None:
        if not self.auto_pause or self.state is not PlaybackState.PLAYING:
            return None
        index = self.original_index
        cue = self._cue_at(index)
        if cue is None or index == self._last_paused_index:
            return None
        if current_time < cue.end - self.auto_pause_lead:
            return None
        self._last_paused_index = index
        log.debug("Auto-pause at cue %d (t=%.3f)", index, current_time)
        return self.pause()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def play(self) -> PlaybackCommand:
        self.media.play()
        self.state = PlaybackState.PLAYING
        return PlaybackCommand(CommandKind.PLAY)

    def pause(self) -> PlaybackCommand:
        self.media.pause()
        self.state = PlaybackState.PAUSED
        return PlaybackCommand(CommandKind.PAUSE)

    def toggle_play(self) -> PlaybackCommand:
        # resuming keeps the auto-pause record; the paused cue must not pause again
        if self.state is PlaybackState.PLAYING:
            return self.pause()
        return self.play()

    def seek(self, seconds: float) -> PlaybackCommand:
        return self._seek(max(0.0, seconds))

    def _seek(self, position: float) -> PlaybackCommand:
        self.media.seek(position)
        self._last_paused_index = None
        if self.state is PlaybackState.ENDED:
            self.state = PlaybackState.PAUSED
        return PlaybackCommand(CommandKind.SEEK, position)

    def next_cue(self) -> PlaybackCommand | None:
        cues = self.cues(TrackRole.ORIGINAL)
        if not cues:
            return None
        reference = self._reference_index()
        target = 0 if reference is None else min(reference + 1, len(cues) - 1)
        return self._navigate_to(target)

    def prev_cue(self) -> PlaybackCommand | None:
        cues = self.cues(TrackRole.ORIGINAL)
        if not cues:
            return None
        reference = self._reference_index()
        if reference is None:
            target = 0
        elif self.current_time - cues[reference].start > self.restart_threshold:
            target = reference
        else:
            target = max(reference - 1, 0)
        return self._navigate_to(target)

    def jump_to_cue(self, index: int) -> PlaybackCommand | None:
        if self._cue_at(index) is None:
            return None
        command = self._navigate_to(index)
        if self.state is not PlaybackState.PLAYING:
            self.play()
        return command

    def _navigate_to(self, index: int) -> PlaybackCommand:
        if self._loop_index is not None and self._loop_index != index:
            self._loop_index = None
        cue = self.cues(TrackRole.ORIGINAL)[index]
        return self._seek(cue.start)

    def _reference_index(self) -> int | None:
        if self.original_index is not None:
            return self.original_index
        return find_preceding(self.cues(TrackRole.ORIGINAL), self.current_time)

    def _cue_at(self, index: int | None) -> Cue | None:
        if index is None:
            return None
        cues = self.cues(TrackRole.ORIGINAL)
        if 0 <= index < len(cues):
            return cues[index]
        return None

    # ------------------------------------------------------------------
    # Learning aids
    # ------------------------------------------------------------------
    def toggle_loop(self, index: int | None = None) -> bool:
        """Loop the given (or currently active) original cue; off if already looping."""
        if self._loop_index is not None:
            self._loop_index = None
            return False
        target = self.original_index if index is None else index
        if self._cue_at(target) is None:
            return False
        self._loop_index = target
        return True

    def set_auto_pause(self, enabled: bool) -> None:
        self.auto_pause = enabled
        if not enabled:
            self._last_paused_index = None

    def toggle_auto_pause(self) -> bool:
        self.set_auto_pause(not self.auto_pause)
        return self.auto_pause

    def toggle_visibility(self, role: TrackRole) -> bool:
        view = self.views[role]
        view.visible = not view.visible
        return view.visible

    def toggle_blur(self, role: TrackRole) -> bool:
        view = self.views[role]
        view.blurred = not view.blurred
        return view.blurred

    def set_playback_rate(self, rate: float) -> float:
        self.playback_rate = min(MAX_PLAYBACK_RATE, max(MIN_PLAYBACK_RATE, rate))
        self.media.set_rate(self.playback_rate)
        return self.playback_rate

    def change_playback_rate(self, delta: float) -> float:
        return self.set_playback_rate(self.playback_rate + delta)

    def select_word(self, word: str, lookup: WordLookup) -> str:
        if self.state is PlaybackState.PLAYING:
            self.pause()
        return lookup.lookup(word)


# ---------------------------------------------------------------------
# Factory helper
# ---------------------------------------------------------------------
def create_controller(media: MediaEngine, settings) -> PlaybackController:
    return PlaybackController(
        media=media,
        auto_pause_lead=settings.auto_pause_lead_seconds,
        restart_threshold=settings.restart_threshold_seconds,
    )
