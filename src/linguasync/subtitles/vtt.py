"""
WebVTT parsing and serialization for LinguaSync.

Responsibilities:
- Turn subtitle documents into ordered, immutable Cue sequences
- Serialize Cue sequences back to WebVTT text
- Pair translated texts with original timing (1:1, checked)

Does NOT:
- Validate WEBVTT headers or interpret cue settings
- Read or write files (Storage does)
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Any, Iterable, Mapping, Sequence

from linguasync.domain.cues import Cue
from linguasync.exceptions import CountMismatchError
from linguasync.subtitles import timestamps

HEADER = "WEBVTT"
TIMING_DELIMITER = "-->"

_INDEX_LINE_RE = re.compile(r"^[0-9]+$")
_ARROW_RE = re.compile(r"-{2,}>")


def _is_index_line(line: str) -> bool:
    return bool(_INDEX_LINE_RE.match(line))


def _parse_timing(line: str) -> tuple[float, float]:
    start_part, _, end_part = line.partition(TIMING_DELIMITER)
    # anything after the end timestamp is cue settings
    end_tokens = end_part.split()
    start = timestamps.decode(start_part)
    end = timestamps.decode(end_tokens[0]) if end_tokens else 0.0
    return start, max(start, end)


def parse(text: str) -> list[Cue]:
    """
    Parse a WebVTT document into cues.

    Never raises: malformed timing decodes to zero, stray lines are skipped and
    cues without text are dropped. Indices are regenerated as 1..N.
    """
    # only "\n" ends a line; other Unicode line breaks belong to cue text
    lines = text.strip().split("\n")
    cues: list[Cue] = []

    i = 0
    # header and metadata: everything before the first timing line
    while i < len(lines) and TIMING_DELIMITER not in lines[i]:
        i += 1

    while i < len(lines):
        line = lines[i].strip()

        if not line or _is_index_line(line):
            i += 1
            continue

        if TIMING_DELIMITER not in line:
            i += 1
            continue

        start, end = _parse_timing(line)
        i += 1

        text_lines: list[str] = []
        while i < len(lines):
            candidate = lines[i].strip()
            if not candidate or TIMING_DELIMITER in candidate or _is_index_line(candidate):
                break
            text_lines.append(candidate)
            i += 1

        cue_text = "\n".join(text_lines).strip()
        if cue_text:
            cues.append(Cue(index=len(cues) + 1, start=start, end=end, text=cue_text))

    return cues


def serialize(cues: Iterable[Cue]) -> str:
    lines: list[str] = [HEADER, ""]
    for number, cue in enumerate(cues, start=1):
        lines.append(str(number))
        lines.append(f"{timestamps.encode(cue.start)} {TIMING_DELIMITER} {timestamps.encode(cue.end)}")
        lines.append(cue.text.strip())
        lines.append("")
    return "\n".join(lines) + "\n"


def looks_like_vtt(text: str) -> bool:
    return text.strip().startswith(HEADER)


def extract_texts(cues: Sequence[Cue]) -> list[str]:
    return [cue.text for cue in cues]


def build_from_translation(original: Sequence[Cue], translated_texts: Sequence[str]) -> list[Cue]:
    """
    Re-time translated texts on the original cues.

    Raises CountMismatchError unless there is exactly one text per cue; the
    caller must never truncate or pad to make the counts agree. Texts are
    made cue-safe (see `cue_safe_text`) so a saved track parses back to the
    same number of cues.
    """
    if len(original) != len(translated_texts):
        raise CountMismatchError(expected=len(original), actual=len(translated_texts))
    return [
        replace(cue, text=cue_safe_text(text))
        for cue, text in zip(original, translated_texts)
    ]


def cue_safe_text(text: str) -> str:
    """
    Rewrite free text so `parse` reads it back as one cue body.

    Blank lines are dropped, "-->" becomes "->" and a digits-only line is
    joined to a neighbouring line. A text that is nothing but digits cannot
    survive a save: the parser reads it as a cue number and drops the cue.
    """
    kept: list[str] = []
    pending = ""
    for raw in text.replace("\r", "").split("\n"):
        line = _ARROW_RE.sub("->", raw.strip())
        if not line:
            continue
        if _is_index_line(line):
            if kept:
                kept[-1] = f"{kept[-1]} {line}"
            else:
                pending = f"{pending} {line}".strip()
            continue
        kept.append(f"{pending} {line}".strip())
        pending = ""
    if pending:
        kept.append(pending)
    return "\n".join(kept)


def segments_to_cues(segments: Iterable[Mapping[str, Any]]) -> list[Cue]:
    """Map transcription segments ({start, end, text}) onto sequential cues."""
    cues: list[Cue] = []
    for seg in segments:
        text = str(seg.get("text") or "").strip()
        if not text:
            continue
        start = max(0.0, float(seg.get("start") or 0.0))
        end = max(start, float(seg.get("end") or 0.0))
        cues.append(Cue(index=len(cues) + 1, start=start, end=end, text=text))
    return cues
