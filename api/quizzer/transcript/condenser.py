from __future__ import annotations

from typing import Iterable

from quizzer.core.errors import InvalidSegment
from quizzer.transcript.fetcher import TranscriptSegment

DEFAULT_MAX_CHARS = 1000


def condense_transcript(segments: Iterable[TranscriptSegment], max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """
    Joins segment texts, each followed by one space, in order.
    Stops once the result reaches max_chars; the segment that crosses the
    cap is kept whole.
    """
    parts = []
    total = 0
    for i, seg in enumerate(segments):
        text = getattr(seg, "text", None)
        if not isinstance(text, str):
            raise InvalidSegment(f"Transcript segment {i} has no text")
        parts.append(text)
        parts.append(" ")
        total += len(text) + 1
        if total >= max_chars:
            break
    return "".join(parts)
