"""
YouTube transcript retrieval.

Video references arrive from clients as full URLs or bare ids; both resolve to
the 11-character video id before the caption track is fetched.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional
from urllib.parse import parse_qs, urlparse

from youtube_transcript_api import YouTubeTranscriptApi, YouTubeTranscriptApiException

from quizzer.core.config import settings
from quizzer.core.errors import TranscriptUnavailable

logger = logging.getLogger("transcript")

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_YOUTUBE_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com", "music.youtube.com"}
_PATH_PREFIXES = ("embed", "shorts", "live", "v")


@dataclass(frozen=True)
class TranscriptSegment:
    text: str
    timestamp: float = 0.0
    duration: float = 0.0


TranscriptFetcher = Callable[[str], Awaitable[List[TranscriptSegment]]]


def extract_video_id(reference: str) -> str:
    """
    Accepts a bare id, watch?v= URLs, youtu.be short links and
    /embed, /shorts, /live paths.
    """
    ref = (reference or "").strip()
    if _VIDEO_ID_RE.match(ref):
        return ref

    if "://" not in ref:
        ref = "https://" + ref
    parsed = urlparse(ref)
    host = (parsed.hostname or "").lower()

    candidate: Optional[str] = None
    if host in ("youtu.be", "www.youtu.be"):
        candidate = parsed.path.lstrip("/").split("/")[0]
    elif host in _YOUTUBE_HOSTS:
        if parsed.path == "/watch":
            candidate = (parse_qs(parsed.query).get("v") or [""])[0]
        else:
            parts = [p for p in parsed.path.split("/") if p]
            if len(parts) >= 2 and parts[0] in _PATH_PREFIXES:
                candidate = parts[1]

    if candidate and _VIDEO_ID_RE.match(candidate):
        return candidate
    raise TranscriptUnavailable(f"Not a YouTube video reference: {reference!r}")


def _fetch_blocking(video_id: str, languages: List[str]) -> List[TranscriptSegment]:
    fetched = YouTubeTranscriptApi().fetch(video_id, languages=languages)
    return [
        TranscriptSegment(text=s.text, timestamp=float(s.start), duration=float(s.duration))
        for s in fetched
    ]


async def fetch_transcript(reference: str) -> List[TranscriptSegment]:
    video_id = extract_video_id(reference)
    languages = settings.languages() or ["en"]

    try:
        segments = await asyncio.to_thread(_fetch_blocking, video_id, languages)
    except YouTubeTranscriptApiException as e:
        logger.warning("transcript unavailable video_id=%s err=%s", video_id, type(e).__name__)
        raise TranscriptUnavailable(f"No transcript available for video {video_id}") from e
    except Exception as e:
        logger.error("transcript fetch failed video_id=%s err=%s", video_id, str(e))
        raise TranscriptUnavailable(f"Transcript fetch failed for video {video_id}: {e}") from e

    if not segments:
        raise TranscriptUnavailable(f"Transcript for video {video_id} is empty")

    logger.info("transcript fetched video_id=%s segments=%s", video_id, len(segments))
    return segments
