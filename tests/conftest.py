"""Pytest configuration.

Settings are read at import time and require an API key, so a dummy one is set
before anything from quizzer is imported. Nothing here talks to YouTube or to a
completion API.
"""

import asyncio
import os
from typing import Any, Dict, List, Optional

import pytest

os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from quizzer.core.errors import CompletionUnavailable  # noqa: E402
from quizzer.transcript.fetcher import TranscriptSegment  # noqa: E402


class FakeProvider:
    """Scripted completion provider; each reply is a str or an exception to raise."""

    def __init__(self, *replies: Any, delay: float = 0.0) -> None:
        self.replies = list(replies)
        self.delay = delay
        self.calls: List[List[Dict[str, str]]] = []
        self.formats: List[Optional[Dict[str, Any]]] = []

    async def complete(self, messages, response_format=None) -> str:
        self.calls.append([dict(m) for m in messages])
        self.formats.append(response_format)
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.replies:
            raise CompletionUnavailable("no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeFetcher:
    def __init__(self, segments=None, error: Optional[Exception] = None) -> None:
        self.segments = segments or []
        self.error = error
        self.references: List[str] = []

    async def __call__(self, reference: str) -> List[TranscriptSegment]:
        self.references.append(reference)
        if self.error is not None:
            raise self.error
        return list(self.segments)


@pytest.fixture
def short_transcript() -> List[TranscriptSegment]:
    # 13 + 13 + 11 chars of text, 40 once each gets its trailing space
    return [
        TranscriptSegment(text="Hello student", timestamp=0.0, duration=1.5),
        TranscriptSegment(text="welcome to ML", timestamp=1.5, duration=1.5),
        TranscriptSegment(text="lesson one.", timestamp=3.0, duration=1.0),
    ]
