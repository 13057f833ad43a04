from dataclasses import dataclass

import pytest
from youtube_transcript_api import TranscriptsDisabled

from quizzer.core.errors import TranscriptUnavailable
from quizzer.transcript import fetcher
from quizzer.transcript.fetcher import TranscriptSegment, extract_video_id, fetch_transcript

VIDEO_ID = "n2Fluyr3lbc"


class TestExtractVideoId:
    @pytest.mark.parametrize(
        "reference",
        [
            VIDEO_ID,
            f"  {VIDEO_ID}  ",
            f"https://www.youtube.com/watch?v={VIDEO_ID}",
            f"https://www.youtube.com/watch?v={VIDEO_ID}&t=42s",
            f"https://www.youtube.com/watch?feature=share&v={VIDEO_ID}",
            f"youtube.com/watch?v={VIDEO_ID}",
            f"https://m.youtube.com/watch?v={VIDEO_ID}",
            f"https://music.youtube.com/watch?v={VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}?si=abc",
            f"https://www.youtube.com/embed/{VIDEO_ID}",
            f"https://www.youtube.com/shorts/{VIDEO_ID}",
            f"https://www.youtube.com/live/{VIDEO_ID}?feature=share",
        ],
    )
    def test_accepted_forms(self, reference):
        assert extract_video_id(reference) == VIDEO_ID

    @pytest.mark.parametrize(
        "reference",
        [
            "",
            "hello",
            "https://vimeo.com/123456789",
            "https://www.youtube.com/watch?v=short",
            "https://www.youtube.com/channel/UC1234567890",
            f"https://example.com/watch?v={VIDEO_ID}",
        ],
    )
    def test_rejected_forms(self, reference):
        with pytest.raises(TranscriptUnavailable):
            extract_video_id(reference)


@dataclass
class _Snippet:
    text: str
    start: float
    duration: float


class _FakeApi:
    snippets = []
    error = None
    calls = []

    def fetch(self, video_id, languages=("en",)):
        _FakeApi.calls.append((video_id, list(languages)))
        if _FakeApi.error is not None:
            raise _FakeApi.error
        return iter(_FakeApi.snippets)


@pytest.fixture
def fake_api(monkeypatch):
    _FakeApi.snippets = []
    _FakeApi.error = None
    _FakeApi.calls = []
    monkeypatch.setattr(fetcher, "YouTubeTranscriptApi", _FakeApi)
    return _FakeApi


@pytest.mark.asyncio
class TestFetchTranscript:
    async def test_maps_snippets(self, fake_api):
        fake_api.snippets = [_Snippet("hello", 0.0, 1.2), _Snippet("world", 1.2, 0.8)]
        segments = await fetch_transcript(f"https://youtu.be/{VIDEO_ID}")
        assert segments == [
            TranscriptSegment(text="hello", timestamp=0.0, duration=1.2),
            TranscriptSegment(text="world", timestamp=1.2, duration=0.8),
        ]
        assert fake_api.calls == [(VIDEO_ID, ["en"])]

    async def test_library_error_wrapped(self, fake_api):
        fake_api.error = TranscriptsDisabled(VIDEO_ID)
        with pytest.raises(TranscriptUnavailable) as exc:
            await fetch_transcript(VIDEO_ID)
        assert VIDEO_ID in exc.value.message
        assert isinstance(exc.value.__cause__, TranscriptsDisabled)

    async def test_unexpected_error_wrapped(self, fake_api):
        fake_api.error = ConnectionError("network down")
        with pytest.raises(TranscriptUnavailable) as exc:
            await fetch_transcript(VIDEO_ID)
        assert "network down" in exc.value.message

    async def test_empty_transcript(self, fake_api):
        with pytest.raises(TranscriptUnavailable):
            await fetch_transcript(VIDEO_ID)

    async def test_bad_reference_never_hits_youtube(self, fake_api):
        with pytest.raises(TranscriptUnavailable):
            await fetch_transcript("not a video")
        assert fake_api.calls == []
