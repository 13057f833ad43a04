"""
FastAPI dependencies. Tests swap these out through app.dependency_overrides.
"""

from __future__ import annotations

from typing import AsyncIterator

import httpx
from fastapi import Depends

from quizzer.core.config import settings
from quizzer.core.openai_llm import CompletionProvider, OpenAIChatProvider
from quizzer.transcript.fetcher import TranscriptFetcher, fetch_transcript


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


def get_chat_provider(client: httpx.AsyncClient = Depends(get_http_client)) -> CompletionProvider:
    return OpenAIChatProvider(client, model=settings.chat_model, temperature=settings.chat_temperature)


def get_quiz_provider(client: httpx.AsyncClient = Depends(get_http_client)) -> CompletionProvider:
    return OpenAIChatProvider(client, model=settings.quiz_model)


def get_transcript_fetcher() -> TranscriptFetcher:
    return fetch_transcript
