import logging
from typing import Any, Dict, Optional

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Query, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from quizzer.chat.endpoint import ChatConnection
from quizzer.core.config import settings
from quizzer.core.errors import QuizzerError
from quizzer.core.logging import setup_logging
from quizzer.core.openai_llm import CompletionProvider, list_models
from quizzer.deps import get_chat_provider, get_quiz_provider, get_transcript_fetcher
from quizzer.quiz.generator import generate_quiz
from quizzer.transcript.condenser import condense_transcript
from quizzer.transcript.fetcher import TranscriptFetcher

setup_logging(settings.log_level)
logger = logging.getLogger("api")

app = FastAPI(
    title="Youtube Quizzer API",
    version="1.0.0",
    description="Tutor chat over websocket and multiple choice quizzes from YouTube transcripts.",
)

if settings.app_env.lower() in {"dev", "development", "local"}:
    origins = ["*"]
else:
    origins = settings.origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QuizzerError)
async def _quizzer_error(request: Request, exc: QuizzerError) -> JSONResponse:
    logger.warning("%s %s failed kind=%s msg=%s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=400, content=exc.to_payload())


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Welcome to the Youtube Quizzer API!"


@app.get("/health")
async def health() -> JSONResponse:
    async with httpx.AsyncClient() as client:
        completion = await list_models(client, timeout_s=5.0)

    status = "ok" if completion["ok"] else "degraded"
    payload = {
        "status": status,
        "env": settings.app_env,
        "services": {"completion": {"ok": completion["ok"], "url": completion["url"], "error": completion["error"]}},
        "models": {"chat": settings.chat_model, "quiz": settings.quiz_model},
    }
    code = 200 if status == "ok" else 503
    logger.info("health status=%s completion_ok=%s", status, completion["ok"])
    return JSONResponse(content=payload, status_code=code)


@app.get("/quiz")
async def quiz(
    video: Optional[str] = Query(default=None, description="YouTube URL or video id"),
    provider: CompletionProvider = Depends(get_quiz_provider),
    fetch_transcript: TranscriptFetcher = Depends(get_transcript_fetcher),
) -> Dict[str, Any]:
    """
    Transcript -> condensed text -> JSON-mode completion -> validated quiz.
    """
    reference = video or settings.quiz_default_video
    segments = await fetch_transcript(reference)
    transcript = condense_transcript(segments, max_chars=settings.transcript_max_chars)
    result = await generate_quiz(provider, transcript)
    return result.model_dump()


@app.websocket("/")
@app.websocket("/ws")
async def chat(
    websocket: WebSocket,
    provider: CompletionProvider = Depends(get_chat_provider),
    fetch_transcript: TranscriptFetcher = Depends(get_transcript_fetcher),
) -> None:
    conn = ChatConnection(
        websocket,
        provider=provider,
        fetch_transcript=fetch_transcript,
        max_chars=settings.transcript_max_chars,
        timeout_s=settings.completion_timeout_s,
        strict_frames=settings.strict_frames,
    )
    await conn.run()


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
