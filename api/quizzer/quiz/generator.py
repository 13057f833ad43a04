from __future__ import annotations

import json
import logging
from typing import Any, Dict

from pydantic import ValidationError

from quizzer.chat.prompt import build_quiz_messages
from quizzer.core.errors import CompletionUnavailable
from quizzer.core.openai_llm import CompletionProvider
from quizzer.schemas.quiz import Quiz

logger = logging.getLogger("quiz")

JSON_MODE = {"type": "json_object"}


def strip_fences(s: str) -> str:
    if "```" not in s:
        return s
    out = []
    in_fence = False
    for line in s.splitlines():
        if line.strip().startswith("```"):
            in_fence = not in_fence
            continue
        if in_fence:
            out.append(line)
    return "\n".join(out).strip() or s


def parse_quiz(raw: str) -> Quiz:
    """
    The completion comes back as text even in JSON mode; treat it as untrusted.
    """
    text = strip_fences((raw or "").strip())
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise CompletionUnavailable("Quiz response contains no JSON object")

    try:
        data: Dict[str, Any] = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise CompletionUnavailable(f"Quiz response is not valid JSON: {e.msg}") from e

    try:
        return Quiz.model_validate(data)
    except ValidationError as e:
        raise CompletionUnavailable(f"Quiz response has unexpected shape: {e.error_count()} error(s)") from e


async def generate_quiz(provider: CompletionProvider, transcript: str) -> Quiz:
    raw = await provider.complete(build_quiz_messages(transcript), response_format=JSON_MODE)
    quiz = parse_quiz(raw)
    logger.info("quiz generated questions=%s transcript_chars=%s", len(quiz.questions), len(transcript))
    return quiz
