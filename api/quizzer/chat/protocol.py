from __future__ import annotations

import json
import random
from typing import Any, Dict, Union

from pydantic import ValidationError

from quizzer.core.errors import InvalidFrame, QuizzerError
from quizzer.schemas.chat import AssistantFrame, ErrorFrame, InboundFrame

META = "meta"
USER = "user"
HANDLED_ROLES = frozenset({META, USER})


def parse_frame(raw: Union[str, bytes]) -> InboundFrame:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidFrame("Frame is not UTF-8 text") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidFrame(f"Frame is not valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise InvalidFrame("Frame must be a JSON object")

    try:
        frame = InboundFrame.model_validate(data)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise InvalidFrame(f"Frame is missing or has invalid fields: {', '.join(fields)}") from e

    if frame.role in HANDLED_ROLES and not frame.content.strip():
        raise InvalidFrame(f"Frame content is empty for role {frame.role!r}")
    return frame


def new_message_id() -> int:
    # 53 bits so the number survives a JSON round trip in a browser
    return random.getrandbits(53)


def assistant_frame(content: str) -> Dict[str, Any]:
    return AssistantFrame(content=content, id=new_message_id()).model_dump()


def error_frame(err: QuizzerError) -> Dict[str, Any]:
    return ErrorFrame(kind=err.kind, message=err.message).model_dump()


def internal_error_frame() -> Dict[str, Any]:
    return ErrorFrame(kind="internal", message="Internal server error").model_dump()
