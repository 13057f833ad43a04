from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union
from uuid import uuid4

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from quizzer.chat.protocol import META, USER, assistant_frame, error_frame, internal_error_frame, parse_frame
from quizzer.chat.session import ConversationSession, Message
from quizzer.core.errors import InvalidFrame, QuizzerError
from quizzer.core.openai_llm import CompletionProvider
from quizzer.transcript.condenser import condense_transcript
from quizzer.transcript.fetcher import TranscriptFetcher

logger = logging.getLogger("chat")


class ChatConnection:
    """
    Drives one websocket connection. Frames are handled one at a time in
    arrival order, so the session history never sees interleaved turns.
    """

    def __init__(
        self,
        websocket: WebSocket,
        provider: CompletionProvider,
        fetch_transcript: TranscriptFetcher,
        max_chars: int,
        timeout_s: Optional[float] = None,
        strict_frames: bool = False,
    ) -> None:
        self.websocket = websocket
        self.session = ConversationSession(provider, timeout_s=timeout_s)
        self.fetch_transcript = fetch_transcript
        self.max_chars = max_chars
        self.strict_frames = strict_frames
        self.conn_id = uuid4().hex[:8]

    async def run(self) -> None:
        await self.websocket.accept()
        logger.info("connection open conn=%s", self.conn_id)
        try:
            while True:
                raw = await self._receive()
                if raw is None:
                    break
                reply = await self.handle(raw)
                if reply is not None and not await self._send(reply):
                    break
        except WebSocketDisconnect:
            pass
        logger.info("connection closed conn=%s messages=%s", self.conn_id, len(self.session))

    async def handle(self, raw: Union[str, bytes]) -> Optional[Dict[str, Any]]:
        """
        Returns the frame to send back, or None when nothing is sent.
        """
        try:
            frame = parse_frame(raw)
            if frame.role == META:
                reply = await self._on_meta(frame.content)
            elif frame.role == USER:
                reply = await self.session.respond_to_user(frame.content)
            elif self.strict_frames:
                raise InvalidFrame(f"Unknown frame role {frame.role!r}")
            else:
                logger.warning("ignoring frame conn=%s role=%s", self.conn_id, frame.role)
                return None
        except QuizzerError as e:
            logger.info("frame failed conn=%s kind=%s msg=%s", self.conn_id, e.kind, e.message)
            return error_frame(e)
        except Exception:
            logger.exception("frame handler crashed conn=%s", self.conn_id)
            return internal_error_frame()

        return assistant_frame(reply.content)

    async def _on_meta(self, reference: str) -> Message:
        # refuse a second transcript before paying for the fetch
        self.session.ensure_seedable()
        segments = await self.fetch_transcript(reference)
        condensed = condense_transcript(segments, max_chars=self.max_chars)
        logger.info(
            "seeding conn=%s segments=%s chars=%s", self.conn_id, len(segments), len(condensed)
        )
        return await self.session.respond_to_transcript(condensed)

    async def _receive(self) -> Optional[Union[str, bytes]]:
        message = await self.websocket.receive()
        if message["type"] == "websocket.disconnect":
            return None
        if message.get("text") is not None:
            return message["text"]
        return message.get("bytes") or b""

    async def _send(self, payload: Dict[str, Any]) -> bool:
        ws = self.websocket
        if ws.client_state != WebSocketState.CONNECTED or ws.application_state != WebSocketState.CONNECTED:
            logger.info("dropping reply for closed conn=%s", self.conn_id)
            return False
        try:
            await ws.send_json(payload)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.info("dropping reply for closed conn=%s err=%s", self.conn_id, type(e).__name__)
            return False
        return True
