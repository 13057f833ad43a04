"""
Per-connection conversation state.

A ConversationSession keeps the ordered message history of one websocket
connection and is the only thing that talks to the completion provider on its
behalf. History only grows: messages are never removed or reordered, and a
failed completion leaves it exactly as it was.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from quizzer.chat.prompt import build_tutor_prompt
from quizzer.core.errors import IllegalState, TimeoutExceeded
from quizzer.core.openai_llm import CompletionProvider

logger = logging.getLogger("session")


class Role(str, enum.Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    role: Role
    content: str
    ordinal: int

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ConversationSession:
    def __init__(self, provider: CompletionProvider, timeout_s: Optional[float] = None) -> None:
        self._provider = provider
        self._timeout_s = timeout_s
        self._messages: List[Message] = []
        self._lock = asyncio.Lock()

    @property
    def history(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def is_seeded(self) -> bool:
        return bool(self._messages) and self._messages[0].role is Role.SYSTEM

    def __len__(self) -> int:
        return len(self._messages)

    def to_payload(self) -> List[Dict[str, str]]:
        return [m.to_dict() for m in self._messages]

    def ensure_seedable(self) -> None:
        if self.is_seeded:
            raise IllegalState("Session already has a transcript")
        if self._messages:
            raise IllegalState("Transcript must be sent before any chat message")

    def _append(self, role: Role, content: str) -> Message:
        msg = Message(role=role, content=content, ordinal=len(self._messages))
        self._messages.append(msg)
        return msg

    def seed_from_transcript(self, condensed_text: str) -> Message:
        self.ensure_seedable()
        return self._append(Role.SYSTEM, build_tutor_prompt(condensed_text))

    def append_user(self, content: str) -> Message:
        return self._append(Role.USER, content)

    def append_assistant(self, content: str) -> Message:
        return self._append(Role.ASSISTANT, content)

    async def _complete(self, pending: List[Tuple[Role, str]]) -> Message:
        """
        Ask for the next assistant turn with `pending` messages appended after
        the committed history. Pending messages and the reply are recorded only
        if the provider succeeds.
        """
        payload = self.to_payload() + [{"role": r.value, "content": c} for r, c in pending]
        call = self._provider.complete(payload)
        try:
            if self._timeout_s is not None:
                content = await asyncio.wait_for(call, timeout=self._timeout_s)
            else:
                content = await call
        except asyncio.TimeoutError as e:
            raise TimeoutExceeded(f"No completion within {self._timeout_s}s") from e

        for role, text in pending:
            self._append(role, text)
        reply = self.append_assistant(content)
        logger.debug("history now %s messages roles=%s", len(self._messages), [m.role.value for m in self._messages])
        return reply

    async def request_next_turn(self) -> Message:
        async with self._lock:
            return await self._complete([])

    async def respond_to_user(self, content: str) -> Message:
        async with self._lock:
            return await self._complete([(Role.USER, content)])

    async def respond_to_transcript(self, condensed_text: str) -> Message:
        async with self._lock:
            self.ensure_seedable()
            return await self._complete([(Role.SYSTEM, build_tutor_prompt(condensed_text))])
