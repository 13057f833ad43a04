from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from quizzer.core.config import settings
from quizzer.core.errors import CompletionUnavailable, TimeoutExceeded

logger = logging.getLogger("openai")


class CompletionProvider(Protocol):
    async def complete(
        self,
        messages: List[Dict[str, str]],
        response_format: Optional[Dict[str, Any]] = None,
    ) -> str:
        ...


def _error_detail(r: httpx.Response) -> str:
    try:
        data = r.json()
    except ValueError:
        return r.text[:300]
    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return r.text[:300]


def _extract_content(data: Any) -> str:
    if not isinstance(data, dict):
        raise CompletionUnavailable("Completion response is not a JSON object")
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise CompletionUnavailable("Completion response has no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        raise CompletionUnavailable("Completion response has no message content")
    return content.strip()


class OpenAIChatProvider:
    """
    OpenAI-compatible /chat/completions caller. One attempt, no retries.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        model: str,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.client = client
        self.model = model
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.temperature = temperature
        self.timeout_s = timeout_s if timeout_s is not None else settings.completion_timeout_s

    async def complete(
        self,
        messages: List[Dict[str, str]],
        response_format: Optional[Dict[str, Any]] = None,
    ) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if response_format is not None:
            payload["response_format"] = response_format

        try:
            r = await self.client.post(url, headers=headers, json=payload, timeout=self.timeout_s)
        except httpx.TimeoutException as e:
            logger.warning("completion timed out model=%s after=%ss", self.model, self.timeout_s)
            raise TimeoutExceeded(f"Completion API timed out after {self.timeout_s}s") from e
        except httpx.HTTPError as e:
            logger.warning("completion request failed model=%s err=%s", self.model, str(e))
            raise CompletionUnavailable(f"Completion API unreachable: {e}") from e

        if r.status_code >= 400:
            detail = _error_detail(r)
            logger.warning("completion rejected model=%s status=%s detail=%s", self.model, r.status_code, detail)
            raise CompletionUnavailable(
                f"Completion API error ({r.status_code}): {detail}", status_code=r.status_code
            )

        try:
            data = r.json()
        except ValueError as e:
            raise CompletionUnavailable("Completion response is not valid JSON") from e

        content = _extract_content(data)
        logger.info("completion ok model=%s messages=%s chars=%s", self.model, len(messages), len(content))
        return content


async def list_models(
    client: httpx.AsyncClient, timeout_s: float = 10.0
) -> Dict[str, Any]:
    """Best-effort model listing from {base}/models."""
    base = settings.openai_base_url.rstrip("/")
    url = f"{base}/models"
    headers = {"Authorization": f"Bearer {settings.openai_api_key}"}

    try:
        r = await client.get(url, headers=headers, timeout=timeout_s)
        r.raise_for_status()
        data = r.json()
        models = []
        for m in data.get("data", []) or []:
            mid = m.get("id")
            if mid:
                models.append(str(mid))
        return {"ok": True, "url": url, "error": None, "models": models[:50]}
    except Exception as e:
        return {"ok": False, "url": url, "error": str(e), "models": []}
