"""HTTP client for the OpenAI-compatible chat-completions API served by Groq."""

from __future__ import annotations

import json
import logging
import time
from typing import Sequence

import httpx

from ...config import settings

# Status codes worth retrying; anything else in the 4xx range is a caller error.
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

logger = logging.getLogger(__name__)


class CompletionServiceError(RuntimeError):
    """Raised when the chat-completions service cannot produce a usable reply."""


class CompletionNotConfiguredError(CompletionServiceError):
    """Raised when no API key is configured."""


class EmptyCompletionError(CompletionServiceError):
    """Raised when the service answers but the reply carries no content."""


class GroqClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.groq_api_key
        if not self.api_key:
            raise CompletionNotConfiguredError("Chat-completions API key is not configured (KWIK_GROQ_API_KEY).")
        self.base_url = (base_url or settings.groq_base_url).rstrip("/")
        self.model = model or settings.groq_model
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.llm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.llm_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"Authorization": f"Bearer {self.api_key}"},
            transport=self._transport,
        )

    def complete(
        self,
        messages: Sequence[dict[str, str]],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send a chat-completions request and return the trimmed reply text."""
        payload = {
            "model": self.model,
            "messages": list(messages),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        url = f"{self.base_url}/chat/completions"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.post(url, json=payload)
                    response.raise_for_status()
                    break
                except httpx.HTTPStatusError as exc:
                    status_code = exc.response.status_code
                    attempt += 1
                    if status_code not in RETRYABLE_STATUS_CODES or attempt > self.max_retries:
                        logger.error(f"Chat-completions API error {status_code}: {exc.response.text[:500]}")
                        raise CompletionServiceError(f"Chat-completions API returned status {status_code}.") from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Chat-completions status {status_code}, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.TransportError as exc:
                    # Timeouts and network errors (DNS failures, connection refused, etc.)
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Chat-completions request failed after {attempt} attempts: {exc}")
                        raise CompletionServiceError(
                            f"Failed to reach chat-completions service at {self.base_url}: {exc}"
                        ) from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Chat-completions network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {exc}")
                    time.sleep(wait_time)
                except httpx.HTTPError as exc:
                    # Undecodable bodies, redirect loops and other protocol-level failures
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Chat-completions request failed after {attempt} attempts: {exc!r}")
                        raise CompletionServiceError(f"Chat-completions request failed: {exc}") from exc
                    time.sleep(self.backoff_seconds * attempt)
        finally:
            client.close()

        return _extract_reply(response)


def _extract_reply(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError as exc:
        logger.error(f"Failed to parse chat-completions response: {response.text[:500]}")
        raise CompletionServiceError("Chat-completions response is not valid JSON.") from exc

    reply = None
    choices = data.get("choices") if isinstance(data, dict) else None
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        first = choices[0]
        message = first.get("message")
        if isinstance(message, dict):
            reply = message.get("content")
        if reply is None:
            reply = first.get("text")

    if not reply:
        logger.error(f"No reply in chat-completions response: {json.dumps(data)[:500]}")
        raise EmptyCompletionError("Chat-completions response contained no reply.")

    return reply.strip() if isinstance(reply, str) else json.dumps(reply)


def check_configured() -> bool:
    """Return True when an API key is available. Does not contact the service."""
    return settings.insights_configured
