"""OpenAI-compatible chat-completion client.

Sends one conversation per call and returns the first candidate's text.
There are no retries: any failure ends the invocation.
"""

from __future__ import annotations

import logging
import os

from pipe_gpt.core.config import DEFAULTS
from pipe_gpt.core.errors import (
    EmptyResponseError,
    MalformedResponseError,
    MissingCredentialError,
    TransportError,
)
from pipe_gpt.core.models import ChatOutcome, Conversation, RequestSettings

log = logging.getLogger(__name__)

API_KEY_ENV = "OPENAI_API_KEY"
DEFAULT_API_URL = DEFAULTS["api_url"]
DEFAULT_TIMEOUT = 120.0


def api_key_from_env() -> str:
    """Read the API key from OPENAI_API_KEY.

    Raises:
        MissingCredentialError: The variable is unset, blank, or not ASCII.
    """
    key = os.environ.get(API_KEY_ENV, "").strip()
    if not key:
        raise MissingCredentialError(
            f"No API key configured. Set the {API_KEY_ENV} environment variable.\n"
            "Get your key at: https://platform.openai.com/api-keys"
        )
    if not key.isascii():
        raise MissingCredentialError(
            f"{API_KEY_ENV} contains non-ASCII characters; check the key for typos"
        )
    return key


def build_request_body(conversation: Conversation, settings: RequestSettings) -> dict:
    """Chat-completion payload: always one candidate, never streamed."""
    return {
        "model": settings.model,
        "max_tokens": settings.max_tokens,
        "temperature": settings.temperature,
        "top_p": settings.top_p,
        "n": 1,
        "stream": False,
        "messages": [m.to_dict() for m in conversation],
    }


class ChatClient:
    """Send a conversation to the Chat Completions API."""

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not api_key:
            raise MissingCredentialError("An API key is required")
        self._api_key = api_key
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    @property
    def api_url(self) -> str:
        return self._api_url

    def send(self, conversation: Conversation, settings: RequestSettings) -> ChatOutcome:
        """Perform exactly one request and wrap the result.

        Transport problems are returned as a failed ChatOutcome, never raised.
        """
        try:
            reply = self._complete(conversation, settings)
        except TransportError as e:
            log.debug("Chat completion failed: %s", e)
            return ChatOutcome.failure(e)
        return ChatOutcome.success(reply)

    def _complete(self, conversation: Conversation, settings: RequestSettings) -> str:
        import httpx

        body = build_request_body(conversation, settings)
        log.debug(
            "POST %s/chat/completions model=%s messages=%d",
            self._api_url, settings.model, len(body["messages"]),
        )

        try:
            resp = httpx.post(
                f"{self._api_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"OpenAI API error ({e.response.status_code}): {e}"
            ) from e
        except (httpx.ConnectError, httpx.TimeoutException, OSError) as e:
            raise TransportError(f"OpenAI API unreachable: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"OpenAI API request failed: {e}") from e
        except httpx.InvalidURL as e:
            raise TransportError(f"Invalid API URL {self._api_url!r}: {e}") from e
        except UnicodeEncodeError as e:
            raise TransportError(f"Request headers must be ASCII: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"OpenAI API returned invalid JSON: {e}") from e

        return _first_choice_content(data)


def _first_choice_content(data: object) -> str:
    """Extract choices[0].message.content from a decoded response."""
    if not isinstance(data, dict):
        raise MalformedResponseError("OpenAI API response is not a JSON object")

    choices = data.get("choices")
    if choices is None:
        raise MalformedResponseError("OpenAI API response has no 'choices' field")
    if not isinstance(choices, list):
        raise MalformedResponseError("OpenAI API 'choices' field is not a list")
    if not choices:
        raise EmptyResponseError("OpenAI API returned an empty response (no choices)")

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise MalformedResponseError("OpenAI API response has no message content")

    log.debug("Message received (%d chars)", len(content))
    return content
