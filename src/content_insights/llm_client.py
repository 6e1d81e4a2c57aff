from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
import openai
from openai import OpenAI
from openai.types.chat import ChatCompletion

from content_insights.config import Settings
from content_insights.errors import ConfigurationError, UpstreamError

log = logging.getLogger("content_insights.llm")

UNKNOWN_ERROR = "Unknown error"

Message = Dict[str, str]


def _provider_message(exc: openai.APIStatusError) -> str:
    """
    Pull the provider's error message out of a failed response.
    A body that is not JSON yields a generic message instead of a second failure.
    """
    body = exc.body
    if isinstance(body, dict):
        # The SDK unwraps {"error": {...}}; keep both shapes.
        err = body.get("error", body)
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        return exc.response.reason_phrase or UNKNOWN_ERROR
    return UNKNOWN_ERROR


class CompletionClient:
    """
    Thin wrapper around the chat-completions endpoint.

    One call == one request: no retries, no streaming, no caching.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None) -> None:
        self._settings = settings
        self._http_client = http_client
        self._client: Optional[OpenAI] = None

    @property
    def model(self) -> str:
        return self._settings.openai_model

    def _get_client(self) -> OpenAI:
        """Lazy-init the SDK client once a key is known to exist."""
        if self._client is None:
            if not self._settings.openai_api_key:
                raise ConfigurationError("OPENAI_API_KEY is not configured")

            self._client = OpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_api_base,
                timeout=self._settings.request_timeout_s,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    def complete(self, messages: Sequence[Message], temperature: float = 0.7) -> str:
        """
        Send messages and return the text of the first choice.
        Returns "" when the provider produced no choices.
        """
        client = self._get_client()

        log.debug(
            "Sending %d messages to %s (%d chars)",
            len(messages),
            self.model,
            sum(len(m.get("content", "")) for m in messages),
        )

        payload: List[Any] = [dict(m) for m in messages]
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=payload,
                temperature=temperature,
                response_format={"type": "text"},
            )
        except openai.APIStatusError as e:
            message = _provider_message(e)
            log.error("Completion request failed (%s): %s", e.status_code, message)
            raise UpstreamError(message, status_code=e.status_code) from e
        except openai.APIConnectionError as e:
            log.error("Completion endpoint unreachable: %s", e)
            raise UpstreamError(str(e) or UNKNOWN_ERROR) from e
        except openai.APIError as e:
            log.error("Completion request failed: %s", e)
            raise UpstreamError(str(e) or UNKNOWN_ERROR) from e

        # A proxy answering 200 with an HTML page comes back as a plain str.
        if not isinstance(response, ChatCompletion):
            body = str(response)
            log.error("Completion endpoint returned a non-completion body: %.200s", body)
            raise UpstreamError("Completion endpoint returned an unexpected body", status_code=200)

        if not response.choices:
            log.warning("Completion returned no choices")
            return ""

        message = response.choices[0].message
        text = (message.content if message is not None else None) or ""
        log.debug("Raw completion output (%d chars)", len(text))
        return text
