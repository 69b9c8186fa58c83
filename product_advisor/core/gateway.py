"""Single-attempt dispatch of a conversation to the completion service."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import requests

from .errors import ConfigError, MalformedResponseError, TransportError
from .models import CompletionResult, ConversationMessage, TransportSettings

LOGGER = logging.getLogger(__name__)

NO_RESPONSE_CONTENT = "(No response from API)"

RELAY = "relay"
DIRECT = "direct"


@dataclass(frozen=True)
class _Route:
    name: str
    url: str
    headers: Dict[str, str]
    body: Dict[str, Any]


class DispatchGateway:
    """Sends the conversation over the relay, or directly to the provider.

    The relay is preferred because it keeps the provider key server-side.
    Each ``send`` makes at most one network attempt.
    """

    def __init__(self, settings: TransportSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> TransportSettings:
        return self._settings

    def is_configured(self) -> bool:
        return bool(self._settings.relay_url or self._settings.api_key)

    async def send(self, conversation: Sequence[ConversationMessage]) -> CompletionResult:
        route = self._select_route([message.to_wire() for message in conversation])
        return await asyncio.to_thread(self._send_sync, route)

    def _select_route(self, wire_messages: list[Dict[str, str]]) -> _Route:
        settings = self._settings
        if settings.relay_url:
            return _Route(
                name=RELAY,
                url=settings.relay_url,
                headers={"Content-Type": "application/json"},
                body={"messages": wire_messages},
            )
        if settings.api_key:
            return _Route(
                name=DIRECT,
                url=settings.provider_url,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {settings.api_key}",
                },
                body={
                    "model": settings.model,
                    "messages": wire_messages,
                    "max_tokens": settings.max_tokens,
                },
            )
        raise ConfigError(
            "No relay URL or provider API key configured. "
            "Set ADVISOR_RELAY_URL (recommended) or OPENAI_API_KEY for local testing."
        )

    def _send_sync(self, route: _Route) -> CompletionResult:
        LOGGER.debug("Dispatching %d message(s) via %s", len(route.body["messages"]), route.name)
        try:
            response = requests.post(
                route.url,
                json=route.body,
                headers=route.headers,
                timeout=self._settings.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(None, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            raise TransportError(response.status_code, response.text)

        try:
            data = response.json()
            content = extract_completion_content(data)
        except (ValueError, MalformedResponseError) as exc:
            LOGGER.warning("Malformed completion response via %s: %s", route.name, exc)
            return CompletionResult(content=NO_RESPONSE_CONTENT, transport=route.name, degraded=True)

        return CompletionResult(content=content, transport=route.name, raw=data)


def extract_completion_content(data: Any) -> str:
    """Return ``choices[0].message.content`` or raise MalformedResponseError."""
    if not isinstance(data, dict):
        raise MalformedResponseError("response body is not a JSON object")
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponseError("response has no choices")
    first: Optional[Any] = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise MalformedResponseError("first choice has no message content")
    return content
