"""Minimal Slack Web API client for posting and updating review messages."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from meeting_governance.config import settings
from meeting_governance.errors import PresentationError

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    def post_message(self, channel: str, blocks: list[dict[str, Any]], text: str) -> str: ...

    def update_message(
        self, channel: str, handle: str, blocks: list[dict[str, Any]], text: str
    ) -> None: ...


class SlackPresenter:
    """Posts Block Kit messages; the message ``ts`` is the presentation handle."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(timeout=settings.http_timeout_seconds)
        self._api_url = (api_url or settings.slack_api_url).rstrip("/")
        self._token = token if token is not None else settings.slack_bot_token

    def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.post(
                f"{self._api_url}/{method}",
                headers={"Authorization": f"Bearer {self._token}"},
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PresentationError(f"Slack {method} failed: {exc}") from exc

        data: dict[str, Any] = response.json()
        # Slack reports API errors with HTTP 200 and ok=false.
        if not data.get("ok"):
            raise PresentationError(f"Slack {method} failed: {data.get('error', 'unknown_error')}")
        return data

    def post_message(self, channel: str, blocks: list[dict[str, Any]], text: str) -> str:
        data = self._call("chat.postMessage", {"channel": channel, "blocks": blocks, "text": text})
        return str(data["ts"])

    def update_message(
        self, channel: str, handle: str, blocks: list[dict[str, Any]], text: str
    ) -> None:
        self._call("chat.update", {"channel": channel, "ts": handle, "blocks": blocks, "text": text})
