"""Slack Web API notification channel."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from locatorsync.adapters.http_resilience import ResilientClient, raise_for_status
from locatorsync.domain.errors import ExternalServiceError

if TYPE_CHECKING:
    from collections.abc import Callable

    from locatorsync.config.http_resilience import ResilienceConfig
    from locatorsync.config.slack import SlackConfig

log = getLogger(__name__)

SERVICE_NAME = "slack"


class SlackResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ok: bool
    error: str | None = None


class SlackNotifier:
    """Posts plain-text messages with ``chat.postMessage``."""

    def __init__(
        self,
        *,
        config: SlackConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def post(self, message: str) -> None:
        asyncio.run(self._post_async(message))

    async def _post_async(self, message: str) -> None:
        async with self._client_factory(self._resilience) as client:
            response = await client.post(
                "chat.postMessage",
                json={"channel": self._config.channel, "text": message},
                headers={"Authorization": f"Bearer {self._config.bot_token}"},
            )
        raise_for_status(SERVICE_NAME, response)

        payload = SlackResponse.model_validate(response.json())
        if not payload.ok:
            raise ExternalServiceError(SERVICE_NAME, payload.error or "unknown error")
        log.info("Slack notification sent successfully")
