"""Slack Web API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

SLACK_API_BASE_URL = "https://slack.com/api/"
DEFAULT_SLACK_CHANNEL = "C03BS8PAXEG"


@dataclass(frozen=True)
class SlackConfig:
    bot_token: str
    channel: str
    resilience: ResilienceConfig


def get_slack_config(*, resilience: ResilienceConfig | None = None) -> SlackConfig:
    values = require_env_vars(("SLACK_BOT_TOKEN",))
    channel = optional_env_var("SLACK_CHANNEL") or DEFAULT_SLACK_CHANNEL
    return SlackConfig(
        bot_token=values["SLACK_BOT_TOKEN"],
        channel=channel,
        resilience=resilience
        or ResilienceConfig(
            name="slack",
            base_url=SLACK_API_BASE_URL,
            timeout_seconds=10.0,
            ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
            retry=RetryPolicy(total=2, allowed_methods=frozenset({"POST"})),
        ),
    )
