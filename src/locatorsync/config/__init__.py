"""Application configuration helpers."""

from __future__ import annotations

from .email import EmailAlertConfig, get_email_alert_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .google import GoogleGeocodingConfig, get_google_geocoding_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .shopify import ShopifyConfig, get_shopify_config
from .slack import SlackConfig, get_slack_config
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "EmailAlertConfig",
    "GoogleGeocodingConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "SlackConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_email_alert_config",
    "get_google_geocoding_config",
    "get_shopify_config",
    "get_slack_config",
    "get_storage_config",
    "get_sync_config",
    "require_env_var",
    "require_env_vars",
]
