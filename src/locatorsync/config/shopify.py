"""Shopify Admin API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_list, optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SHOPIFY_API_VERSION = "2024-01"
DEFAULT_SHOPIFY_CHANNELS = ("Faire", "Airgoods")
SHOPIFY_TIMEOUT_SECONDS = 30.0
LOCATIONS_ASSET_KEY = "assets/locations-data.js"


@dataclass(frozen=True)
class ShopifyConfig:
    """Holds Shopify Admin API configuration values."""

    shop_name: str
    access_token: str
    resilience: ResilienceConfig
    api_version: str = DEFAULT_SHOPIFY_API_VERSION
    channels: tuple[str, ...] = DEFAULT_SHOPIFY_CHANNELS
    asset_key: str = LOCATIONS_ASSET_KEY

    @property
    def admin_base_url(self) -> str:
        return f"https://{self.shop_name}.myshopify.com/admin/api/{self.api_version}/"


def shopify_resilience(
    shop_name: str,
    access_token: str,
    api_version: str = DEFAULT_SHOPIFY_API_VERSION,
) -> ResilienceConfig:
    return ResilienceConfig(
        name="shopify",
        base_url=f"https://{shop_name}.myshopify.com/admin/api/{api_version}/",
        timeout_seconds=SHOPIFY_TIMEOUT_SECONDS,
        # REST Admin API leaky bucket: 2 requests/second on standard plans
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        retry=RetryPolicy(total=4),
        cache=None,
        default_headers={
            "X-Shopify-Access-Token": access_token,
            "Accept": "application/json",
        },
    )


def get_shopify_config(*, resilience: ResilienceConfig | None = None) -> ShopifyConfig:
    values = require_env_vars(("SHOPIFY_SHOP_NAME", "SHOPIFY_ACCESS_TOKEN"))
    shop_name = values["SHOPIFY_SHOP_NAME"]
    access_token = values["SHOPIFY_ACCESS_TOKEN"]
    api_version = optional_env_var("SHOPIFY_API_VERSION") or DEFAULT_SHOPIFY_API_VERSION
    return ShopifyConfig(
        shop_name=shop_name,
        access_token=access_token,
        api_version=api_version,
        channels=env_list("SHOPIFY_CHANNELS", DEFAULT_SHOPIFY_CHANNELS),
        resilience=resilience or shopify_resilience(shop_name, access_token, api_version),
    )
