"""Minimal Pydantic models for the Shopify REST Admin API."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _id_to_str(value: object) -> object:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class ShopifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ShopifyLineItem(ShopifyBaseModel):
    sku: str | None = None
    product_exists: bool = False


class ShopifyOrderCustomer(ShopifyBaseModel):
    id: str

    _normalize_id = field_validator("id", mode="before")(_id_to_str)


class ShopifyOrder(ShopifyBaseModel):
    id: str
    created_at: datetime | None = None
    source_name: str | None = None
    customer: ShopifyOrderCustomer | None = None
    line_items: list[ShopifyLineItem] = Field(default_factory=list["ShopifyLineItem"])

    _normalize_id = field_validator("id", mode="before")(_id_to_str)


class OrdersResponse(ShopifyBaseModel):
    orders: list[ShopifyOrder] = Field(default_factory=list["ShopifyOrder"])


class ShopifyAddress(ShopifyBaseModel):
    company: str | None = None
    address1: str | None = None
    city: str | None = None
    province: str | None = None
    zip: str | None = None
    country: str | None = None


class ShopifyCustomer(ShopifyBaseModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    default_address: ShopifyAddress | None = None

    _normalize_id = field_validator("id", mode="before")(_id_to_str)


class CustomerResponse(ShopifyBaseModel):
    customer: ShopifyCustomer


class ShopifyTheme(ShopifyBaseModel):
    id: str
    name: str | None = None
    role: str | None = None

    _normalize_id = field_validator("id", mode="before")(_id_to_str)


class ThemesResponse(ShopifyBaseModel):
    themes: list[ShopifyTheme] = Field(default_factory=list["ShopifyTheme"])


class ShopifyAsset(ShopifyBaseModel):
    key: str
    value: str | None = None
    content_type: str | None = None


class AssetResponse(ShopifyBaseModel):
    asset: ShopifyAsset

