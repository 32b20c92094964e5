"""Translate Shopify payloads into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from locatorsync.domain.model import CustomerDetail, LineItem, Order, PostalAddress

if TYPE_CHECKING:
    from .schema import ShopifyAddress, ShopifyCustomer, ShopifyOrder


def translate_order(payload: ShopifyOrder) -> Order:
    return Order(
        id=payload.id,
        customer_id=payload.customer.id if payload.customer else None,
        created_at=payload.created_at,
        source_name=payload.source_name,
        line_items=tuple(
            LineItem(sku=item.sku, product_exists=item.product_exists)
            for item in payload.line_items
        ),
    )


def translate_address(payload: ShopifyAddress | None) -> PostalAddress | None:
    if payload is None:
        return None
    return PostalAddress(
        address1=payload.address1,
        city=payload.city,
        province=payload.province,
        zip=payload.zip,
        country=payload.country,
        company=payload.company,
    )


def translate_customer(payload: ShopifyCustomer) -> CustomerDetail:
    return CustomerDetail(
        id=payload.id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        default_address=translate_address(payload.default_address),
    )
