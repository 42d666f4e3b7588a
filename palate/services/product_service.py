"""
Palate — Product catalog management.

An account's catalog is every product it owns, listed newest first; that
listing order is what the recommendation engine tie-breaks on.
"""

from __future__ import annotations

from typing import Any

import structlog

from palate.exceptions import NotFoundError, ValidationFailedError
from palate.models import Product
from palate.services.tenant_guard import ensure_owned
from palate.store.base import RecordStore

logger = structlog.get_logger("palate.product_service")

_MUTABLE_FIELDS = frozenset({"name", "description", "image_url", "tags"})


def _clean_tags(tags: list[str] | None) -> list[str]:
    # Stored as entered (case kept); blank entries carry no meaning.
    return [t.strip() for t in (tags or []) if t and t.strip()]


class ProductService:
    """Owner-scoped CRUD over an account's product catalog."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def list_catalog(self, account_id: str) -> list[Product]:
        return await self.store.list_by_owner(Product, account_id)

    async def create(
        self,
        account_id: str,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        tags: list[str] | None = None,
    ) -> Product:
        if name is None or not name.strip():
            raise ValidationFailedError("name", "Product name must not be empty")

        product = await self.store.insert(
            Product,
            {
                "account_id": account_id,
                "name": name.strip(),
                "description": description,
                "image_url": image_url,
                "tags": _clean_tags(tags),
            },
        )
        logger.info(
            "product_created",
            account_id=account_id,
            product_id=product.id,
            tag_count=len(product.tags or []),
        )
        return product

    async def get(self, account_id: str, product_id: str) -> Product:
        product = await self.store.get(Product, product_id)
        return ensure_owned(account_id, product, "Product", product_id)

    async def update(
        self,
        account_id: str,
        product_id: str,
        patch: dict[str, Any],
    ) -> Product:
        unknown = set(patch) - _MUTABLE_FIELDS
        if unknown:
            raise ValidationFailedError(sorted(unknown)[0], "Field cannot be changed")

        values = dict(patch)
        if "name" in values:
            if values["name"] is None or not values["name"].strip():
                raise ValidationFailedError("name", "Product name must not be empty")
            values["name"] = values["name"].strip()
        if "tags" in values:
            values["tags"] = _clean_tags(values["tags"])

        await self.get(account_id, product_id)

        updated = await self.store.update(Product, product_id, values, owner_id=account_id)
        if updated is None:
            raise NotFoundError("Product", product_id)

        logger.info(
            "product_updated",
            account_id=account_id,
            product_id=product_id,
            updated_fields=sorted(values),
        )
        return updated

    async def delete(self, account_id: str, product_id: str) -> None:
        """Delete a product after checking that the caller owns it."""
        await self.get(account_id, product_id)

        deleted = await self.store.delete(Product, product_id, owner_id=account_id)
        if not deleted:
            raise NotFoundError("Product", product_id)

        logger.info("product_deleted", account_id=account_id, product_id=product_id)
