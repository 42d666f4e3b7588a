"""
Palate — Account profiles.

Accounts are created the first time an authenticated identity shows up and
are edited from the settings page afterwards.  The core never deletes them.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

import structlog

from palate.exceptions import NotFoundError, ValidationFailedError
from palate.models import Account
from palate.store.base import RecordStore

logger = structlog.get_logger("palate.account_service")

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

# Token claim -> account column, copied on first login.
_CLAIM_FIELDS: dict[str, str] = {
    "email": "email",
    "first_name": "first_name",
    "last_name": "last_name",
    "profile_image_url": "profile_image_url",
}

_SETTINGS_FIELDS = frozenset({
    "first_name",
    "last_name",
    "profile_image_url",
    "company_name",
    "company_logo",
    "brand_color",
})


class AccountService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def ensure_account(
        self,
        account_id: str,
        claims: Mapping[str, Any] | None = None,
    ) -> Account:
        """Return the account, creating it from token claims on first login."""
        account = await self.store.get(Account, account_id)
        if account is not None:
            return account

        fields: dict[str, Any] = {"id": account_id}
        for claim, column in _CLAIM_FIELDS.items():
            if claims and claims.get(claim):
                fields[column] = claims[claim]

        # Two first requests can race here; the loser gets the winner's row.
        account = await self.store.insert_or_get(Account, fields)
        logger.info("account_ensured", account_id=account_id)
        return account

    async def get_account(self, account_id: str) -> Account:
        account = await self.store.get(Account, account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    async def update_settings(self, account_id: str, patch: dict[str, Any]) -> Account:
        unknown = set(patch) - _SETTINGS_FIELDS
        if unknown:
            raise ValidationFailedError(sorted(unknown)[0], "Field cannot be changed")

        color = patch.get("brand_color")
        if "brand_color" in patch and (color is None or not _HEX_COLOR.match(color)):
            raise ValidationFailedError("brand_color", "Must be a #RRGGBB hex color")

        updated = await self.store.update(Account, account_id, patch, owner_id=account_id)
        if updated is None:
            raise NotFoundError("Account", account_id)

        logger.info(
            "account_settings_updated",
            account_id=account_id,
            updated_fields=sorted(patch),
        )
        return updated
