"""
Palate — Account API

The signed-in account's profile and branding settings.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from palate.api.deps import get_account_service, get_current_account_id
from palate.models import Account
from palate.schemas.account import AccountOut, AccountUpdate
from palate.services.account_service import AccountService

logger = structlog.get_logger("palate.api.account")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET /account — Current account profile
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/account",
    response_model=AccountOut,
    summary="Get the signed-in account",
)
async def get_account(
    account_id: str = Depends(get_current_account_id),
    accounts: AccountService = Depends(get_account_service),
) -> Account:
    """Return the account profile; it is created on first sign-in."""
    return await accounts.get_account(account_id)


# ──────────────────────────────────────────────────────────────────────────────
# PATCH /account — Update profile / branding
# ──────────────────────────────────────────────────────────────────────────────

@router.patch(
    "/account",
    response_model=AccountOut,
    summary="Update account settings",
)
async def update_account(
    payload: AccountUpdate,
    account_id: str = Depends(get_current_account_id),
    accounts: AccountService = Depends(get_account_service),
) -> Account:
    """Update profile and branding fields.

    Only fields present in the request body are applied.
    """
    log = logger.bind(account_id=account_id)
    log.info("update_account_start")

    update_data = payload.model_dump(exclude_unset=True)
    account = await accounts.update_settings(account_id, update_data)

    log.info("update_account_complete", updated_fields=sorted(update_data))
    return account
