"""
Palate — Shared FastAPI dependencies.

Authentication yields the account id from the bearer token's ``sub`` claim
and makes sure the account record exists (it is created on first login).
Services are built per request around the request's record store.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from palate.services.account_service import AccountService
from palate.services.product_service import ProductService
from palate.services.questionnaire_service import QuestionnaireService
from palate.services.response_service import ResponseService
from palate.store import RecordStore, get_store
from palate.utils.tokens import InvalidTokenError, decode_access_token

logger = structlog.get_logger("palate.api.auth")

_bearer = HTTPBearer(auto_error=False)


def get_account_service(store: RecordStore = Depends(get_store)) -> AccountService:
    return AccountService(store)


def get_questionnaire_service(store: RecordStore = Depends(get_store)) -> QuestionnaireService:
    return QuestionnaireService(store)


def get_product_service(store: RecordStore = Depends(get_store)) -> ProductService:
    return ProductService(store)


def get_response_service(store: RecordStore = Depends(get_store)) -> ResponseService:
    return ResponseService(store)


async def get_current_account_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    accounts: AccountService = Depends(get_account_service),
) -> str:
    """Return the authenticated account id or reject with 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidTokenError as exc:
        logger.warning("auth_token_rejected", reason=str(exc))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    account = await accounts.ensure_account(claims["sub"], claims)
    return account.id
