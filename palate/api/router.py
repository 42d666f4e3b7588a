"""
Palate — Main API Router

Aggregates all sub-routers so that ``palate.main`` can mount the entire API
surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from palate.api import account, products, public, questionnaires

router = APIRouter()

router.include_router(account.router, prefix="/auth", tags=["Account"])
router.include_router(questionnaires.router, tags=["Questionnaires"])
router.include_router(products.router, tags=["Products"])
router.include_router(public.router, prefix="/public", tags=["Public"])
