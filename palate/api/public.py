"""
Palate — Public questionnaire API

Unauthenticated, customer-facing endpoints: read a published questionnaire,
its questions and its owner's branding, then submit answers and receive
product recommendations.  Unpublished questionnaires answer 404 exactly like
missing ones.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from palate.api.deps import get_questionnaire_service, get_response_service
from palate.models import Account, Question, Questionnaire
from palate.schemas.account import BrandingOut
from palate.schemas.product import ProductOut
from palate.schemas.questionnaire import (
    PublicQuestionnaireOut,
    QuestionOut,
    RecommendationItem,
    ResponseReceipt,
    ResponseSubmit,
    SubmissionOut,
)
from palate.services.questionnaire_service import QuestionnaireService
from palate.services.response_service import ResponseService

router = APIRouter()


@router.get(
    "/questionnaires/{questionnaire_id}",
    response_model=PublicQuestionnaireOut,
    summary="Get a published questionnaire",
)
async def get_public_questionnaire(
    questionnaire_id: str,
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> Questionnaire:
    return await questionnaires.get_public(questionnaire_id)


@router.get(
    "/questionnaires/{questionnaire_id}/questions",
    response_model=list[QuestionOut],
    summary="Get a published questionnaire's questions",
)
async def get_public_questions(
    questionnaire_id: str,
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> list[Question]:
    return await questionnaires.list_public_questions(questionnaire_id)


@router.get(
    "/questionnaires/{questionnaire_id}/branding",
    response_model=BrandingOut,
    summary="Get the questionnaire owner's branding",
)
async def get_public_branding(
    questionnaire_id: str,
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> Account:
    return await questionnaires.get_public_branding(questionnaire_id)


# ──────────────────────────────────────────────────────────────────────────────
# POST /questionnaires/{id}/submit — Record answers, return recommendations
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/questionnaires/{questionnaire_id}/submit",
    response_model=SubmissionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Submit answers and get product recommendations",
)
async def submit_response(
    questionnaire_id: str,
    payload: ResponseSubmit,
    responses: ResponseService = Depends(get_response_service),
) -> SubmissionOut:
    """Store the customer's answers and recommend products.

    Recommendations come from the questionnaire owner's catalog: up to six
    products ranked by how many of their tags appear in the answers, or the
    first three catalog entries when none match.
    """
    result = await responses.submit(
        questionnaire_id,
        payload.customer_email,
        payload.answers,
    )

    return SubmissionOut(
        response=ResponseReceipt.model_validate(result.response),
        recommendations=[
            RecommendationItem(
                product=ProductOut.model_validate(item.product),
                score=item.score,
            )
            for item in result.scored
        ],
    )
