"""
Palate — Questionnaire API

Owner-side endpoints for building questionnaires: CRUD on questionnaires,
appending and removing questions, and reading the responses collected.
Every route resolves the account from the bearer token; the service layer
enforces that the targeted questionnaire belongs to it.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status
from fastapi import Response as HTTPResponse

from palate.api.deps import (
    get_current_account_id,
    get_questionnaire_service,
    get_response_service,
)
from palate.models import Question, Questionnaire, Response
from palate.schemas.questionnaire import (
    QuestionCreate,
    QuestionnaireCreate,
    QuestionnaireOut,
    QuestionnaireUpdate,
    QuestionOut,
    ResponseOut,
)
from palate.services.questionnaire_service import QuestionnaireService
from palate.services.response_service import ResponseService

logger = structlog.get_logger("palate.api.questionnaires")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET /questionnaires — List the account's questionnaires
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/questionnaires",
    response_model=list[QuestionnaireOut],
    summary="List questionnaires",
)
async def list_questionnaires(
    account_id: str = Depends(get_current_account_id),
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> list[Questionnaire]:
    """Return the account's questionnaires, newest first."""
    return await questionnaires.list_for_account(account_id)


# ──────────────────────────────────────────────────────────────────────────────
# POST /questionnaires — Create a questionnaire
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/questionnaires",
    response_model=QuestionnaireOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a questionnaire",
)
async def create_questionnaire(
    payload: QuestionnaireCreate,
    account_id: str = Depends(get_current_account_id),
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> Questionnaire:
    """Create an unpublished questionnaire owned by the caller."""
    return await questionnaires.create(
        account_id, payload.title, payload.description
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET / PATCH / DELETE /questionnaires/{id}
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/questionnaires/{questionnaire_id}",
    response_model=QuestionnaireOut,
    summary="Get a questionnaire",
)
async def get_questionnaire(
    questionnaire_id: str,
    account_id: str = Depends(get_current_account_id),
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> Questionnaire:
    return await questionnaires.get(account_id, questionnaire_id)


@router.patch(
    "/questionnaires/{questionnaire_id}",
    response_model=QuestionnaireOut,
    summary="Update a questionnaire",
)
async def update_questionnaire(
    questionnaire_id: str,
    payload: QuestionnaireUpdate,
    account_id: str = Depends(get_current_account_id),
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> Questionnaire:
    """Update title, description or the published flag.

    Only fields present in the request body are applied.
    """
    update_data = payload.model_dump(exclude_unset=True)
    return await questionnaires.update(account_id, questionnaire_id, update_data)


@router.delete(
    "/questionnaires/{questionnaire_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a questionnaire",
)
async def delete_questionnaire(
    questionnaire_id: str,
    account_id: str = Depends(get_current_account_id),
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> HTTPResponse:
    """Delete the questionnaire together with its questions and responses."""
    await questionnaires.delete(account_id, questionnaire_id)
    return HTTPResponse(status_code=status.HTTP_204_NO_CONTENT)


# ──────────────────────────────────────────────────────────────────────────────
# Questions
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/questionnaires/{questionnaire_id}/questions",
    response_model=list[QuestionOut],
    summary="List a questionnaire's questions",
)
async def list_questions(
    questionnaire_id: str,
    account_id: str = Depends(get_current_account_id),
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> list[Question]:
    return await questionnaires.list_questions(account_id, questionnaire_id)


@router.post(
    "/questionnaires/{questionnaire_id}/questions",
    response_model=QuestionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Append a question",
)
async def add_question(
    questionnaire_id: str,
    payload: QuestionCreate,
    account_id: str = Depends(get_current_account_id),
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> Question:
    """Append a question at the end of the questionnaire.

    Multiple-choice questions must carry at least one option; options sent
    with other question types are discarded.
    """
    return await questionnaires.add_question(
        account_id,
        questionnaire_id,
        payload.question_text,
        payload.question_type,
        payload.options,
    )


@router.delete(
    "/questions/{question_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a question",
)
async def delete_question(
    question_id: str,
    account_id: str = Depends(get_current_account_id),
    questionnaires: QuestionnaireService = Depends(get_questionnaire_service),
) -> HTTPResponse:
    await questionnaires.delete_question(account_id, question_id)
    return HTTPResponse(status_code=status.HTTP_204_NO_CONTENT)


# ──────────────────────────────────────────────────────────────────────────────
# Responses
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/questionnaires/{questionnaire_id}/responses",
    response_model=list[ResponseOut],
    summary="List responses to one questionnaire",
)
async def list_questionnaire_responses(
    questionnaire_id: str,
    account_id: str = Depends(get_current_account_id),
    responses: ResponseService = Depends(get_response_service),
) -> list[Response]:
    return await responses.list_for_questionnaire(account_id, questionnaire_id)


@router.get(
    "/responses",
    response_model=list[ResponseOut],
    summary="List all responses",
)
async def list_responses(
    account_id: str = Depends(get_current_account_id),
    responses: ResponseService = Depends(get_response_service),
) -> list[Response]:
    """Return responses to all of the account's questionnaires, newest first."""
    logger.info("list_responses", account_id=account_id)
    return await responses.list_for_account(account_id)
