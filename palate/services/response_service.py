"""
Palate — Response recording and the public submission flow.

``submit`` is the customer-facing entry point:

  1. Resolve the questionnaire; it must exist and be published.
  2. Persist the answer set as one immutable ``Response`` row.
  3. Load the full catalog of the questionnaire's owning account.
  4. Rank it with the recommendation engine.

No account identity is involved; the questionnaire id alone decides which
catalog is used, so one tenant's submission can never see another tenant's
products.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import structlog

from palate.exceptions import ValidationFailedError
from palate.models import Product, Questionnaire, Response
from palate.services.questionnaire_service import QuestionnaireService
from palate.services.recommendation_service import RecommendationService, ScoredProduct
from palate.store.base import RecordStore

logger = structlog.get_logger("palate.response_service")


@dataclass
class SubmissionResult:
    response: Response
    scored: list[ScoredProduct]

    @property
    def recommendations(self) -> list[Product]:
        return [item.product for item in self.scored]


class ResponseService:
    """Records customer responses and returns product recommendations.

    Dependencies are injected at construction; only the store is required.
    """

    def __init__(
        self,
        store: RecordStore,
        questionnaire_service: QuestionnaireService | None = None,
        recommendation_service: RecommendationService | None = None,
    ) -> None:
        self.store = store
        self.questionnaires = questionnaire_service or QuestionnaireService(store)
        self.recommender = recommendation_service or RecommendationService()

    @staticmethod
    def _clean_answers(answers: Mapping[str, Any]) -> dict[str, str]:
        cleaned: dict[str, str] = {}
        for question_id, value in answers.items():
            if not isinstance(question_id, str) or not question_id:
                raise ValidationFailedError("answers", "Answer keys must be question ids")
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (str, int, float)):
                raise ValidationFailedError(
                    f"answers.{question_id}", "Answer must be a string or number"
                )
            cleaned[question_id] = str(value)
        return cleaned

    # ── Public submission ────────────────────────────────────────────────

    async def submit(
        self,
        questionnaire_id: str,
        customer_email: str | None,
        answers: Mapping[str, Any],
    ) -> SubmissionResult:
        """Persist a response and recommend products from the owner's catalog.

        Raises ``NotFoundError`` when the questionnaire is missing or not
        published.
        """
        log = logger.bind(questionnaire_id=questionnaire_id)
        log.info("submission_start", answer_count=len(answers))

        questionnaire = await self.questionnaires.get_public(questionnaire_id)
        cleaned = self._clean_answers(answers)
        email = customer_email.strip() if customer_email and customer_email.strip() else None

        response = await self.store.insert(
            Response,
            {
                "questionnaire_id": questionnaire.id,
                "customer_email": email,
                "answers": cleaned,
            },
        )
        log.info("submission_response_persisted", response_id=response.id)

        catalog = await self.store.list_by_owner(Product, questionnaire.account_id)
        scored = self.recommender.score_catalog(cleaned, catalog)

        log.info(
            "submission_complete",
            response_id=response.id,
            catalog_size=len(catalog),
            recommendation_count=len(scored),
        )
        return SubmissionResult(response=response, scored=scored)

    # ── Owner-side listings ──────────────────────────────────────────────

    async def list_for_questionnaire(
        self,
        account_id: str,
        questionnaire_id: str,
    ) -> list[Response]:
        await self.questionnaires.get(account_id, questionnaire_id)
        return await self.store.list_by_parent(Response, questionnaire_id)

    async def list_for_account(self, account_id: str) -> list[Response]:
        """Every response to every questionnaire the account owns, newest first."""
        questionnaires: list[Questionnaire] = await self.store.list_by_owner(
            Questionnaire, account_id
        )
        responses: list[Response] = []
        for questionnaire in questionnaires:
            responses.extend(await self.store.list_by_parent(Response, questionnaire.id))

        responses.sort(key=lambda r: r.created_at, reverse=True)
        return responses
