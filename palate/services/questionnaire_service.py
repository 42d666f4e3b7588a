"""
Palate — Questionnaire lifecycle.

Create, edit, publish and delete questionnaires and their ordered questions.
Every operation on an existing questionnaire runs the tenant guard first,
then issues the mutation as an owner-keyed conditional store operation so
that the check and the write cannot drift apart.

The ``*_public`` methods serve the unauthenticated customer-facing flow: they
skip the ownership check and instead require ``is_published``; a missing and
an unpublished questionnaire are indistinguishable there.
"""

from __future__ import annotations

from typing import Any

import structlog

from palate.exceptions import NotFoundError, ValidationFailedError
from palate.models import Account, Question, Questionnaire
from palate.models.questionnaire import QUESTION_TYPES
from palate.services.tenant_guard import ensure_owned
from palate.store.base import RecordStore

logger = structlog.get_logger("palate.questionnaire_service")

_MUTABLE_FIELDS = frozenset({"title", "description", "is_published"})


class QuestionnaireService:
    """Owner-scoped questionnaire and question management."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    # ── Validation helpers ────────────────────────────────────────────────

    @staticmethod
    def _clean_title(title: str | None) -> str:
        if title is None or not title.strip():
            raise ValidationFailedError("title", "Title must not be empty")
        return title.strip()

    @staticmethod
    def _clean_options(question_type: str, options: list[str] | None) -> list[str] | None:
        if question_type != "multiple-choice":
            return None
        cleaned = [o.strip() for o in (options or []) if o and o.strip()]
        if not cleaned:
            raise ValidationFailedError(
                "options", "Multiple-choice questions need at least one option"
            )
        return cleaned

    # ── Questionnaires ────────────────────────────────────────────────────

    async def create(
        self,
        account_id: str,
        title: str,
        description: str | None = None,
    ) -> Questionnaire:
        questionnaire = await self.store.insert(
            Questionnaire,
            {
                "account_id": account_id,
                "title": self._clean_title(title),
                "description": description,
                "is_published": False,
            },
        )
        logger.info(
            "questionnaire_created",
            account_id=account_id,
            questionnaire_id=questionnaire.id,
        )
        return questionnaire

    async def list_for_account(self, account_id: str) -> list[Questionnaire]:
        return await self.store.list_by_owner(Questionnaire, account_id)

    async def get(self, account_id: str, questionnaire_id: str) -> Questionnaire:
        questionnaire = await self.store.get(Questionnaire, questionnaire_id)
        return ensure_owned(account_id, questionnaire, "Questionnaire", questionnaire_id)

    async def update(
        self,
        account_id: str,
        questionnaire_id: str,
        patch: dict[str, Any],
    ) -> Questionnaire:
        """Apply a partial update (title, description, is_published)."""
        log = logger.bind(account_id=account_id, questionnaire_id=questionnaire_id)

        unknown = set(patch) - _MUTABLE_FIELDS
        if unknown:
            raise ValidationFailedError(
                sorted(unknown)[0], "Field cannot be changed"
            )

        values = dict(patch)
        if "title" in values:
            values["title"] = self._clean_title(values["title"])
        if "is_published" in values and values["is_published"] is None:
            raise ValidationFailedError("is_published", "Must be true or false")

        await self.get(account_id, questionnaire_id)

        updated = await self.store.update(
            Questionnaire, questionnaire_id, values, owner_id=account_id
        )
        if updated is None:
            log.warning("questionnaire_update_lost_race")
            raise NotFoundError("Questionnaire", questionnaire_id)

        log.info("questionnaire_updated", updated_fields=sorted(values))
        return updated

    async def set_published(
        self,
        account_id: str,
        questionnaire_id: str,
        published: bool,
    ) -> Questionnaire:
        return await self.update(
            account_id, questionnaire_id, {"is_published": published}
        )

    async def delete(self, account_id: str, questionnaire_id: str) -> None:
        """Delete a questionnaire with its questions and responses."""
        await self.get(account_id, questionnaire_id)

        deleted = await self.store.delete(
            Questionnaire, questionnaire_id, owner_id=account_id
        )
        if not deleted:
            raise NotFoundError("Questionnaire", questionnaire_id)

        logger.info(
            "questionnaire_deleted",
            account_id=account_id,
            questionnaire_id=questionnaire_id,
        )

    # ── Questions ─────────────────────────────────────────────────────────

    async def add_question(
        self,
        account_id: str,
        questionnaire_id: str,
        text: str,
        question_type: str,
        options: list[str] | None = None,
    ) -> Question:
        """Append a question; its ``order`` is the current question count."""
        if question_type not in QUESTION_TYPES:
            raise ValidationFailedError(
                "question_type",
                f"Must be one of {', '.join(QUESTION_TYPES)}",
            )
        if text is None or not text.strip():
            raise ValidationFailedError("question_text", "Question text must not be empty")
        cleaned_options = self._clean_options(question_type, options)

        await self.get(account_id, questionnaire_id)

        existing = await self.store.list_by_parent(Question, questionnaire_id)
        question = await self.store.insert(
            Question,
            {
                "questionnaire_id": questionnaire_id,
                "question_text": text.strip(),
                "question_type": question_type,
                "options": cleaned_options,
                "order": len(existing),
            },
        )
        logger.info(
            "question_added",
            account_id=account_id,
            questionnaire_id=questionnaire_id,
            question_id=question.id,
            order=question.order,
        )
        return question

    async def list_questions(self, account_id: str, questionnaire_id: str) -> list[Question]:
        await self.get(account_id, questionnaire_id)
        return await self.store.list_by_parent(Question, questionnaire_id)

    async def delete_question(self, account_id: str, question_id: str) -> None:
        """Delete one question after checking its questionnaire's owner."""
        question = await self.store.get(Question, question_id)
        if question is None:
            raise NotFoundError("Question", question_id)

        parent = await self.store.get(Questionnaire, question.questionnaire_id)
        ensure_owned(account_id, parent, "Question", question_id)

        deleted = await self.store.delete(Question, question_id, owner_id=account_id)
        if not deleted:
            raise NotFoundError("Question", question_id)

        logger.info(
            "question_deleted",
            account_id=account_id,
            questionnaire_id=question.questionnaire_id,
            question_id=question_id,
        )

    # ── Public (unauthenticated) reads ────────────────────────────────────

    async def get_public(self, questionnaire_id: str) -> Questionnaire:
        """Return a questionnaire only while it is published."""
        questionnaire = await self.store.get(Questionnaire, questionnaire_id)
        if questionnaire is None or not questionnaire.is_published:
            raise NotFoundError("Questionnaire", questionnaire_id)
        return questionnaire

    async def list_public_questions(self, questionnaire_id: str) -> list[Question]:
        await self.get_public(questionnaire_id)
        return await self.store.list_by_parent(Question, questionnaire_id)

    async def get_public_branding(self, questionnaire_id: str) -> Account:
        """The owning account, for rendering the public questionnaire page."""
        questionnaire = await self.get_public(questionnaire_id)
        account = await self.store.get(Account, questionnaire.account_id)
        if account is None:
            raise NotFoundError("Questionnaire", questionnaire_id)
        return account
