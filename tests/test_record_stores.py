"""Record store behaviour shared by the memory and SQLite-backed SQL stores."""
from datetime import datetime, timezone

import pytest

from palate.exceptions import StoreFailureError
from palate.models import Account, Product, Question, Questionnaire, Response
from palate.services.product_service import ProductService
from palate.services.questionnaire_service import QuestionnaireService
from palate.services.response_service import ResponseService


async def _questionnaire(store, account_id="a"):
    await store.insert(Account, {"id": account_id})
    return await store.insert(Questionnaire, {"account_id": account_id, "title": "T"})


class TestReads:
    @pytest.mark.asyncio
    async def test_get_missing(self, any_store):
        assert await any_store.get(Questionnaire, "missing") is None

    @pytest.mark.asyncio
    async def test_questions_by_order(self, any_store):
        q = await _questionnaire(any_store)
        for order, text in [(2, "third"), (0, "first"), (1, "second")]:
            await any_store.insert(
                Question,
                {
                    "questionnaire_id": q.id,
                    "question_text": text,
                    "question_type": "text",
                    "order": order,
                },
            )

        listed = await any_store.list_by_parent(Question, q.id)
        assert [x.question_text for x in listed] == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_owner_listing_is_scoped_and_stable(self, any_store):
        await any_store.insert(Account, {"id": "a"})
        await any_store.insert(Account, {"id": "b"})
        mine = {
            (await any_store.insert(Product, {"account_id": "a", "name": n})).id
            for n in ["Brie", "Gouda", "Feta"]
        }
        await any_store.insert(Product, {"account_id": "b", "name": "Theirs"})

        first = [p.id for p in await any_store.list_by_owner(Product, "a")]
        second = [p.id for p in await any_store.list_by_owner(Product, "a")]
        assert set(first) == mine
        assert first == second


class TestOwnerKeyedWrites:
    @pytest.mark.asyncio
    async def test_update_with_wrong_owner_is_noop(self, any_store):
        q = await _questionnaire(any_store)
        assert await any_store.update(Questionnaire, q.id, {"title": "X"}, owner_id="b") is None
        assert (await any_store.get(Questionnaire, q.id)).title == "T"

    @pytest.mark.asyncio
    async def test_update_by_owner(self, any_store):
        q = await _questionnaire(any_store)
        updated = await any_store.update(
            Questionnaire, q.id, {"is_published": True}, owner_id="a"
        )
        assert updated.is_published is True
        assert (await any_store.get(Questionnaire, q.id)).is_published is True

    @pytest.mark.asyncio
    async def test_empty_patch_returns_record_untouched(self, any_store):
        await any_store.insert(Account, {"id": "a"})
        p = await any_store.insert(
            Product, {"account_id": "a", "name": "Brie", "tags": ["mild"]}
        )

        same = await any_store.update(Product, p.id, {}, owner_id="a")
        assert same.id == p.id
        assert same.name == "Brie"
        assert same.tags == ["mild"]

    @pytest.mark.asyncio
    async def test_empty_patch_still_checks_owner(self, any_store):
        await any_store.insert(Account, {"id": "a"})
        p = await any_store.insert(Product, {"account_id": "a", "name": "Brie"})

        assert await any_store.update(Product, p.id, {}, owner_id="b") is None
        assert await any_store.update(Product, "missing", {}, owner_id="a") is None

    @pytest.mark.asyncio
    async def test_child_owner_resolved_through_parent(self, any_store):
        q = await _questionnaire(any_store)
        question = await any_store.insert(
            Question,
            {"questionnaire_id": q.id, "question_text": "?", "question_type": "text"},
        )

        assert await any_store.delete(Question, question.id, owner_id="b") is False
        assert await any_store.get(Question, question.id) is not None
        assert await any_store.delete(Question, question.id, owner_id="a") is True
        assert await any_store.get(Question, question.id) is None

    @pytest.mark.asyncio
    async def test_delete_missing(self, any_store):
        assert await any_store.delete(Product, "missing") is False


class TestInsert:
    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, any_store):
        await any_store.insert(Account, {"id": "a", "first_name": "Ada"})
        with pytest.raises(StoreFailureError):
            await any_store.insert(Account, {"id": "a", "first_name": "Other"})

    @pytest.mark.asyncio
    async def test_insert_or_get_creates(self, any_store):
        account = await any_store.insert_or_get(Account, {"id": "a", "email": "a@x.io"})
        assert account.email == "a@x.io"
        assert account.brand_color == "#F59E0B"
        assert (await any_store.get(Account, "a")).email == "a@x.io"

    @pytest.mark.asyncio
    async def test_insert_or_get_keeps_existing(self, any_store):
        await any_store.insert(Account, {"id": "a", "first_name": "Ada"})

        account = await any_store.insert_or_get(Account, {"id": "a", "first_name": "Late"})
        assert account.first_name == "Ada"
        assert (await any_store.get(Account, "a")).first_name == "Ada"


class TestCascade:
    @pytest.mark.asyncio
    async def test_questionnaire_delete_removes_children(self, any_store):
        q = await _questionnaire(any_store)
        question = await any_store.insert(
            Question,
            {"questionnaire_id": q.id, "question_text": "?", "question_type": "text"},
        )
        response = await any_store.insert(
            Response, {"questionnaire_id": q.id, "answers": {question.id: "yes"}}
        )

        assert await any_store.delete(Questionnaire, q.id, owner_id="a") is True

        assert await any_store.get(Questionnaire, q.id) is None
        assert await any_store.get(Question, question.id) is None
        assert await any_store.get(Response, response.id) is None
        assert await any_store.list_by_parent(Question, q.id) == []

    @pytest.mark.asyncio
    async def test_account_delete_removes_catalog(self, any_store):
        q = await _questionnaire(any_store)
        p = await any_store.insert(Product, {"account_id": "a", "name": "P"})

        assert await any_store.delete(Account, "a") is True

        assert await any_store.get(Questionnaire, q.id) is None
        assert await any_store.get(Product, p.id) is None


class TestServicesOnEachBackend:
    @pytest.mark.asyncio
    async def test_product_update_with_nothing_to_change(self, any_store):
        await any_store.insert(Account, {"id": "a"})
        products = ProductService(any_store)
        p = await products.create("a", "Gouda", tags=["nutty"])

        updated = await products.update("a", p.id, {})
        assert updated.id == p.id
        assert updated.tags == ["nutty"]

    @pytest.mark.asyncio
    async def test_publish_and_submit(self, any_store):
        await any_store.insert(Account, {"id": "a"})
        questionnaires = QuestionnaireService(any_store)
        products = ProductService(any_store)

        q = await questionnaires.create("a", "Cheese finder")
        question = await questionnaires.add_question(
            "a", q.id, "Flavour?", "multiple-choice", ["Mild", "Sharp"]
        )
        await questionnaires.set_published("a", q.id, True)
        await products.create("a", "Brie", tags=["mild"])
        await products.create("a", "Cheddar", tags=["Sharp", "aged"])

        result = await ResponseService(any_store).submit(
            q.id, "fan@example.com", {question.id: "Sharp"}
        )

        assert [p.name for p in result.recommendations] == ["Cheddar"]
        listed = await any_store.list_by_parent(Response, q.id)
        assert [r.id for r in listed] == [result.response.id]


class TestSqlOrdering:
    @pytest.mark.asyncio
    async def test_equal_created_at_breaks_on_id(self, sql_store):
        """Records stamped in the same instant still list in a fixed order."""
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        await sql_store.insert(Account, {"id": "a"})
        for product_id in ["p2", "p1", "p3"]:
            await sql_store.insert(
                Product,
                {"id": product_id, "account_id": "a", "name": product_id, "created_at": stamp},
            )

        listed = await sql_store.list_by_owner(Product, "a")
        assert [p.id for p in listed] == ["p3", "p2", "p1"]
