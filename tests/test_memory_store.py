"""Unit tests for MemoryRecordStore — ordering, owner-keyed writes, cascade."""
import pytest

from palate.exceptions import StoreFailureError
from palate.models import Account, Product, Question, Questionnaire, Response


class TestOwnerKeyedWrites:
    """Conditional writes only touch records the given account owns."""

    @pytest.mark.asyncio
    async def test_update_with_wrong_owner_is_noop(self, store):
        q = await store.insert(Questionnaire, {"account_id": "a", "title": "T"})
        assert await store.update(Questionnaire, q.id, {"title": "X"}, owner_id="b") is None
        assert (await store.get(Questionnaire, q.id)).title == "T"

    @pytest.mark.asyncio
    async def test_update_refreshes_updated_at(self, store):
        q = await store.insert(Questionnaire, {"account_id": "a", "title": "T"})
        before = q.updated_at
        updated = await store.update(Questionnaire, q.id, {"title": "X"}, owner_id="a")
        assert updated.title == "X"
        assert updated.updated_at >= before

    @pytest.mark.asyncio
    async def test_child_owner_resolved_through_parent(self, store):
        q = await store.insert(Questionnaire, {"account_id": "a", "title": "T"})
        question = await store.insert(
            Question,
            {"questionnaire_id": q.id, "question_text": "?", "question_type": "text"},
        )
        assert await store.delete(Question, question.id, owner_id="b") is False
        assert await store.delete(Question, question.id, owner_id="a") is True

    @pytest.mark.asyncio
    async def test_delete_missing(self, store):
        assert await store.delete(Product, "missing") is False


class TestDefaultsAndOrdering:
    @pytest.mark.asyncio
    async def test_column_defaults(self, store):
        account = await store.insert(Account, {"id": "a"})
        q = await store.insert(Questionnaire, {"account_id": "a", "title": "T"})
        assert account.brand_color == "#F59E0B"
        assert q.is_published is False

    @pytest.mark.asyncio
    async def test_questions_by_order(self, store):
        q = await store.insert(Questionnaire, {"account_id": "a", "title": "T"})
        for order, text in [(1, "second"), (0, "first"), (2, "third")]:
            await store.insert(
                Question,
                {
                    "questionnaire_id": q.id,
                    "question_text": text,
                    "question_type": "text",
                    "order": order,
                },
            )
        listed = await store.list_by_parent(Question, q.id)
        assert [x.question_text for x in listed] == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_owner_listing_newest_first(self, store):
        ids = [
            (await store.insert(Product, {"account_id": "a", "name": str(i)})).id
            for i in range(3)
        ]
        listed = await store.list_by_owner(Product, "a")
        assert [p.id for p in listed] == list(reversed(ids))


class TestCascade:
    @pytest.mark.asyncio
    async def test_account_delete_removes_everything(self, store):
        await store.insert(Account, {"id": "a"})
        q = await store.insert(Questionnaire, {"account_id": "a", "title": "T"})
        r = await store.insert(Response, {"questionnaire_id": q.id, "answers": {}})
        p = await store.insert(Product, {"account_id": "a", "name": "P"})

        assert await store.delete(Account, "a") is True

        assert await store.get(Questionnaire, q.id) is None
        assert await store.get(Response, r.id) is None
        assert await store.get(Product, p.id) is None


class TestInsert:
    @pytest.mark.asyncio
    async def test_duplicate_id_keeps_original(self, store):
        await store.insert(Account, {"id": "a", "first_name": "Ada"})
        with pytest.raises(StoreFailureError):
            await store.insert(Account, {"id": "a", "first_name": "Other"})
        assert (await store.get(Account, "a")).first_name == "Ada"

    @pytest.mark.asyncio
    async def test_insert_or_get_does_not_overwrite(self, store):
        first = await store.insert_or_get(Account, {"id": "a", "first_name": "Ada"})
        second = await store.insert_or_get(Account, {"id": "a", "first_name": "Late"})
        assert second is first
