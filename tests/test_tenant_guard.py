"""Unit tests for the tenant isolation guard."""
import pytest

from palate.exceptions import ForbiddenError, NotFoundError
from palate.models import Questionnaire
from palate.services.tenant_guard import AuthorizationResult, authorize, ensure_owned


def _questionnaire(account_id):
    return Questionnaire(id="q-1", account_id=account_id, title="T")


class TestAuthorize:
    def test_owner_is_ok(self):
        assert authorize("a", _questionnaire("a")) is AuthorizationResult.OK

    def test_other_account_is_forbidden(self):
        assert authorize("b", _questionnaire("a")) is AuthorizationResult.FORBIDDEN

    def test_missing_is_not_found(self):
        assert authorize("a", None) is AuthorizationResult.NOT_FOUND


class TestEnsureOwned:
    def test_returns_entity(self):
        entity = _questionnaire("a")
        assert ensure_owned("a", entity, "Questionnaire") is entity

    def test_raises_forbidden(self):
        with pytest.raises(ForbiddenError) as exc:
            ensure_owned("b", _questionnaire("a"), "Questionnaire", "q-1")
        assert exc.value.entity == "Questionnaire"
        assert exc.value.entity_id == "q-1"

    def test_raises_not_found(self):
        with pytest.raises(NotFoundError):
            ensure_owned("a", None, "Questionnaire", "q-1")
