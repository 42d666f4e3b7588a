"""Unit tests for AccountService — first-login creation and settings."""
import pytest

from palate.exceptions import NotFoundError, ValidationFailedError
from palate.models import Account
from palate.services.account_service import AccountService


@pytest.fixture
def accounts(store):
    return AccountService(store)


class TestEnsureAccount:
    @pytest.mark.asyncio
    async def test_created_from_claims(self, accounts, account_a):
        account = await accounts.ensure_account(
            account_a, {"email": "owner@example.com", "first_name": "Ada", "role": "x"}
        )
        assert account.id == account_a
        assert account.email == "owner@example.com"
        assert account.first_name == "Ada"
        assert account.brand_color == "#F59E0B"

    @pytest.mark.asyncio
    async def test_second_login_keeps_record(self, accounts, account_a):
        await accounts.ensure_account(account_a, {"first_name": "Ada"})
        await accounts.update_settings(account_a, {"company_name": "Fromagerie"})

        again = await accounts.ensure_account(account_a, {"first_name": "Changed"})
        assert again.first_name == "Ada"
        assert again.company_name == "Fromagerie"

    @pytest.mark.asyncio
    async def test_concurrent_first_login_keeps_winner(self, stale_read_store, account_a):
        """A request that missed the account on read still gets the stored row."""
        accounts = AccountService(stale_read_store)
        await accounts.ensure_account(account_a, {"first_name": "Ada"})
        await stale_read_store.update(Account, account_a, {"company_name": "Fromagerie"})

        again = await accounts.ensure_account(account_a, {"first_name": "Late"})
        assert again.first_name == "Ada"
        assert again.company_name == "Fromagerie"

    @pytest.mark.asyncio
    async def test_get_missing(self, accounts):
        with pytest.raises(NotFoundError):
            await accounts.get_account("nobody")


class TestSettings:
    @pytest.mark.asyncio
    async def test_brand_color_validated(self, accounts, account_a):
        await accounts.ensure_account(account_a)
        with pytest.raises(ValidationFailedError) as exc:
            await accounts.update_settings(account_a, {"brand_color": "orange"})
        assert exc.value.field == "brand_color"

    @pytest.mark.asyncio
    async def test_brand_color_accepted(self, accounts, account_a):
        await accounts.ensure_account(account_a)
        updated = await accounts.update_settings(account_a, {"brand_color": "#12ab9F"})
        assert updated.brand_color == "#12ab9F"

    @pytest.mark.asyncio
    async def test_id_cannot_change(self, accounts, account_a):
        await accounts.ensure_account(account_a)
        with pytest.raises(ValidationFailedError):
            await accounts.update_settings(account_a, {"id": "other"})

    @pytest.mark.asyncio
    async def test_update_missing(self, accounts):
        with pytest.raises(NotFoundError):
            await accounts.update_settings("nobody", {"company_name": "X"})
