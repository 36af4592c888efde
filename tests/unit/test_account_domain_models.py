"""Tests for bk_account domain models and the SQL-facing helpers."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.bk_account.domain.models import AccountRole, normalize_account_id, normalize_phone
from src.bk_account.infrastructure.persistence import AccountRepository, escape_like
from src.bk_common.errors import AccountNotFoundError, PhoneExistsError


class TestNormalizeAccountId:
    def test_canonical_form(self) -> None:
        raw = uuid.uuid4()
        assert normalize_account_id(str(raw).upper()) == str(raw)

    def test_garbage_is_none(self) -> None:
        assert normalize_account_id("12; DROP TABLE accounts") is None
        assert normalize_account_id("") is None


class TestNormalizePhone:
    def test_separators_removed(self) -> None:
        assert normalize_phone(" +1 555-0100 ") == "+15550100"

    def test_stored_form_unchanged(self) -> None:
        assert normalize_phone("+15550100") == "+15550100"

    def test_name_keeps_letters(self) -> None:
        assert normalize_phone("Alice") == "Alice"


class TestAccountRole:
    def test_values(self) -> None:
        assert AccountRole("user") is AccountRole.USER
        assert AccountRole.ADMIN.value == "admin"


class TestEscapeLike:
    def test_wildcards_escaped(self) -> None:
        assert escape_like("50%_off") == "50\\%\\_off"

    def test_backslash_escaped_first(self) -> None:
        assert escape_like("a\\b") == "a\\\\b"

    def test_plain_text_unchanged(self) -> None:
        assert escape_like("Alice") == "Alice"


class _UniqueViolation(Exception):
    sqlstate = "23505"


class TestAccountRepository:
    async def test_malformed_id_lookup_skips_query(self) -> None:
        db = AsyncMock()
        assert await AccountRepository().get_by_id(db, "not-a-uuid") is None
        db.execute.assert_not_awaited()

    async def test_delete_missing_raises(self) -> None:
        result = MagicMock()
        result.fetchone.return_value = None
        db = AsyncMock()
        db.execute.return_value = result

        with pytest.raises(AccountNotFoundError):
            await AccountRepository().delete_by_id(db, str(uuid.uuid4()))

    async def test_deposit_malformed_id_raises(self) -> None:
        with pytest.raises(AccountNotFoundError):
            await AccountRepository().deposit(AsyncMock(), "abc", 100)

    async def test_unique_violation_maps_to_phone_exists(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = IntegrityError("INSERT", {}, _UniqueViolation())

        with pytest.raises(PhoneExistsError):
            await AccountRepository().create_account(
                db,
                holder_name="Alice",
                password_hash="h",
                initial_balance=0,
                phone_number="5550100",
                role="user",
            )

    async def test_search_pattern_is_escaped(self) -> None:
        result = MagicMock()
        result.fetchall.return_value = []
        db = AsyncMock()
        db.execute.return_value = result

        await AccountRepository().search_by_name_or_phone(db, "10%")

        params = db.execute.call_args.args[1]
        assert params == {"pattern": "%10\\%%"}
