"""Unit tests for bk_gateway Pydantic schemas."""

import pytest
from pydantic import ValidationError

from src.bk_account.domain.models import AccountRole
from src.bk_admin.api.schemas import AdminCreateAccountRequest
from src.bk_gateway.schemas import LoginRequest, RegisterRequest


class TestRegisterRequest:
    def test_valid_input(self) -> None:
        req = RegisterRequest(holder_name="Alice", password="SecurePass1")
        assert req.holder_name == "Alice"
        assert req.phone_number is None
        assert req.initial_balance_cents == 0

    def test_phone_separators_stripped(self) -> None:
        req = RegisterRequest(
            holder_name="Alice", password="SecurePass1", phone_number="+1 555-0100-22"
        )
        assert req.phone_number == "+1555010022"

    def test_phone_with_letters_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(holder_name="Alice", password="SecurePass1", phone_number="555-CALL")

    def test_phone_too_short_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(holder_name="Alice", password="SecurePass1", phone_number="123")

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(holder_name="", password="SecurePass1")

    def test_password_too_short(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(holder_name="Alice", password="Ab1")

    def test_password_needs_digit(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(holder_name="Alice", password="NoDigitsHere")

    def test_password_needs_letter(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(holder_name="Alice", password="1234567890")

    def test_negative_opening_balance_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(holder_name="Alice", password="SecurePass1", initial_balance_cents=-1)


class TestLoginRequest:
    def test_requires_identifier(self) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(identifier="", password="x")


class TestAdminCreateAccountRequest:
    def test_defaults_to_user(self) -> None:
        req = AdminCreateAccountRequest(holder_name="Ops", password="SecurePass1")
        assert req.role is AccountRole.USER

    def test_admin_role(self) -> None:
        req = AdminCreateAccountRequest(holder_name="Ops", password="SecurePass1", role="admin")
        assert req.role is AccountRole.ADMIN

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AdminCreateAccountRequest(holder_name="Ops", password="SecurePass1", role="root")
