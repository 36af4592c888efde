"""Pydantic request/response schemas for bk_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

import re

from pydantic import BaseModel, Field, field_validator

from src.bk_account.domain.models import normalize_phone

_PHONE_RE = re.compile(r"^\+?[0-9]{6,20}$")


class RegisterRequest(BaseModel):
    holder_name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8, max_length=72)
    phone_number: str | None = Field(None, description="E.164-style digits, optional leading +")
    initial_balance_cents: int = Field(0, ge=0, description="Opening balance in cents")

    @field_validator("phone_number")
    @classmethod
    def phone_format(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = normalize_phone(v)
        if not _PHONE_RE.match(v):
            raise ValueError("Phone number must be 6-20 digits, optionally prefixed with +")
        return v

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Enforce: at least one letter and one digit."""
        if not re.search(r"[A-Za-z]", v):
            raise ValueError("Password must contain at least one letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one digit")
        return v


class LoginRequest(BaseModel):
    identifier: str = Field(..., min_length=1, description="Holder name or phone number")
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class AccountInfo(BaseModel):
    """Minimal account info embedded in auth responses."""

    account_id: str
    holder_name: str
    role: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    account: AccountInfo


class RefreshResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
