"""Domain models for bk_account: pure dataclasses, no SQLAlchemy dependency."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AccountRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass
class Account:
    id: str
    holder_name: str
    phone_number: str | None
    password_hash: str
    balance: int             # cents
    role: str                # AccountRole value
    version: int
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN.value


def normalize_account_id(raw: str) -> str | None:
    """Canonical UUID string for ``raw``, or None if it is not a UUID."""
    try:
        return str(uuid.UUID(str(raw)))
    except ValueError:
        return None


def normalize_phone(raw: str) -> str:
    """Phone number as stored: surrounding whitespace, inner spaces and dashes removed."""
    return raw.strip().replace(" ", "").replace("-", "")
