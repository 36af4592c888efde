"""Admin-only request schemas."""

from pydantic import Field

from src.bk_account.domain.models import AccountRole
from src.bk_gateway.schemas import RegisterRequest


class AdminCreateAccountRequest(RegisterRequest):
    role: AccountRole = Field(AccountRole.USER, description="user | admin")
