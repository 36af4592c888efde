"""Admin REST API: every endpoint requires the admin role."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.application.schemas import AccountListResponse, AccountResponse
from src.bk_account.application.service import AccountApplicationService
from src.bk_account.domain.models import Account
from src.bk_admin.api.schemas import AdminCreateAccountRequest
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, success_response
from src.bk_gateway.auth.dependencies import require_admin
from src.bk_ledger.application.schemas import HistoryResponse
from src.bk_ledger.application.service import LedgerApplicationService

router = APIRouter(prefix="/admin", tags=["admin"])
_accounts = AccountApplicationService()
_ledger = LedgerApplicationService()


@router.get("/accounts")
async def list_accounts(
    admin: Annotated[Account, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    accounts = await _accounts.list_all(db)
    data = AccountListResponse(
        items=[AccountResponse.from_account(a) for a in accounts],
        total=len(accounts),
    )
    return success_response(data.model_dump(), request)


@router.get("/accounts/{account_id}/history")
async def account_history(
    account_id: str,
    admin: Annotated[Account, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    limit: int | None = Query(None, ge=1, le=500),
) -> ApiResponse:
    account = await _accounts.get_by_id(db, account_id)
    txs = await _ledger.get_history(db, account.id, limit)
    return success_response(HistoryResponse.build(account.id, txs).model_dump(), request)


@router.post("/accounts", status_code=status.HTTP_201_CREATED)
async def create_account(
    body: AdminCreateAccountRequest,
    admin: Annotated[Account, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _accounts.create_account(
        db,
        holder_name=body.holder_name,
        password=body.password,
        initial_balance=body.initial_balance_cents,
        phone_number=body.phone_number,
        role=body.role,
    )
    return success_response(
        AccountResponse.from_account(account).model_dump(), request, message="Account created"
    )
