"""bk_account REST API: all endpoints require JWT authentication.

Other holders are only ever shown as AccountSummary (no balance); the full
AccountResponse is reserved for the owner and for admins.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.application.schemas import (
    AccountResponse,
    AccountSearchResponse,
    AccountSummary,
    BalanceResponse,
    DepositRequest,
    DepositResponse,
    RenameRequest,
    RenameResponse,
)
from src.bk_account.application.service import AccountApplicationService
from src.bk_account.domain.models import Account, normalize_account_id, normalize_phone
from src.bk_common.database import get_db_session
from src.bk_common.errors import PermissionDeniedError
from src.bk_common.response import ApiResponse, success_response
from src.bk_gateway.auth.dependencies import get_current_account
from src.bk_ledger.application.service import LedgerApplicationService

router = APIRouter(prefix="/accounts", tags=["accounts"])

_service = AccountApplicationService()
_ledger = LedgerApplicationService()

# Received transfers listed next to the balance
_RECENT_INCOMING_LIMIT = 5


def _may_manage(caller: Account, account_id: str) -> bool:
    return caller.is_admin or caller.id == normalize_account_id(account_id)


@router.get("/me")
async def get_me(
    current_account: Annotated[Account, Depends(get_current_account)],
    request: Request,
) -> ApiResponse:
    return success_response(AccountResponse.from_account(current_account).model_dump(), request)


@router.patch("/me")
async def rename_me(
    body: RenameRequest,
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    name = await _service.rename(db, current_account.id, body.holder_name)
    data = RenameResponse(account_id=current_account.id, holder_name=name)
    return success_response(data.model_dump(), request)


@router.get("/me/balance")
async def get_balance(
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    balance = await _service.get_balance(db, current_account.id)
    incoming = await _ledger.get_recent_incoming(db, current_account.id, _RECENT_INCOMING_LIMIT)
    data = BalanceResponse.from_cents(current_account.id, balance, incoming)
    return success_response(data.model_dump(), request)


@router.post("/me/deposit")
async def deposit(
    body: DepositRequest,
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.deposit(db, current_account.id, body.amount_cents)
    data = DepositResponse.from_result(account, body.amount_cents)
    return success_response(data.model_dump(), request, message="Deposit successful")


@router.get("/search")
async def search(
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    q: str = Query(..., min_length=1, max_length=100, description="Name or phone fragment"),
) -> ApiResponse:
    accounts = await _service.search_by_name_or_phone(db, q)
    data = AccountSearchResponse(
        items=[AccountSummary.from_account(a) for a in accounts],
        total=len(accounts),
    )
    return success_response(data.model_dump(), request)


@router.get("/by-phone/{phone_number}")
async def get_by_phone(
    phone_number: str,
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.get_by_phone(db, normalize_phone(phone_number))
    return success_response(AccountSummary.from_account(account).model_dump(), request)


@router.get("/{account_id}")
async def get_account(
    account_id: str,
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.get_by_id(db, account_id)
    if _may_manage(current_account, account.id):
        data = AccountResponse.from_account(account).model_dump()
    else:
        data = AccountSummary.from_account(account).model_dump()
    return success_response(data, request)


@router.delete("/{account_id}")
async def delete_account(
    account_id: str,
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    if not _may_manage(current_account, account_id):
        raise PermissionDeniedError("Only the owner or an admin can delete an account")
    await _service.delete_by_id(db, account_id)
    return success_response({"account_id": account_id}, request, message="Account deleted")
