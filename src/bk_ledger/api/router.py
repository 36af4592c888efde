"""bk_ledger REST API: transfers and history of the calling account."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, success_response
from src.bk_gateway.auth.dependencies import get_current_account
from src.bk_ledger.application.schemas import (
    HistoryResponse,
    TransactionResponse,
    TransferRequest,
)
from src.bk_ledger.application.service import LedgerApplicationService

router = APIRouter(prefix="/transfers", tags=["transfers"])

_service = LedgerApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def transfer(
    body: TransferRequest,
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    tx = await _service.transfer(db, current_account.id, body.to_account_id, body.amount_cents)
    data = TransactionResponse.from_transaction(tx)
    return success_response(data.model_dump(), request, message="Transfer successful")


@router.get("/history")
async def history(
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    limit: int | None = Query(None, ge=1, le=500, description="Newest N entries"),
) -> ApiResponse:
    txs = await _service.get_history(db, current_account.id, limit)
    data = HistoryResponse.build(current_account.id, txs)
    return success_response(data.model_dump(), request)


@router.get("/latest")
async def latest(
    current_account: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    tx = await _service.get_most_recent(db, current_account.id)
    data = TransactionResponse.from_transaction(tx)
    return success_response(data.model_dump(), request)
