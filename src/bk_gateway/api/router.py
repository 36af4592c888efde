"""Auth API router: register, login, refresh.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_account.domain.models import Account
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, success_response
from src.bk_gateway.schemas import (
    AccountInfo,
    LoginRequest,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    TokenPair,
)
from src.bk_gateway.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = AuthService()


def _token_pair(account: Account, access_token: str, refresh_token: str) -> TokenPair:
    return TokenPair(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        account=AccountInfo(
            account_id=account.id,
            holder_name=account.holder_name,
            role=account.role,
        ),
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create an account",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    account, access_token, refresh_token = await _service.register(
        db,
        holder_name=body.holder_name,
        password=body.password,
        phone_number=body.phone_number,
        initial_balance=body.initial_balance_cents,
    )
    data = _token_pair(account, access_token, refresh_token)
    return success_response(data.model_dump(), request, message="Account created")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Log in with holder name or phone number",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    account, access_token, refresh_token = await _service.login(
        db, body.identifier, body.password
    )
    data = _token_pair(account, access_token, refresh_token)
    return success_response(data.model_dump(), request, message="Login successful")


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(
    request: Request,
    body: RefreshRequest,
) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token)
    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    return success_response(data.model_dump(), request, message="Token refreshed")
