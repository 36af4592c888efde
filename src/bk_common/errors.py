"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Account / Ledger
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid credentials", 401)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Refresh token is invalid or expired", 401)


class PhoneExistsError(AppError):
    def __init__(self, phone_number: str) -> None:
        super().__init__(1003, f"Phone number already registered: {phone_number}", 409)


class PermissionDeniedError(AppError):
    def __init__(self, detail: str = "You are not authorized to perform this action") -> None:
        super().__init__(1004, detail, 403)


# --- 2xxx: Account / Ledger ---

class NotFoundError(AppError):
    def __init__(self, message: str, code: int = 2000) -> None:
        super().__init__(code, message, 404)


class AccountNotFoundError(NotFoundError):
    def __init__(self, account_id: str) -> None:
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}", 2001)


class TransactionNotFoundError(NotFoundError):
    def __init__(self, account_id: str) -> None:
        super().__init__(f"No transactions found for account {account_id}", 2002)


class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2003,
            f"Insufficient funds: required {required} cents, available {available} cents",
            422,
        )


class InvalidAmountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2004, detail, 422)


class InvalidTransferError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2005, detail, 422)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class StorageError(AppError):
    def __init__(self, detail: str = "Storage unavailable") -> None:
        super().__init__(9002, detail, 503)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9003, detail, 500)
