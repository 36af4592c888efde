"""Engine, session factory and the atomic-unit executor.

One AsyncEngine per process, created at import and disposed by the app
lifespan. Request handlers get a session through ``get_db_session``.
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings
from src.bk_common.errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session


def sqlstate_of(exc: DBAPIError) -> str | None:
    """SQLSTATE carried by the driver exception wrapped in ``exc``, if any."""
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


async def run_atomic(
    db: AsyncSession,
    work: Callable[[AsyncSession], Awaitable[T]],
    max_attempts: int | None = None,
) -> T:
    """Run ``work`` and commit it as one all-or-nothing unit.

    Write conflicts reported by PostgreSQL (serialization failure, deadlock)
    roll back and re-run ``work`` from scratch, at most ``max_attempts``
    times in total. Exhausted retries and every other driver error surface as
    StorageError. AppError subclasses raised by ``work`` roll back and
    propagate unchanged.

    Cancellation of the calling task (client disconnect) lands in the
    rollback branch, so a cancelled unit never commits.
    """
    attempts = max_attempts or settings.TRANSFER_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            result = await work(db)
            await db.commit()
            return result
        except DBAPIError as exc:
            await db.rollback()
            state = sqlstate_of(exc)
            if state in RETRYABLE_SQLSTATES and attempt < attempts:
                logger.warning(
                    "write conflict (sqlstate=%s), retrying atomic unit %d/%d",
                    state,
                    attempt + 1,
                    attempts,
                )
                continue
            if state in RETRYABLE_SQLSTATES:
                raise StorageError(
                    f"Write conflict persisted after {attempts} attempts"
                ) from exc
            raise StorageError(f"Storage failure: {exc.__class__.__name__}") from exc
        except BaseException:
            await db.rollback()
            raise
    # attempts < 1 never enters the loop
    raise StorageError("Atomic unit was not attempted")
