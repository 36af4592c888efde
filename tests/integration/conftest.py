"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session.

Pre-condition: PostgreSQL at DATABASE_URL with ``alembic upgrade head``
applied. When the database cannot be reached every test here is skipped.
"""

import uuid
from collections.abc import Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.bk_common.database import engine
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def _database_ready() -> None:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM accounts LIMIT 1"))
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"PostgreSQL not available or not migrated: {exc.__class__.__name__}")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def unique_holder(balance: int = 0) -> dict[str, object]:
    """Fresh registration payload; phone numbers are unique per call."""
    uid = uuid.uuid4().int % 10**12
    return {
        "holder_name": f"holder_{uid}",
        "password": "TestPass1",
        "phone_number": f"+9{uid:012d}",
        "initial_balance_cents": balance,
    }


Registrar = Callable[..., Awaitable[tuple[str, dict[str, str]]]]


@pytest.fixture
def register(client: AsyncClient) -> Registrar:
    """Register a holder; the returned coroutine yields (account_id, auth headers)."""

    async def _register(balance: int = 0, **overrides: object) -> tuple[str, dict[str, str]]:
        payload = {**unique_holder(balance), **overrides}
        resp = await client.post("/api/v1/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        headers = {"Authorization": f"Bearer {data['access_token']}"}
        return data["account"]["account_id"], headers

    return _register