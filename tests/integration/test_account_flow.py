"""Integration tests for auth and account endpoints (requires running PG).

Pre-condition: alembic upgrade head against DATABASE_URL.
"""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]


class TestRegisterAndLogin:
    async def test_login_by_phone_and_name(self, client: AsyncClient, register) -> None:
        name = f"Zed {uuid.uuid4().hex[:8]}"
        phone = f"+8{uuid.uuid4().int % 10**12:012d}"
        account_id, _ = await register(0, holder_name=name, phone_number=phone)

        for identifier in (phone, name.upper()):
            resp = await client.post(
                "/api/v1/auth/login", json={"identifier": identifier, "password": "TestPass1"}
            )
            assert resp.status_code == 200
            assert resp.json()["data"]["account"]["account_id"] == account_id

    async def test_wrong_password(self, client: AsyncClient, register) -> None:
        phone = f"+7{uuid.uuid4().int % 10**12:012d}"
        await register(0, phone_number=phone)

        resp = await client.post(
            "/api/v1/auth/login", json={"identifier": phone, "password": "WrongPass9"}
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == 1001

    async def test_duplicate_phone_conflict(self, client: AsyncClient, register) -> None:
        phone = f"+6{uuid.uuid4().int % 10**12:012d}"
        await register(0, phone_number=phone)

        resp = await client.post(
            "/api/v1/auth/register",
            json={"holder_name": "Other", "password": "TestPass1", "phone_number": phone},
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == 1003

    async def test_login_and_lookup_accept_phone_separators(
        self, client: AsyncClient, register
    ) -> None:
        digits = f"{uuid.uuid4().int % 10**10:010d}"
        account_id, headers = await register(0, phone_number=f"+5{digits}")
        spaced = f"+5 {digits[:3]}-{digits[3:6]} {digits[6:]}"

        resp = await client.post(
            "/api/v1/auth/login", json={"identifier": spaced, "password": "TestPass1"}
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["account"]["account_id"] == account_id

        resp = await client.get(f"/api/v1/accounts/by-phone/{spaced}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["phone_number"] == f"+5{digits}"


class TestAccount:
    async def test_unauthenticated_returns_401(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/accounts/me")
        assert resp.status_code == 401

    async def test_deposit_and_balance(self, client: AsyncClient, register) -> None:
        _, headers = await register(500)

        resp = await client.post(
            "/api/v1/accounts/me/deposit", json={"amount_cents": 1_500}, headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["balance_cents"] == 2_000

        resp = await client.get("/api/v1/accounts/me/balance", headers=headers)
        assert resp.json()["data"]["balance_display"] == "$20.00"

    async def test_deposit_writes_no_ledger_row(self, client: AsyncClient, register) -> None:
        _, headers = await register(0)
        await client.post("/api/v1/accounts/me/deposit", json={"amount_cents": 100}, headers=headers)

        resp = await client.get("/api/v1/transfers/latest", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == 2002

    async def test_rename_and_search(self, client: AsyncClient, register) -> None:
        _, headers = await register(0)
        new_name = f"Renamed_{uuid.uuid4().hex[:8]}"

        resp = await client.patch("/api/v1/accounts/me", json={"holder_name": new_name}, headers=headers)
        assert resp.json()["data"]["holder_name"] == new_name

        resp = await client.get(f"/api/v1/accounts/search?q={new_name[:12]}", headers=headers)
        names = [item["holder_name"] for item in resp.json()["data"]["items"]]
        assert new_name in names

    async def test_search_treats_percent_literally(self, client: AsyncClient, register) -> None:
        _, headers = await register(0)
        resp = await client.get("/api/v1/accounts/search?q=%25%25%25nobody", headers=headers)
        assert resp.json()["data"]["total"] == 0

    async def test_delete_self_invalidates_token(self, client: AsyncClient, register) -> None:
        account_id, headers = await register(0)

        resp = await client.delete(f"/api/v1/accounts/{account_id}", headers=headers)
        assert resp.status_code == 200

        resp = await client.get("/api/v1/accounts/me", headers=headers)
        assert resp.status_code == 401

    async def test_history_survives_counterparty_deletion(
        self, client: AsyncClient, register
    ) -> None:
        alice_id, alice = await register(1_000)
        bob_id, bob = await register(0)
        await client.post(
            "/api/v1/transfers", json={"to_account_id": bob_id, "amount_cents": 250}, headers=alice
        )

        await client.delete(f"/api/v1/accounts/{alice_id}", headers=alice)

        resp = await client.get("/api/v1/transfers/history", headers=bob)
        (item,) = resp.json()["data"]["items"]
        assert item["counterparty_id"] == alice_id
        assert item["amount_cents"] == 250


class TestReads:
    async def test_balance_lists_recent_incoming(self, client: AsyncClient, register) -> None:
        alice_id, alice = await register(1_000)
        bob_id, bob = await register(1_000)
        await client.post(
            "/api/v1/transfers", json={"to_account_id": bob_id, "amount_cents": 300}, headers=alice
        )
        await client.post(
            "/api/v1/transfers", json={"to_account_id": alice_id, "amount_cents": 50}, headers=bob
        )

        data = (await client.get("/api/v1/accounts/me/balance", headers=bob)).json()["data"]

        assert data["balance_cents"] == 1_250
        # Only the transfer Bob received, not the one he sent
        (item,) = data["recent_incoming"]
        assert item["direction"] == "RECEIVED"
        assert item["counterparty_id"] == alice_id
        assert item["amount_cents"] == 300

    async def test_repeated_reads_return_same_data(self, client: AsyncClient, register) -> None:
        alice_id, alice = await register(1_000)
        _, bob = await register(100)
        await client.post(
            "/api/v1/transfers", json={"to_account_id": alice_id, "amount_cents": 1}, headers=bob
        )
        await client.post("/api/v1/accounts/me/deposit", json={"amount_cents": 10}, headers=bob)
        await client.post(
            "/api/v1/transfers", json={"to_account_id": alice_id, "amount_cents": 5}, headers=bob
        )

        for path in ("/api/v1/accounts/me", "/api/v1/accounts/me/balance"):
            first = await client.get(path, headers=alice)
            second = await client.get(path, headers=alice)
            assert first.status_code == second.status_code == 200
            assert first.json()["data"] == second.json()["data"]
            assert first.json()["request_id"] != second.json()["request_id"]
