"""Provision the first admin account from the command line.

    python -m src.bk_admin.bootstrap --name "Ops" --password "S3cretPass" [--phone +15550100]

Later admins can be created through POST /api/v1/admin/accounts.
"""

import argparse
import asyncio
import logging

from src.bk_account.application.service import AccountApplicationService
from src.bk_account.domain.models import AccountRole
from src.bk_common.database import async_session_factory, engine

logger = logging.getLogger(__name__)


async def create_admin(holder_name: str, password: str, phone_number: str | None) -> str:
    service = AccountApplicationService()
    try:
        async with async_session_factory() as session:
            account = await service.create_account(
                session,
                holder_name=holder_name,
                password=password,
                phone_number=phone_number,
                role=AccountRole.ADMIN,
            )
    finally:
        await engine.dispose()
    return account.id


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--name", required=True, help="holder display name")
    parser.add_argument("--password", required=True)
    parser.add_argument("--phone", default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    account_id = asyncio.run(create_admin(args.name, args.password, args.phone))
    logger.info("admin account created: %s", account_id)


if __name__ == "__main__":
    main()
