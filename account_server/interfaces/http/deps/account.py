"""Per-request account store and service.

Both providers hang off the request's database session, so a handler that
asks for the service gets a store bound to the same transaction.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from account_server.infrastructure.database.repositories import SqlAccountRepository
from account_server.modules.accounts import AccountRepository, AccountService

from .database import get_db_session


def get_account_repository(session: AsyncSession = Depends(get_db_session)) -> AccountRepository:
    return SqlAccountRepository(session)


def get_account_service(accounts: AccountRepository = Depends(get_account_repository)) -> AccountService:
    """Tests override this provider to swap in a different service."""
    return AccountService(accounts)


__all__ = ["get_account_repository", "get_account_service"]
