"""Repository protocol for accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence

from .models import Account, AccountCriteria, AccountRole, AccountStatus

# Columns a repository may change after creation; username and id are immutable.
UPDATABLE_FIELDS = frozenset(
    {
        "email",
        "phone",
        "password_hash",
        "real_name",
        "nickname",
        "avatar_url",
        "remark",
        "status",
        "role",
        "email_verified",
        "phone_verified",
        "is_deleted",
    }
)


class AccountRepository(Protocol):
    """Abstract repository interface for account persistence.

    Lookups never return soft-deleted accounts. Writes that collide with a
    unique field of another active account raise ``AccountAlreadyExistsError``;
    updates of a missing or deleted account raise ``AccountNotFoundError``.
    """

    async def get_by_id(self, account_id: str) -> Account | None:
        ...

    async def get_by_username(self, username: str) -> Account | None:
        ...

    async def get_by_email(self, email: str) -> Account | None:
        ...

    async def get_by_phone(self, phone: str) -> Account | None:
        ...

    async def create_account(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        phone: str | None,
        real_name: str | None,
        nickname: str | None,
        status: AccountStatus,
        role: AccountRole,
    ) -> Account:
        ...

    async def update_account(self, account_id: str, **changes: Any) -> Account:
        ...

    async def record_login(self, account_id: str, *, timestamp: datetime, ip: str | None) -> Account | None:
        ...

    async def list_accounts(self, criteria: AccountCriteria) -> Sequence[Account]:
        ...

    async def count_accounts(self, criteria: AccountCriteria) -> int:
        ...
