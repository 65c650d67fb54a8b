"""Dictionary-backed account repository.

Mirrors the SQL store's contract, including the rule that username, email and
phone are unique among non-deleted accounts only. Keyword search folds case
with ``str.lower``, which covers more than SQLite's ASCII-only ``lower()``.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Sequence

from account_server.modules.accounts.exceptions import AccountAlreadyExistsError, AccountNotFoundError
from account_server.modules.accounts.models import (
    Account,
    AccountCriteria,
    AccountRole,
    AccountStatus,
)
from account_server.modules.accounts.repository import UPDATABLE_FIELDS, AccountRepository

_CONFLICT_MESSAGES = {
    "username": "用户名已存在",
    "email": "邮箱已存在",
    "phone": "手机号已存在",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryAccountRepository(AccountRepository):
    """Account repository keeping every row, deleted ones included, in a dict."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._rows: dict[str, Account] = {}
        self._sequence: dict[str, int] = {}
        self._clock = clock

    @property
    def rows(self) -> Sequence[Account]:
        """Every stored row, soft-deleted ones included."""
        return [replace(row) for row in self._rows.values()]

    async def get_by_id(self, account_id: str) -> Account | None:
        row = self._rows.get(account_id)
        if row is None or row.is_deleted:
            return None
        return replace(row)

    async def get_by_username(self, username: str) -> Account | None:
        return self._find_active("username", username)

    async def get_by_email(self, email: str) -> Account | None:
        return self._find_active("email", email)

    async def get_by_phone(self, phone: str) -> Account | None:
        return self._find_active("phone", phone)

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
        now = self._clock()
        account = Account(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=password_hash,
            status=status,
            role=role,
            phone=phone,
            real_name=real_name,
            nickname=nickname,
            created_at=now,
            updated_at=now,
        )
        self._check_unique(account)
        self._rows[account.id] = account
        self._sequence[account.id] = len(self._sequence)
        return replace(account)

    async def update_account(self, account_id: str, **changes: Any) -> Account:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        row = self._rows.get(account_id)
        if row is None or row.is_deleted:
            raise AccountNotFoundError(account_id)

        candidate = replace(row, **changes, updated_at=self._clock())
        if not candidate.is_deleted:
            self._check_unique(candidate)
        self._rows[account_id] = candidate
        return replace(candidate)

    async def record_login(self, account_id: str, *, timestamp: datetime, ip: str | None) -> Account | None:
        row = self._rows.get(account_id)
        if row is None or row.is_deleted:
            return None
        row.login_count += 1
        row.last_login_at = timestamp
        row.last_login_ip = ip
        return replace(row)

    async def list_accounts(self, criteria: AccountCriteria) -> Sequence[Account]:
        matches = [row for row in self._rows.values() if self._matches(row, criteria)]
        matches.sort(key=lambda row: (row.created_at, self._sequence[row.id]), reverse=True)
        return [replace(row) for row in matches]

    async def count_accounts(self, criteria: AccountCriteria) -> int:
        return sum(1 for row in self._rows.values() if self._matches(row, criteria))

    def _find_active(self, field: str, value: str) -> Account | None:
        for row in self._active():
            if getattr(row, field) == value:
                return replace(row)
        return None

    def _active(self) -> Iterable[Account]:
        return (row for row in self._rows.values() if not row.is_deleted)

    def _check_unique(self, candidate: Account) -> None:
        for row in self._active():
            if row.id == candidate.id:
                continue
            for field in ("username", "email", "phone"):
                value = getattr(candidate, field)
                if value is not None and getattr(row, field) == value:
                    raise AccountAlreadyExistsError(_CONFLICT_MESSAGES[field], field=field)

    @staticmethod
    def _matches(row: Account, criteria: AccountCriteria) -> bool:
        if row.is_deleted:
            return False
        if criteria.status is not None and row.status != criteria.status:
            return False
        if criteria.role is not None and row.role != criteria.role:
            return False
        if criteria.keyword:
            needle = criteria.keyword.lower()
            haystack = (row.username, row.email, row.real_name, row.nickname)
            if not any(value and needle in value.lower() for value in haystack):
                return False
        if criteria.created_from is not None and row.created_at < criteria.created_from.astimezone(timezone.utc):
            return False
        if criteria.created_to is not None and row.created_at >= criteria.created_to.astimezone(timezone.utc):
            return False
        return True
