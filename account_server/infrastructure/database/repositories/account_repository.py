"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Sequence

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from account_server.infrastructure.database.models import AccountRecord, utcnow
from account_server.modules.accounts.exceptions import AccountAlreadyExistsError, AccountNotFoundError
from account_server.modules.accounts.models import Account, AccountCriteria, AccountRole, AccountStatus
from account_server.modules.accounts.repository import UPDATABLE_FIELDS, AccountRepository

_UNIQUE_FIELDS = ("username", "email", "phone")
_CONFLICT_MESSAGES = {
    "username": "用户名已存在",
    "email": "邮箱已存在",
    "phone": "手机号已存在",
}


def _to_utc(value: datetime) -> datetime:
    """Normalise a timestamp for comparison; naive values are taken as server-local time."""
    return value.astimezone(timezone.utc)


def _ensure_aware(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def conflict_from_integrity_error(exc: IntegrityError) -> AccountAlreadyExistsError:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    for field in _UNIQUE_FIELDS:
        if field in detail:
            return AccountAlreadyExistsError(_CONFLICT_MESSAGES[field], field=field)
    return AccountAlreadyExistsError("用户名、邮箱或手机号已存在")


class SqlAccountRepository(AccountRepository):
    """Account repository backed by SQLAlchemy models.

    Keyword search folds case with the database's ``lower()``. SQLite only folds
    ASCII letters there, so on SQLite a non-ASCII keyword must match the stored
    case exactly, while PostgreSQL and the in-memory store fold Unicode too.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> Account | None:
        return self._to_domain(await self._get_model(account_id))

    async def get_by_username(self, username: str) -> Account | None:
        return await self._get_by(AccountRecord.username == username)

    async def get_by_email(self, email: str) -> Account | None:
        return await self._get_by(AccountRecord.email == email)

    async def get_by_phone(self, phone: str) -> Account | None:
        return await self._get_by(AccountRecord.phone == phone)

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
        model = AccountRecord(
            username=username,
            email=email,
            password_hash=password_hash,
            phone=phone,
            real_name=real_name,
            nickname=nickname,
            status=status.value,
            role=role.value,
            email_verified=False,
            phone_verified=False,
            login_count=0,
            is_deleted=False,
        )
        self._session.add(model)
        await self._flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_account(self, account_id: str, **changes: Any) -> Account:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        model = await self._get_model(account_id)
        if model is None:
            raise AccountNotFoundError(account_id)

        for name, value in changes.items():
            setattr(model, name, value.value if isinstance(value, Enum) else value)
        model.updated_at = utcnow()

        await self._flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def record_login(self, account_id: str, *, timestamp: datetime, ip: str | None) -> Account | None:
        stmt = (
            update(AccountRecord)
            .where(AccountRecord.id == account_id, AccountRecord.is_deleted.is_(False))
            .values(
                login_count=AccountRecord.login_count + 1,
                last_login_at=_to_utc(timestamp),
                last_login_ip=ip,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None
        return self._to_domain(await self._get_model(account_id, refresh=True))

    async def list_accounts(self, criteria: AccountCriteria) -> Sequence[Account]:
        stmt = self._filtered(select(AccountRecord), criteria).order_by(AccountRecord.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_accounts(self, criteria: AccountCriteria) -> int:
        stmt = self._filtered(select(func.count(AccountRecord.id)), criteria)
        total = (await self._session.execute(stmt)).scalar()
        return int(total or 0)

    async def _get_model(self, account_id: str, refresh: bool = False) -> AccountRecord | None:
        stmt = select(AccountRecord).where(
            AccountRecord.id == account_id,
            AccountRecord.is_deleted.is_(False),
        )
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_by(self, predicate: Any) -> Account | None:
        stmt = select(AccountRecord).where(predicate, AccountRecord.is_deleted.is_(False))
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise conflict_from_integrity_error(exc) from exc

    @staticmethod
    def _filtered(stmt: Select, criteria: AccountCriteria) -> Select:
        stmt = stmt.where(AccountRecord.is_deleted.is_(False))
        if criteria.status is not None:
            stmt = stmt.where(AccountRecord.status == criteria.status.value)
        if criteria.role is not None:
            stmt = stmt.where(AccountRecord.role == criteria.role.value)
        if criteria.keyword:
            stmt = stmt.where(
                or_(
                    AccountRecord.username.icontains(criteria.keyword, autoescape=True),
                    AccountRecord.email.icontains(criteria.keyword, autoescape=True),
                    AccountRecord.real_name.icontains(criteria.keyword, autoescape=True),
                    AccountRecord.nickname.icontains(criteria.keyword, autoescape=True),
                )
            )
        if criteria.created_from is not None:
            stmt = stmt.where(AccountRecord.created_at >= _to_utc(criteria.created_from))
        if criteria.created_to is not None:
            stmt = stmt.where(AccountRecord.created_at < _to_utc(criteria.created_to))
        return stmt

    @staticmethod
    def _to_domain(model: AccountRecord | None) -> Account | None:
        if model is None:
            return None
        return Account(
            id=str(model.id),
            username=model.username,
            email=model.email,
            password_hash=model.password_hash,
            status=AccountStatus(model.status or AccountStatus.NORMAL.value),
            role=AccountRole(model.role or AccountRole.USER.value),
            phone=model.phone,
            real_name=model.real_name,
            nickname=model.nickname,
            avatar_url=model.avatar_url,
            remark=model.remark,
            email_verified=bool(model.email_verified),
            phone_verified=bool(model.phone_verified),
            login_count=int(model.login_count or 0),
            last_login_at=_ensure_aware(model.last_login_at),
            last_login_ip=model.last_login_ip,
            created_at=_ensure_aware(model.created_at),
            updated_at=_ensure_aware(model.updated_at),
            is_deleted=bool(model.is_deleted),
        )
