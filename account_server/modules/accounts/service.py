"""Domain services for account management."""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Any, Callable, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from account_server.core.crypto import hash_password, verify_password

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError, AccountValidationError
from .models import (
    Account,
    AccountCriteria,
    AccountProfileUpdate,
    AccountRegisterInput,
    AccountRole,
    AccountStatistics,
    AccountStatus,
)
from .repository import AccountRepository
from .validation import MSG_INVALID_PHONE, is_blank, is_valid_phone, registration_error

logger = logging.getLogger(__name__)

_PROFILE_TEXT_FIELDS = ("real_name", "nickname", "avatar_url", "remark")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def local_day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Return the server-local calendar day containing ``now`` as a UTC half-open window."""
    # 两端各自按当地日期取零点，跨夏令时切换的一天可能是23或25小时
    today = now.astimezone().date()
    start = datetime.combine(today, time()).astimezone()
    end = datetime.combine(today + timedelta(days=1), time()).astimezone()
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def _clean(value: Optional[str]) -> Optional[str]:
    return None if is_blank(value) else value.strip()


class AccountService:
    """Encapsulates the account lifecycle use cases."""

    def __init__(
        self,
        repository: AccountRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repository = repository
        self._clock = clock

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        # 延迟导入，避免与仓储实现循环依赖
        from account_server.infrastructure.database.repositories.account_repository import SqlAccountRepository

        return cls(SqlAccountRepository(session))

    # ------------------------------------------------------------------ lookups

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._repository.get_by_id(account_id)

    async def get_by_username(self, username: str) -> Account | None:
        return await self._repository.get_by_username(username)

    async def get_by_email(self, email: str) -> Account | None:
        return await self._repository.get_by_email(email)

    async def username_exists(self, username: str) -> bool:
        return await self._repository.get_by_username(username) is not None

    async def email_exists(self, email: str) -> bool:
        return await self._repository.get_by_email(email) is not None

    async def phone_exists(self, phone: Optional[str]) -> bool:
        if is_blank(phone):
            return False
        return await self._repository.get_by_phone(phone.strip()) is not None

    async def list_accounts(
        self,
        *,
        status: AccountStatus | None = None,
        role: AccountRole | None = None,
    ) -> Sequence[Account]:
        return await self._repository.list_accounts(AccountCriteria(status=status, role=role))

    async def search(self, keyword: Optional[str]) -> Sequence[Account]:
        return await self._repository.list_accounts(AccountCriteria(keyword=_clean(keyword)))

    async def list_registered_between(self, start: datetime, end: datetime) -> Sequence[Account]:
        return await self._repository.list_accounts(AccountCriteria(created_from=start, created_to=end))

    async def statistics(self) -> AccountStatistics:
        day_start, day_end = local_day_bounds(self._clock())
        total = await self._repository.count_accounts(AccountCriteria())
        active = await self._repository.count_accounts(AccountCriteria(status=AccountStatus.NORMAL))
        today = await self._repository.count_accounts(
            AccountCriteria(created_from=day_start, created_to=day_end)
        )
        return AccountStatistics(total_users=total, active_users=active, today_registrations=today)

    # ------------------------------------------------------------ registration

    async def register(self, payload: AccountRegisterInput) -> Account:
        reason = registration_error(
            payload.username,
            payload.password,
            payload.email,
            confirm_password=payload.confirm_password,
            phone=payload.phone,
        )
        if reason is not None:
            raise AccountValidationError(reason)

        logger.info("Registering account %s", payload.username)
        phone = _clean(payload.phone)
        if await self.username_exists(payload.username):
            raise AccountAlreadyExistsError("用户名已存在", field="username")
        if await self.email_exists(payload.email):
            raise AccountAlreadyExistsError("邮箱已存在", field="email")
        if phone is not None and await self.phone_exists(phone):
            raise AccountAlreadyExistsError("手机号已存在", field="phone")

        account = await self._repository.create_account(
            username=payload.username,
            email=payload.email,
            password_hash=hash_password(payload.password),
            phone=phone,
            real_name=_clean(payload.real_name),
            nickname=_clean(payload.nickname),
            status=AccountStatus.NORMAL,
            role=AccountRole.USER,
        )
        logger.info("Account registered: %s (%s)", account.username, account.id)
        return account

    # ---------------------------------------------------------- authentication

    async def authenticate(self, identifier: Optional[str], password: Optional[str]) -> Account | None:
        if is_blank(identifier) or password is None:
            return None

        account = await self._repository.get_by_username(identifier)
        if account is None:
            account = await self._repository.get_by_email(identifier)
        if account is None:
            logger.warning("Login failed, unknown account: %s", identifier)
            return None
        if not account.can_login():
            logger.warning("Login failed, account %s has status %s", identifier, account.status.value)
            return None
        if not verify_password(password, account.password_hash):
            logger.warning("Login failed, wrong password: %s", identifier)
            return None

        logger.info("Account %s authenticated", account.username)
        return account

    async def record_login(self, account_id: str, origin_ip: Optional[str]) -> Account | None:
        account = await self._repository.record_login(account_id, timestamp=self._clock(), ip=origin_ip)
        if account is not None:
            logger.info("Recorded login for %s from %s", account_id, origin_ip)
        return account

    # ------------------------------------------------------------------ profile

    async def update_profile(self, account_id: str, patch: AccountProfileUpdate) -> Account:
        current = await self._require(account_id)

        changes: dict[str, Any] = {}
        for name in _PROFILE_TEXT_FIELDS:
            value = getattr(patch, name)
            if not is_blank(value):
                changes[name] = value

        phone = _clean(patch.phone)
        if phone is not None:
            if not is_valid_phone(phone):
                raise AccountValidationError(MSG_INVALID_PHONE)
            owner = await self._repository.get_by_phone(phone)
            if owner is not None and owner.id != current.id:
                raise AccountAlreadyExistsError("手机号已被其他用户使用", field="phone")
            if phone != current.phone:
                changes["phone"] = phone
                changes["phone_verified"] = False

        if not changes:
            return current

        logger.info("Updating profile of %s: %s", account_id, sorted(changes))
        return await self._repository.update_account(account_id, **changes)

    # ---------------------------------------------------------------- passwords

    async def change_password(self, account_id: str, old_password: str, new_password: str) -> bool:
        account = await self._repository.get_by_id(account_id)
        if account is None:
            logger.warning("Password change failed, account %s not found", account_id)
            return False
        if not verify_password(old_password, account.password_hash):
            logger.warning("Password change failed, wrong old password for %s", account_id)
            return False

        await self._repository.update_account(account_id, password_hash=hash_password(new_password))
        logger.info("Password changed for %s", account_id)
        return True

    async def reset_password(self, account_id: str, new_password: str) -> bool:
        account = await self._repository.get_by_id(account_id)
        if account is None:
            logger.warning("Password reset failed, account %s not found", account_id)
            return False

        await self._repository.update_account(account_id, password_hash=hash_password(new_password))
        logger.info("Password reset for %s", account_id)
        return True

    # -------------------------------------------------------------- transitions

    async def set_status(self, account_id: str, status: AccountStatus) -> Account:
        return await self._transition(account_id, f"status -> {status.value}", status=status)

    async def assign_role(self, account_id: str, role: AccountRole) -> Account:
        return await self._transition(account_id, f"role -> {role.value}", role=role)

    async def verify_email(self, account_id: str) -> Account:
        return await self._transition(account_id, "email verified", email_verified=True)

    async def verify_phone(self, account_id: str) -> Account:
        return await self._transition(account_id, "phone verified", phone_verified=True)

    async def soft_delete(self, account_id: str) -> None:
        await self._transition(account_id, "soft delete", is_deleted=True)

    async def _transition(self, account_id: str, action: str, **changes: Any) -> Account:
        await self._require(account_id)
        account = await self._repository.update_account(account_id, **changes)
        logger.info("Account %s: %s", account_id, action)
        return account

    async def _require(self, account_id: str) -> Account:
        account = await self._repository.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account
