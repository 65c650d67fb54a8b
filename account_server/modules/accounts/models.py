"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class AccountStatus(str, Enum):
    DISABLED = "disabled"
    NORMAL = "normal"
    LOCKED = "locked"


class AccountRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


@dataclass(slots=True)
class Account:
    id: str
    username: str
    email: str
    password_hash: str = field(repr=False)
    status: AccountStatus = AccountStatus.NORMAL
    role: AccountRole = AccountRole.USER
    phone: Optional[str] = None
    real_name: Optional[str] = None
    nickname: Optional[str] = None
    avatar_url: Optional[str] = None
    remark: Optional[str] = None
    email_verified: bool = False
    phone_verified: bool = False
    login_count: int = 0
    last_login_at: Optional[datetime] = None
    last_login_ip: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_deleted: bool = False

    def is_admin(self) -> bool:
        return self.role in {AccountRole.ADMIN, AccountRole.SUPER_ADMIN}

    def is_super_admin(self) -> bool:
        return self.role == AccountRole.SUPER_ADMIN

    def can_login(self) -> bool:
        return self.status == AccountStatus.NORMAL and not self.is_deleted


@dataclass(slots=True)
class AccountRegisterInput:
    username: Optional[str]
    password: Optional[str]
    email: Optional[str]
    confirm_password: Optional[str] = None
    phone: Optional[str] = None
    real_name: Optional[str] = None
    nickname: Optional[str] = None


@dataclass(slots=True)
class AccountProfileUpdate:
    """Partial profile patch; ``None`` or blank values keep the current value."""

    real_name: Optional[str] = None
    nickname: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    remark: Optional[str] = None


@dataclass(slots=True)
class AccountCriteria:
    """Query filter for listing and counting; deleted accounts are always excluded."""

    status: Optional[AccountStatus] = None
    role: Optional[AccountRole] = None
    keyword: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


@dataclass(slots=True)
class AccountStatistics:
    total_users: int
    active_users: int
    today_registrations: int
