"""Pydantic schemas used across the project.

Request bodies keep every field optional so that missing values reach the
domain validation chain and come back as the service's own 400 message
instead of a framework 422.
"""
from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from account_server.modules.accounts import AccountRole, AccountStatus

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    real_name: Optional[str] = None
    nickname: Optional[str] = None


class LoginRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdateRequest(CamelModel):
    real_name: Optional[str] = None
    nickname: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    remark: Optional[str] = None


class PasswordChangeRequest(CamelModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class AccountResponse(CamelModel):
    """Outward view of an account; the password hash is deliberately absent."""

    id: str
    username: str
    email: str
    phone: Optional[str] = None
    real_name: Optional[str] = None
    nickname: Optional[str] = None
    avatar_url: Optional[str] = None
    remark: Optional[str] = None
    status: AccountStatus
    role: AccountRole
    email_verified: bool
    phone_verified: bool
    login_count: int
    last_login_at: Optional[datetime] = None
    last_login_ip: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class StatisticsResponse(CamelModel):
    total_users: int
    active_users: int
    today_registrations: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class ListResponse(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: list[T] = Field(default_factory=list)
    total: int = 0


class ErrorResponse(CamelModel):
    success: bool = False
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
