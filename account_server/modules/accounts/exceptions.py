"""Account domain specific exceptions."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


class AccountError(Exception):
    """Base class for account domain errors."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AccountValidationError(AccountError):
    """Raised when input fails one of the account validation rules."""

    kind = ErrorKind.VALIDATION


class AccountAlreadyExistsError(AccountError):
    """Raised when a username, email or phone already belongs to an active account."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class AccountNotFoundError(AccountError):
    """Raised when the requested account is missing or soft-deleted."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, account_id: str) -> None:
        super().__init__("用户不存在")
        self.account_id = account_id
