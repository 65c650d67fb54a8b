"""Account domain services and models."""

from .models import (
    Account,
    AccountCriteria,
    AccountProfileUpdate,
    AccountRegisterInput,
    AccountRole,
    AccountStatistics,
    AccountStatus,
)
from .exceptions import (
    AccountError,
    AccountAlreadyExistsError,
    AccountNotFoundError,
    AccountValidationError,
    ErrorKind,
)
from .repository import AccountRepository
from .service import AccountService

__all__ = [
    "Account",
    "AccountCriteria",
    "AccountProfileUpdate",
    "AccountRegisterInput",
    "AccountRole",
    "AccountStatistics",
    "AccountStatus",
    "AccountService",
    "AccountRepository",
    "AccountError",
    "AccountAlreadyExistsError",
    "AccountNotFoundError",
    "AccountValidationError",
    "ErrorKind",
]
