"""Reusable FastAPI dependencies."""

from .database import get_db_session
from .account import get_account_repository, get_account_service
from .client import get_client_ip

__all__ = [
    "get_db_session",
    "get_account_repository",
    "get_account_service",
    "get_client_ip",
]
