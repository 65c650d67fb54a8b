"""Utilities for password hashing and verification."""

from __future__ import annotations

from typing import Optional

import bcrypt

from account_server.core.config import get_settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash plain text password using bcrypt."""
    cost = rounds if rounds is not None else get_settings().security.bcrypt_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


__all__ = ["hash_password", "verify_password"]
