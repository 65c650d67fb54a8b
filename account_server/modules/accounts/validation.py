"""Input rules for account registration and credential changes.

Every rule is a plain predicate so it can be reused outside the registration
flow; :func:`registration_error` chains them in a fixed order and returns the
first failing reason.
"""

from __future__ import annotations

import re
from typing import Optional

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_PATTERN = re.compile(r"^1[3-9]\d{9}$")
PASSWORD_MIN_LENGTH = 6

MSG_REQUIRED_FIELDS = "用户名、密码和邮箱为必填项"
MSG_INVALID_USERNAME = "用户名格式不正确，应为3-20位字母、数字或下划线"
MSG_WEAK_PASSWORD = "密码强度不够，至少6位且包含字母和数字"
MSG_PASSWORD_MISMATCH = "两次输入的密码不一致"
MSG_INVALID_EMAIL = "邮箱格式不正确"
MSG_INVALID_PHONE = "手机号格式不正确"


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def is_valid_username(username: Optional[str]) -> bool:
    return username is not None and USERNAME_PATTERN.fullmatch(username) is not None


def is_strong_password(password: Optional[str]) -> bool:
    if password is None or len(password) < PASSWORD_MIN_LENGTH:
        return False
    has_letter = any(ch.isascii() and ch.isalpha() for ch in password)
    has_digit = any(ch.isascii() and ch.isdigit() for ch in password)
    return has_letter and has_digit


def passwords_match(password: Optional[str], confirm_password: Optional[str]) -> bool:
    if password is None or confirm_password is None:
        return False
    return password == confirm_password


def is_valid_email(email: Optional[str]) -> bool:
    return email is not None and EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_phone(phone: Optional[str]) -> bool:
    """Blank phones are valid, the field is optional."""
    if is_blank(phone):
        return True
    return PHONE_PATTERN.fullmatch(phone) is not None


def registration_error(
    username: Optional[str],
    password: Optional[str],
    email: Optional[str],
    *,
    confirm_password: Optional[str] = None,
    phone: Optional[str] = None,
) -> Optional[str]:
    """Return the first failing reason for a registration candidate, or ``None``.

    The confirmation check only runs when a confirmation was supplied.
    """
    if is_blank(username) or is_blank(password) or is_blank(email):
        return MSG_REQUIRED_FIELDS
    if not is_valid_username(username):
        return MSG_INVALID_USERNAME
    if not is_strong_password(password):
        return MSG_WEAK_PASSWORD
    if confirm_password is not None and not passwords_match(password, confirm_password):
        return MSG_PASSWORD_MISMATCH
    if not is_valid_email(email):
        return MSG_INVALID_EMAIL
    if not is_valid_phone(phone):
        return MSG_INVALID_PHONE
    return None


__all__ = [
    "is_blank",
    "is_valid_username",
    "is_strong_password",
    "passwords_match",
    "is_valid_email",
    "is_valid_phone",
    "registration_error",
    "MSG_REQUIRED_FIELDS",
    "MSG_INVALID_USERNAME",
    "MSG_WEAK_PASSWORD",
    "MSG_PASSWORD_MISMATCH",
    "MSG_INVALID_EMAIL",
    "MSG_INVALID_PHONE",
]
