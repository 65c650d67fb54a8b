import pytest

from account_server.modules.accounts import validation as rules


@pytest.mark.parametrize(
    "username, expected",
    [
        ("abc", True),
        ("a_b_c_123", True),
        ("a" * 20, True),
        ("ab", False),
        ("a" * 21, False),
        ("bad-name", False),
        ("名字abc", False),
        (None, False),
    ],
)
def test_username_shape(username, expected):
    assert rules.is_valid_username(username) is expected


@pytest.mark.parametrize(
    "password, expected",
    [
        ("abc123", True),
        ("A1b2c3d4", True),
        ("abc12", False),
        ("abcdef", False),
        ("123456", False),
        (None, False),
    ],
)
def test_password_strength(password, expected):
    assert rules.is_strong_password(password) is expected


@pytest.mark.parametrize(
    "email, expected",
    [
        ("a@x.com", True),
        ("first.last+tag@sub.example.org", True),
        ("no-at-sign.com", False),
        ("a@x", False),
        ("a@x.c", False),
        (None, False),
    ],
)
def test_email_shape(email, expected):
    assert rules.is_valid_email(email) is expected


@pytest.mark.parametrize(
    "phone, expected",
    [
        (None, True),
        ("", True),
        ("13900000000", True),
        ("19912345678", True),
        ("12900000000", False),
        ("1390000000", False),
        ("139000000001", False),
        ("1390000000a", False),
    ],
)
def test_phone_shape(phone, expected):
    assert rules.is_valid_phone(phone) is expected


def test_passwords_match_is_independent_of_strength():
    assert rules.passwords_match("weak", "weak")
    assert not rules.passwords_match("abc123", "abc124")
    assert not rules.passwords_match("abc123", None)


def test_registration_error_returns_first_failure_only():
    assert rules.registration_error("ab", "weak", "bad") == rules.MSG_INVALID_USERNAME
    assert rules.registration_error("alice1", "weak", "bad") == rules.MSG_WEAK_PASSWORD
    assert rules.registration_error("alice1", "abc123", "bad", confirm_password="abc999") == rules.MSG_PASSWORD_MISMATCH
    assert rules.registration_error("alice1", "abc123", "bad") == rules.MSG_INVALID_EMAIL
    assert rules.registration_error("alice1", "abc123", "a@x.com", phone="123") == rules.MSG_INVALID_PHONE
    assert rules.registration_error("alice1", "abc123", "a@x.com", confirm_password="abc123") is None
    assert rules.registration_error(None, "abc123", "a@x.com") == rules.MSG_REQUIRED_FIELDS
