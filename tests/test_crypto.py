import pytest

from account_server.core.crypto import hash_password, verify_password


@pytest.mark.parametrize("password", ["abc123", "Passw0rd", "中文密码abc1", "a1" * 20])
def test_hash_verifies_only_the_original_password(password):
    hashed = hash_password(password)

    assert hashed != password
    assert verify_password(password, hashed)
    assert not verify_password(password + "x", hashed)


def test_hashes_are_salted():
    assert hash_password("abc123") != hash_password("abc123")


def test_explicit_rounds_are_encoded_in_hash():
    assert hash_password("abc123", rounds=5).startswith("$2b$05$")


def test_malformed_hash_does_not_verify():
    assert verify_password("abc123", "not-a-bcrypt-hash") is False
