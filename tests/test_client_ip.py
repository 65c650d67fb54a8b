from typing import Optional

import pytest
from starlette.requests import Request

from account_server.interfaces.http.deps import get_client_ip


def _request(headers: dict[str, str], peer: Optional[tuple[str, int]] = ("192.168.1.5", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/users/login",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": peer,
    }
    return Request(scope)


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"X-Forwarded-For": "10.0.0.1, 10.0.0.2"}, "10.0.0.1"),
        ({"X-Forwarded-For": " 10.0.0.7 ", "X-Real-IP": "10.9.9.9"}, "10.0.0.7"),
        ({"X-Forwarded-For": "unknown", "X-Real-IP": "10.9.9.9"}, "10.9.9.9"),
        ({"X-Forwarded-For": "", "X-Real-IP": "UNKNOWN"}, "192.168.1.5"),
        ({"X-Real-IP": "10.9.9.9"}, "10.9.9.9"),
        ({}, "192.168.1.5"),
    ],
)
def test_client_ip_resolution_order(headers, expected):
    assert get_client_ip(_request(headers)) == expected


def test_client_ip_without_peer():
    assert get_client_ip(_request({}, peer=None)) is None
