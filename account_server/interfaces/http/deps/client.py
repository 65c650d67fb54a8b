"""Client origin resolution."""

from typing import Optional

from fastapi import Request

_UNKNOWN = "unknown"


def _usable(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == _UNKNOWN:
        return None
    return value


def get_client_ip(request: Request) -> Optional[str]:
    """Resolve the caller address: X-Forwarded-For (first hop), then X-Real-IP, then the socket peer."""
    forwarded = _usable(request.headers.get("x-forwarded-for"))
    if forwarded is not None:
        first_hop = _usable(forwarded.split(",")[0])
        if first_hop is not None:
            return first_hop

    real_ip = _usable(request.headers.get("x-real-ip"))
    if real_ip is not None:
        return real_ip

    return request.client.host if request.client else None


__all__ = ["get_client_ip"]
