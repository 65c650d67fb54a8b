"""HTTP routers."""

from fastapi import APIRouter

from . import users


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(users.router, prefix="/users", tags=["用户"])
    return router


__all__ = ["create_api_router"]
