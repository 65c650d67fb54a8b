from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from account_server import __version__
from account_server.core.config import get_settings
from account_server.core.logging import setup_logging
from account_server.infrastructure.database.session import dispose_engine, init_db
from account_server.interfaces.http.errors import register_exception_handlers
from account_server.interfaces.http.routers import create_api_router
from account_server.schemas import HealthResponse

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    setup_logging(settings)

    app = FastAPI(
        title=settings.project_name,
        description="用户账号管理服务",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "account_server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
    )


if __name__ == "__main__":
    run()
