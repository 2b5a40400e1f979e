"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from userroles import __version__
from userroles.api.v1 import router as v1_router
from userroles.core.config import Settings, get_settings
from userroles.core.database import StorageGateway
from userroles.core.errors import NotFoundError, StorageError, ValidationError
from userroles.repositories import RoleRepository, UserRepository
from userroles.services.directory import DirectoryService

logger = logging.getLogger(__name__)


def build_directory(gateway: StorageGateway) -> DirectoryService:
    """Wire both repositories to the one shared gateway."""
    return DirectoryService(UserRepository(gateway), RoleRepository(gateway))


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def handle_validation_error(_request: Request, exc: ValidationError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_request: Request, exc: NotFoundError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> PlainTextResponse:
        # Already logged with full context where it was raised.
        logger.warning("Request failed: %s %s: %s", request.method, request.url.path, exc.message)
        return PlainTextResponse(
            f"Storage error: {exc.message}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def create_app(
    settings: Settings | None = None,
    gateway: StorageGateway | None = None,
) -> FastAPI:
    """
    Build the application around one StorageGateway.

    The gateway connects lazily on the first request and is closed by the
    shutdown hook.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    if gateway is None:
        gateway = StorageGateway(
            settings.DATABASE_URL,
            seed_demo_data=settings.SEED_DEMO_DATA,
            echo=settings.DEBUG,
        )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        gateway.close()

    app = FastAPI(
        title="User Role Directory API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.directory = build_directory(gateway)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)
    app.include_router(v1_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "User Role Directory API"}

    return app


app = create_app()
