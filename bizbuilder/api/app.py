"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bizbuilder import __version__
from bizbuilder.api.dependencies import get_current_user
from bizbuilder.api.exception_handlers import setup_exception_handlers
from bizbuilder.api.routers import builder, business, crm, health, plans, users
from bizbuilder.core.auth import PasswordHasher, TokenService
from bizbuilder.core.config import Settings, get_settings
from bizbuilder.core.database import close_engine, get_engine, get_session_factory
from bizbuilder.core.logging import configure_logging, get_logger
from bizbuilder.core.plans import seed_plans
from bizbuilder.schemas.common import ApiResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    configure_logging()
    settings: Settings = app.state.settings
    logger.info("Starting bizbuilder", env=settings.app_env, debug=settings.app_debug)

    # Warm up DB connection pool
    get_engine()

    await _bootstrap_plans()

    yield

    await close_engine()
    logger.info("bizbuilder stopped")


async def _bootstrap_plans() -> None:
    """Make sure every catalog plan exists so new users can reference it."""
    factory = get_session_factory()
    async with factory() as session:
        added = await seed_plans(session)
        await session.commit()
    if added:
        logger.info("Plan catalog seeded", added=added)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="bizbuilder",
        description="Website builder, CRM and accounts API for small businesses",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Shared components, built once and injected through app.state
    app.state.settings = settings
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService.from_settings(settings)
    app.state.started_at = time.monotonic()

    # Credentialed CORS: cookies carry the tokens
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    api_prefix = "/api"

    # Public (users routes self-guard where needed)
    app.include_router(health.router, prefix=api_prefix)
    app.include_router(plans.router, prefix=api_prefix)
    app.include_router(users.router, prefix=api_prefix)

    # Data routers require a valid session
    _auth = [Depends(get_current_user)]
    app.include_router(business.router, prefix=api_prefix, dependencies=_auth)
    app.include_router(builder.router, prefix=api_prefix, dependencies=_auth)
    app.include_router(crm.router, prefix=api_prefix, dependencies=_auth)

    @app.get("/", include_in_schema=False, response_model=ApiResponse[dict[str, str]])
    async def root() -> ApiResponse[dict[str, str]]:
        return ApiResponse(
            data={"name": "bizbuilder", "version": __version__},
            message="API is running successfully",
        )

    return app
