from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.auth_service import AuthService
from ..domain.errors import AuthFlowError, ServerError
from ..infrastructure.repositories.user_repository import SQLiteUserRepository
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import user_router
from ..services.email_service import EmailService
from ..services.password_hasher import PasswordHasher
from ..services.token_service import TokenService

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    email_service: Optional[EmailService] = None,
    auth_service_options: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    """
    Build the ASGI application.

    ``email_service`` and ``auth_service_options`` (extra keyword arguments for
    ``AuthService``, e.g. ``clock``) replace the defaults wired from settings.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Authflow",
        lifespan=_create_lifespan(settings, email_service, auth_service_options or {}),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router)
    app.include_router(user_router.router)
    _register_exception_handlers(app)

    @app.get("/")
    async def health() -> Dict[str, Any]:
        return {"success": True, "message": "API working"}

    return app


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthFlowError)
    async def handle_auth_flow_error(request: Request, exc: AuthFlowError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %r", request.method, request.url.path, exc.__cause__ or exc)
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _envelope(status.HTTP_400_BAD_REQUEST, "Invalid request body.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, ServerError.default_message)


def _create_lifespan(
    settings: Settings,
    email_service: Optional[EmailService],
    auth_service_options: Dict[str, Any],
):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        user_repository = SQLiteUserRepository(settings.database_path)
        token_service = TokenService(
            secret_key=settings.jwt_secret,
            expiration_days=settings.jwt_expiration_days,
        )
        mailer = email_service or EmailService(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username,
            smtp_password=settings.smtp_password,
            from_email=settings.sender_email,
            from_name=settings.sender_name,
        )
        if not mailer.enabled:
            logger.warning("SMTP is not configured; emails will be logged instead of sent.")
        auth_service = AuthService(
            user_repository,
            PasswordHasher(rounds=settings.bcrypt_rounds),
            token_service,
            mailer,
            **auth_service_options,
        )

        app.state.container = ApplicationContainer(  # type: ignore[attr-defined]
            settings=settings,
            user_repository=user_repository,
            token_service=token_service,
            email_service=mailer,
            auth_service=auth_service,
        )
        logger.info("Authflow started (env=%s, database=%s)", settings.app_env, settings.database_path)

        try:
            yield
        finally:
            user_repository.close()

    return lifespan
