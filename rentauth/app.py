"""FastAPI application exposing the account service."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rentauth.core.config import get_settings
from rentauth.core.logging_setup import configure_logging
from rentauth.repositories.token_store import TokenStoreError
from rentauth.routers import auth as auth_router
from rentauth.routers import users as users_router
from rentauth.services.account_service import AccountError, AccountService, ValidationFailedError

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse({"code": code, "message": message}, status_code=status_code)


async def _account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    return _error(exc.status_code, exc.code, exc.message)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in err.get("loc", ()) if part != "body") for err in exc.errors()]
    named = [f for f in fields if f]
    message = ("Invalid fields: " + ", ".join(named)) if named else "Invalid request"
    return _error(400, ValidationFailedError.code, message)


async def _token_store_error_handler(request: Request, exc: TokenStoreError) -> JSONResponse:
    logger.error("Token store unavailable: %s", exc)
    return _error(503, "token_store_unavailable", "Service temporarily unavailable")


def create_app(account_service: Optional[AccountService] = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn rentauth.app:create_app --factory``)."""
    settings = get_settings()
    configure_logging(settings)
    app = FastAPI(title="Rent House Account API")
    app.state.account_service = account_service or AccountService()
    app.add_exception_handler(AccountError, _account_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(TokenStoreError, _token_store_error_handler)
    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    return app
