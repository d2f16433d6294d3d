"""Session helpers (issue tokens, cookies, caller resolution)."""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, Request, Response

from rentauth.core.config import get_settings
from rentauth.db.models import UserSession
from rentauth.db.session import get_session
from rentauth.domain.caller import CallerContext

SESSION_COOKIE_NAME = "session"
MIN_SESSION_TTL_SECONDS = 60


def session_ttl_seconds() -> int:
    return max(MIN_SESSION_TTL_SECONDS, get_settings().session_ttl_seconds)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def issue_session(account_id: int) -> str:
    """Create a new session token for the account and persist it."""
    token = secrets.token_urlsafe(32)
    ttl = session_ttl_seconds()
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)

    with get_session() as session:
        session.add(UserSession(token=token, account_id=account_id, expires_at=expires_at))
        session.commit()
    return token


def current_account_id(token: str | None) -> int | None:
    """Return the account id bound to a session token, if it is still valid."""
    if not token:
        return None

    now = datetime.now(timezone.utc)
    with get_session() as session:
        db_session = session.get(UserSession, token)
        if db_session:
            if db_session.expires_at and _aware(db_session.expires_at) < now:
                session.delete(db_session)
                session.commit()
                return None
            return db_session.account_id

    return None


def delete_session(token: str | None) -> None:
    """Remove a session token from the store."""
    if not token:
        return
    with get_session() as session:
        entity = session.get(UserSession, token)
        if entity:
            session.delete(entity)
            session.commit()


def session_token(request: Request) -> str | None:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token
    auth = request.headers.get("authorization") or ""
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def require_caller(request: Request) -> CallerContext:
    """FastAPI dependency resolving the authenticated caller or failing with 401."""
    account_id = current_account_id(session_token(request))
    if account_id is None:
        raise HTTPException(401, "Authentication required")
    return CallerContext(account_id=account_id)


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    secure_cookie = settings.app_env == "prod"
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=secure_cookie,
        samesite="strict",
        max_age=session_ttl_seconds(),
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
