from __future__ import annotations

import sys
from pathlib import Path

import pytest
from redis.exceptions import ResponseError

# Make the rentauth package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rentauth.core import config as core_config  # noqa: E402
from rentauth.db import models  # noqa: E402
from rentauth.db import session as db_session  # noqa: E402
from rentauth.repositories.sql_repository import SQLRepository  # noqa: E402
from rentauth.repositories.token_store import RedisTokenStore  # noqa: E402
from rentauth.services.account_service import AccountService  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the handful of Redis commands the token store uses.

    Time only moves when a test calls ``advance``.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._data: dict[str, tuple[str, float | None]] = {}

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def set(self, name, value, ex=None):
        if ex is not None and ex <= 0:
            raise ResponseError("invalid expire time in 'set' command")
        expires = self.now + ex if ex else None
        self._data[name] = (str(value), expires)
        return True

    def get(self, name):
        item = self._data.get(name)
        if item is None:
            return None
        value, expires = item
        if expires is not None and self.now >= expires:
            del self._data[name]
            return None
        return value

    def delete(self, *names):
        return sum(1 for name in names if self._data.pop(name, None) is not None)

    def keys(self):
        return [name for name in list(self._data) if self.get(name) is not None]


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.delenv("PASSWORD_RESET_TTL", raising=False)
    monkeypatch.delenv("DEFAULT_NICK_NAME_PREFIX", raising=False)
    monkeypatch.delenv("SESSION_TTL_SECONDS", raising=False)
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def repo(db_env) -> SQLRepository:
    return SQLRepository()


@pytest.fixture()
def service(repo, fake_redis) -> AccountService:
    return AccountService(repository=repo, token_store=RedisTokenStore(fake_redis))
