"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from rentauth.db.models import Account, Role
from rentauth.db.session import get_session


class SQLRepository:
    """CRUD helpers for accounts and role grants.

    A repository created without a session opens and commits one session per
    call. ``transaction()`` yields a repository bound to a single session, so
    every write made through it commits or rolls back together.
    """

    def __init__(self, session: Optional[Session] = None) -> None:
        self._session = session

    @contextmanager
    def transaction(self) -> Iterator["SQLRepository"]:
        if self._session is not None:
            yield self
            return
        with get_session() as session:
            try:
                yield SQLRepository(session)
                session.commit()
            except Exception:
                session.rollback()
                raise

    @contextmanager
    def _scope(self) -> Iterator[Session]:
        if self._session is not None:
            yield self._session
            self._session.flush()
            return
        with get_session() as session:
            yield session
            session.commit()

    # -------------------------- accounts --------------------------
    def get_account(self, account_id: int) -> Optional[Account]:
        with self._scope() as session:
            return session.get(Account, account_id)

    def get_account_by_phone(self, phone_number: str) -> Optional[Account]:
        with self._scope() as session:
            stmt = select(Account).where(Account.phone_number == phone_number)
            return session.execute(stmt).scalar_one_or_none()

    def get_account_by_nick_name(self, nick_name: str) -> Optional[Account]:
        with self._scope() as session:
            stmt = select(Account).where(Account.nick_name == nick_name)
            return session.execute(stmt).scalar_one_or_none()

    def save_account(self, account: Account) -> Account:
        """Insert or update an account; the id is assigned on insert."""
        with self._scope() as session:
            account.updated_at = datetime.now(timezone.utc)
            merged = session.merge(account)
            session.flush()
            return merged

    def update_password_hash(self, account_id: int, password_hash: str) -> None:
        with self._scope() as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)

    def update_avatar(self, account_id: int, avatar: str | None) -> None:
        with self._scope() as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(avatar=avatar, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)

    # -------------------------- roles --------------------------
    def save_roles(self, roles: Iterable[Role]) -> list[Role]:
        items = list(roles)
        with self._scope() as session:
            session.add_all(items)
            session.flush()
        return items

    def save_role(self, role: Role) -> Role:
        return self.save_roles([role])[0]

    def get_roles(self, account_id: int) -> list[Role]:
        with self._scope() as session:
            stmt = select(Role).where(Role.account_id == account_id).order_by(Role.id)
            return list(session.execute(stmt).scalars().all())
