"""
Account lifecycle use cases: registration, profile updates, password changes
and the reset-by-token flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
import logging
import uuid

from sqlalchemy.exc import IntegrityError

from rentauth.core.config import get_settings
from rentauth.core.security import hash_password, password_is_set, verify_password
from rentauth.db.models import Account, Role
from rentauth.domain.caller import CallerContext
from rentauth.domain.roles import UserRole, authorities_for
from rentauth.repositories.sql_repository import SQLRepository
from rentauth.repositories.token_store import RedisTokenStore

logger = logging.getLogger(__name__)

RESET_PASSWORD_TOKEN_PREFIX = "RESET:PASSWORD:TOKEN:"


class AccountError(Exception):
    """Base class for expected, caller-recoverable account failures."""

    code = "account_error"
    status_code = 400
    default_message = "Account operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class DuplicatePhoneError(AccountError):
    code = "duplicate_phone"
    status_code = 409
    default_message = "Phone number is already registered"


class AccountNotFoundError(AccountError):
    code = "account_not_found"
    status_code = 404
    default_message = "Account not found"


class OriginalPasswordEmptyError(AccountError):
    code = "original_password_empty"
    default_message = "Original password is required"


class OriginalPasswordIncorrectError(AccountError):
    code = "original_password_incorrect"
    default_message = "Original password is incorrect"


class InvalidResetTokenError(AccountError):
    code = "invalid_reset_token"
    default_message = "Reset token is invalid or expired"


class ValidationFailedError(AccountError):
    code = "validation_failed"


class InvalidCredentialsError(AccountError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid phone number or password"


@dataclass
class AccountInfo:
    id: int
    phone_number: str
    name: str
    nick_name: str
    avatar: Optional[str]
    introduction: Optional[str]
    has_password: bool
    authorities: frozenset[str]


@dataclass
class AccountService:
    """Orchestrates the account store, role store and reset token store."""

    repository: Optional[SQLRepository] = None
    token_store: Optional[RedisTokenStore] = None

    def __post_init__(self):
        self.settings = get_settings()
        if self.repository is None:
            self.repository = SQLRepository()
        if self.token_store is None:
            self.token_store = RedisTokenStore.from_url(self.settings.redis_url)

    # -------------------------------------- helpers --------------------------------------
    def _require_phone(self, phone: str) -> str:
        value = (phone or "").strip()
        if not value:
            raise ValidationFailedError("Phone number is required")
        return value

    def _require_password(self, password: str) -> str:
        if not (password or "").strip():
            raise ValidationFailedError("Password is required")
        return password

    def _default_nick_name(self, phone: str) -> str:
        return f"{self.settings.default_nick_name_prefix}{phone}"

    def _to_info(self, account: Account, role_names: Iterable[str]) -> AccountInfo:
        return AccountInfo(
            id=account.id,
            phone_number=account.phone_number,
            name=account.name,
            nick_name=account.nick_name,
            avatar=account.avatar,
            introduction=account.introduction,
            has_password=password_is_set(account.password_hash),
            authorities=authorities_for(role_names),
        )

    def _info(self, account: Optional[Account]) -> Optional[AccountInfo]:
        if not account:
            return None
        return self._to_info(account, [role.name for role in self.repository.get_roles(account.id)])

    def _create_with_roles(self, phone: str, password: Optional[str], roles: list[UserRole]) -> AccountInfo:
        if self.repository.get_account_by_phone(phone):
            raise DuplicatePhoneError()
        password_hash = hash_password(password) if password is not None else None
        nick_name = self._default_nick_name(phone)
        try:
            with self.repository.transaction() as repo:
                account = repo.save_account(
                    Account(phone_number=phone, name=nick_name, nick_name=nick_name, password_hash=password_hash)
                )
                saved = repo.save_roles([Role(account_id=account.id, name=role.value) for role in roles])
        except IntegrityError as exc:
            # A concurrent insert won the unique constraint race.
            if self.repository.get_account_by_phone(phone):
                raise DuplicatePhoneError() from exc
            raise ValidationFailedError("Nickname is already in use") from exc
        return self._to_info(account, [role.name for role in saved])

    # -------------------------------------- queries --------------------------------------
    def find_by_id(self, account_id: int) -> Optional[AccountInfo]:
        return self._info(self.repository.get_account(account_id))

    def find_by_phone_number(self, phone: str) -> Optional[AccountInfo]:
        return self._info(self.repository.get_account_by_phone((phone or "").strip()))

    def find_by_nick_name(self, nick_name: str) -> Optional[AccountInfo]:
        return self._info(self.repository.get_account_by_nick_name((nick_name or "").strip()))

    # -------------------------------------- registration --------------------------------------
    def register_by_phone(self, phone: str, password: str, roles: Iterable[UserRole | str]) -> AccountInfo:
        phone = self._require_phone(phone)
        password = self._require_password(password)
        try:
            role_list = [UserRole.parse(role) for role in roles]
        except ValueError as exc:
            raise ValidationFailedError("Unknown role") from exc
        info = self._create_with_roles(phone, password, role_list)
        logger.info("Registered account %s (phone %s) with %s", info.id, phone, sorted(info.authorities))
        return info

    def create_admin_by_phone(self, phone: str) -> AccountInfo:
        """Provision an ADMIN account with no password; one is set later via change or reset."""
        phone = self._require_phone(phone)
        info = self._create_with_roles(phone, None, [UserRole.ADMIN])
        logger.info("Provisioned admin account %s (phone %s)", info.id, phone)
        return info

    def authenticate(self, phone: str, password: str) -> AccountInfo:
        account = self.repository.get_account_by_phone((phone or "").strip())
        if not account or not verify_password(password, account.password_hash):
            raise InvalidCredentialsError()
        return self._info(account)

    # -------------------------------------- profile --------------------------------------
    def update_profile(
        self,
        account_id: int,
        *,
        nick_name: str,
        avatar: Optional[str] = None,
        introduction: Optional[str] = None,
    ) -> AccountInfo:
        nick_name = (nick_name or "").strip()
        if not nick_name:
            raise ValidationFailedError("Nickname is required")
        try:
            with self.repository.transaction() as repo:
                account = repo.get_account(account_id)
                if not account:
                    raise AccountNotFoundError()
                # Default nicknames stay reserved for the phones they are derived from.
                prefix = self.settings.default_nick_name_prefix
                if prefix and nick_name != account.nick_name and nick_name.startswith(prefix):
                    raise ValidationFailedError("Nickname prefix is reserved")
                holder = repo.get_account_by_nick_name(nick_name)
                if holder and holder.id != account.id:
                    raise ValidationFailedError("Nickname is already in use")
                account.nick_name = nick_name
                account.avatar = avatar
                account.introduction = introduction
                account = repo.save_account(account)
                role_names = [role.name for role in repo.get_roles(account.id)]
        except IntegrityError as exc:
            raise ValidationFailedError("Nickname is already in use") from exc
        return self._to_info(account, role_names)

    def update_avatar(self, caller: CallerContext, avatar: Optional[str]) -> None:
        self.repository.update_avatar(caller.account_id, avatar)

    # -------------------------------------- passwords --------------------------------------
    def change_password(self, caller: CallerContext, old_password: str, new_password: str) -> None:
        new_password = self._require_password(new_password)
        account = self.repository.get_account(caller.account_id)
        if not account:
            raise AccountNotFoundError()
        if password_is_set(account.password_hash):
            if not (old_password or "").strip():
                raise OriginalPasswordEmptyError()
            if not verify_password(old_password, account.password_hash):
                raise OriginalPasswordIncorrectError()
        self.repository.update_password_hash(account.id, hash_password(new_password))
        logger.info("Password changed for account %s", account.id)

    # -------------------------------------- password reset --------------------------------------
    def generate_reset_token(self, phone: str) -> str:
        phone = self._require_phone(phone)
        account = self.repository.get_account_by_phone(phone)
        if not account:
            raise AccountNotFoundError()
        # Earlier tokens for this phone stay valid until they expire.
        token = str(uuid.uuid4())
        self.token_store.set(RESET_PASSWORD_TOKEN_PREFIX + token, phone, self.settings.password_reset_ttl)
        logger.info("Issued password reset token for account %s", account.id)
        return token

    def reset_password_by_token(self, new_password: str, token: str) -> None:
        new_password = self._require_password(new_password)
        token = (token or "").strip()
        if not token:
            raise InvalidResetTokenError()
        key = RESET_PASSWORD_TOKEN_PREFIX + token
        phone = self.token_store.get(key)
        # Burned on lookup, whatever happens next.
        self.token_store.delete(key)
        if not phone:
            logger.info("Rejected unknown or expired password reset token")
            raise InvalidResetTokenError()
        account = self.repository.get_account_by_phone(phone)
        if not account:
            raise AccountNotFoundError()
        self.repository.update_password_hash(account.id, hash_password(new_password))
        logger.info("Password reset by token for account %s", account.id)
