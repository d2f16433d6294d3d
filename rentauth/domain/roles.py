from __future__ import annotations

from enum import Enum

AUTHORITY_PREFIX = "ROLE_"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    TENANT = "TENANT"
    LANDLORD = "LANDLORD"

    @property
    def authority(self) -> str:
        return f"{AUTHORITY_PREFIX}{self.value}"

    @classmethod
    def parse(cls, name: str) -> "UserRole":
        """Resolve a stored or submitted role name (case-insensitive)."""
        return cls((name or "").strip().upper())


SELF_SERVICE_ROLES = (UserRole.TENANT, UserRole.LANDLORD)


def authorities_for(role_names) -> frozenset[str]:
    return frozenset(UserRole.parse(name).authority for name in role_names)
