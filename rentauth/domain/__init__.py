"""Domain primitives (roles, derived authorities, caller identity)."""

from .caller import CallerContext
from .roles import UserRole, authorities_for

__all__ = ["CallerContext", "UserRole", "authorities_for"]
