from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CallerContext:
    """Identity of the authenticated account a request acts for."""

    account_id: int
