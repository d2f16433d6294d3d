#!/usr/bin/env python3
"""
Provision an admin account directly in the database.

The account is created without a password; the operator sets one later through
the reset-token flow (``--issue-reset-token`` prints a token for that).

Usage:
  python scripts/create_admin.py --phone 13800000000 [--issue-reset-token]
"""
from __future__ import annotations

import argparse
import sys

from rentauth.core.config import get_settings
from rentauth.core.logging_setup import configure_logging
from rentauth.services.account_service import AccountError, AccountService


def main() -> None:
    ap = argparse.ArgumentParser(description="Provision an admin account")
    ap.add_argument("--phone", required=True, help="Phone number of the new admin")
    ap.add_argument(
        "--issue-reset-token",
        action="store_true",
        help="Also issue a password reset token so the admin can set a password",
    )
    args = ap.parse_args()

    configure_logging(get_settings())
    service = AccountService()
    try:
        info = service.create_admin_by_phone(args.phone)
    except AccountError as exc:
        raise SystemExit(f"Error: {exc.message}")
    print("OK: admin account created")
    print(f"  ID: {info.id}")
    print(f"  Phone: {info.phone_number}")
    print(f"  Nickname: {info.nick_name}")
    print(f"  Authorities: {', '.join(sorted(info.authorities))}")
    if args.issue_reset_token:
        token = service.generate_reset_token(info.phone_number)
        print(f"  Reset token (valid {service.settings.password_reset_ttl}s): {token}")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
