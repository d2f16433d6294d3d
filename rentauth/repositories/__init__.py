"""
Persistence adapters.

Accounts and role grants live in SQL; reset tokens live in Redis. Services
depend on these adapters rather than touching sessions or clients directly.
"""
