"""
High-level use cases for the account service.

Each service module orchestrates repositories/adapters to implement business
rules (register, change password, reset by token, resolve the caller).

Routers (FastAPI endpoints) call these services instead of touching the SQL
session or the Redis client directly.
"""
