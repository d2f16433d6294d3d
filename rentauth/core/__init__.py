"""
Core utilities shared across the account service.

- configuration helpers (env vars, token and session lifetimes)
- credential hashing
- logging setup
"""
