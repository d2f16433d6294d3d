"""Account credential lifecycle service (registration, passwords, roles, reset tokens)."""
