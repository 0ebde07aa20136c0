"""Core infrastructure: configuration, errors, shared state and database."""
