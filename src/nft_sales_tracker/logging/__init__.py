"""Logging setup (structlog, stdlib handlers, Logfire)."""
