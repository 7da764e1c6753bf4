"""Shared helpers for pixform: TOML configuration and colour logging."""
