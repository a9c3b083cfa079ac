"""Shared helpers and error types."""
