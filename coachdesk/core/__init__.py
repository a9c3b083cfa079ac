"""Core configuration, database and security primitives."""
