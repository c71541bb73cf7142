"""
Integration tests package.

Repositories and smoke checks run against in-memory SQLite.
"""
