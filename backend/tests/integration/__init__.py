"""
Integration tests package.

Runs report generation against an in-memory SQLite database, both
directly and through the Flask endpoint.
"""
