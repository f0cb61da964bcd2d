"""
Test configuration package initialization.

Holds the pytest marker registration shared by the whole suite.
"""

from .markers import pytest_collection_modifyitems, pytest_configure

__all__ = [
    "pytest_configure",
    "pytest_collection_modifyitems",
]
