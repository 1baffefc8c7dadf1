"""
Global fixtures for all unit tests.

These autouse fixtures keep unit tests off real infrastructure:
- Environment variable isolation (no real MongoDB URI or secrets leak in)
- Repository singleton reset between tests

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import pytest

from src.common.repositories import reset_repository


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.

    MONGODB_URI is removed so nothing can reach a live cluster by accident;
    tests that need it set it explicitly.
    """
    monkeypatch.delenv("MONGODB_URI", raising=False)
    monkeypatch.delenv("MONGODB_DATABASE", raising=False)
    monkeypatch.delenv("MONGODB_COLLECTION", raising=False)
    monkeypatch.setenv("AUTH_SECRET", "test-auth-secret")


@pytest.fixture(autouse=True)
def reset_repository_singleton():
    """Each test starts and ends without a cached repository."""
    reset_repository()
    yield
    reset_repository()
