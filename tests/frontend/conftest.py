"""
Pytest fixtures for frontend/Flask tests.
"""

import os

import pytest

# Config reads the environment at import time, so set it before importing the app
os.environ["FLASK_SECRET_KEY"] = "test-secret-key"
os.environ["FLASK_ENV"] = "testing"
os.environ["AUTH_SECRET"] = "test-auth-secret"
os.environ["MONGODB_URI"] = "mongodb://localhost:27017/jobs_test"

from helpers.memory_repository import InMemoryJobRepository


@pytest.fixture
def app():
    """Flask app fixture with test configuration."""
    from frontend.app import app
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def authenticated_client(client):
    """Flask test client with authenticated session."""
    with client.session_transaction() as sess:
        sess["authenticated"] = True
    return client


@pytest.fixture
def repo(mocker):
    """
    In-memory repository served to every route via frontend.app._get_repo.
    """
    repository = InMemoryJobRepository()
    mocker.patch("frontend.app._get_repo", return_value=repository)
    return repository
