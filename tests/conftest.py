"""
This module contains pytest fixtures and configuration for testing.
"""
from unittest.mock import MagicMock
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add the project's root directory to the system path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

# Import the main app
from main import app
from portal.auth.session import AUTH_COOKIE_MARKER, AUTH_COOKIE_NAME
from portal.products.services import ProductStore, get_product_store


@pytest.fixture(autouse=True)
def portal_env(monkeypatch):
    """
    Known credentials and a non-production profile for every test.
    """
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("ADMIN_USER", "pricing-admin")
    monkeypatch.setenv("ADMIN_PASS", "s3cret-pass")
    monkeypatch.delenv("FIREBASE_CREDENTIALS_JSON_CONTENT", raising=False)
    monkeypatch.delenv("FIREBASE_CREDENTIALS_FILE", raising=False)
    monkeypatch.setenv("EXPORT_TIMEZONE", "UTC")


@pytest.fixture
def mock_firestore():
    """
    A stand-in for the Firestore client handed to the product store.
    """
    return MagicMock()


@pytest.fixture
def product_store(mock_firestore):
    return ProductStore(client=mock_firestore)


@pytest.fixture
def test_app(product_store):
    """
    The FastAPI application with the product store replaced.
    """
    app.dependency_overrides[get_product_store] = lambda: product_store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """
    Create a test client for the FastAPI application.
    """
    return TestClient(test_app)


@pytest.fixture
def auth_client(client):
    """
    A test client that already carries the session cookie.
    """
    client.cookies.set(AUTH_COOKIE_NAME, AUTH_COOKIE_MARKER)
    return client
