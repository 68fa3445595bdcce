import pytest
from fastapi.testclient import TestClient

from api import create_app
from library import Library


@pytest.fixture
def lib():
    # Fresh seeded collection for every test
    return Library()


@pytest.fixture
def app(lib):
    return create_app(lib)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
