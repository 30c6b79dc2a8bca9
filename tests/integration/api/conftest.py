"""Fixtures for REST API tests."""

import pytest
from fastapi.testclient import TestClient

from shipyard.api import create_app
from shipyard.api.dependencies import get_engine
from shipyard.engine import ShipyardEngine


@pytest.fixture
def client(config, engine: ShipyardEngine):
    """Test client whose routes use the fake-transport engine."""
    app = create_app(config)

    def override_get_engine():
        yield engine

    app.dependency_overrides[get_engine] = override_get_engine

    with TestClient(app) as client:
        yield client
