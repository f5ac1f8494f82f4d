import pytest
from fastapi.testclient import TestClient

from carecompare.api.dependencies.database import get_db
from carecompare.api.dependencies.services import get_geocoder
from carecompare.main import app


@pytest.fixture
def client(db, catalog, geocoder):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_geocoder, None)
