from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from carecompare.core.exceptions import (
    DomainException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from carecompare.errors import register_error_handlers


@pytest.mark.parametrize(
    "exc,status",
    [
        (ValidationException("bad"), 400),
        (NotFoundException("missing"), 404),
        (DomainException("boom"), 500),
    ],
)
def test_domain_exceptions_map_to_status(exc, status):
    http_exc = exc.to_http_exception()
    assert http_exc.status_code == status
    assert http_exc.detail["code"] == type(exc).__name__


@pytest.fixture
def problem_client(monkeypatch):
    monkeypatch.setenv("STRICT_SCHEMAS", "1")
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/invalid")
    def invalid():
        raise ValidationException(
            "Search radius must be a positive number of miles",
            code="INVALID_RADIUS",
            details={"radius": -1},
        )

    @app.get("/store-down")
    def store_down():
        raise RepositoryException("connection refused")

    return TestClient(app)


def test_validation_problem_document(problem_client):
    response = problem_client.get("/invalid")

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/problem+json"
    assert response.json() == {
        "type": "about:blank",
        "title": "Bad Request",
        "status": 400,
        "detail": "Search radius must be a positive number of miles",
        "instance": "/invalid",
        "code": "INVALID_RADIUS",
        "errors": {"radius": -1},
    }


def test_repository_failure_hides_driver_message(problem_client):
    response = problem_client.get("/store-down")

    assert response.status_code == 500
    body = response.json()
    assert body["detail"] == "Error performing search"
    assert "connection refused" not in response.text
