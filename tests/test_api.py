"""API integration tests for the application shell: health, docs and error shapes."""

import pytest
from fastapi.testclient import TestClient

from mmanager.core.errors import AuthRequired
from mmanager.services.base import BaseService

HTTP_200_OK = 200
HTTP_401_UNAUTHORIZED = 401
HTTP_422_UNPROCESSABLE = 422


def test_health(client: TestClient) -> None:
    """Test the /health endpoint returns status ok."""
    response = client.get("/health")
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}"
        raise AssertionError(msg)
    if response.json() != {"status": "ok"}:
        msg = f"Expected response {{'status': 'ok'}}, got {response.json()}"
        raise AssertionError(msg)


def test_scalar_docs(client: TestClient) -> None:
    """Test the /scalar endpoint returns OpenAPI or Swagger docs."""
    response = client.get("/scalar")
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}"
        raise AssertionError(msg)
    if not ("openapi" in response.text or "swagger" in response.text):
        msg = "Expected 'openapi' or 'swagger' in response text"
        raise AssertionError(msg)


def test_missing_owner_is_a_structured_auth_error(client: TestClient) -> None:
    """Mutations without an owner header fail with an auth_required result, not a bare 500."""
    response = client.post("/categories", json={"name": "Food"})
    if response.status_code != HTTP_401_UNAUTHORIZED:
        msg = f"Expected status {HTTP_401_UNAUTHORIZED}, got {response.status_code}"
        raise AssertionError(msg)
    body = response.json()
    if body["success"] is not False or body["error"] != "auth_required":
        msg = f"Expected auth_required failure, got {body}"
        raise AssertionError(msg)


def test_blank_owner_counts_as_missing() -> None:
    """A whitespace-only owner id is rejected like a missing one."""
    with pytest.raises(AuthRequired):
        BaseService.require_owner("   ")
    if BaseService.require_owner(" owner-1 ") != "owner-1":
        msg = "Owner ids should be stripped"
        raise AssertionError(msg)


def test_request_validation_reports_fields(client: TestClient) -> None:
    """Malformed bodies come back as validation_error with per-field messages."""
    response = client.post(
        "/transactions",
        json={"date": "2024-03-01", "amount": -5},
        headers={"X-Owner-Id": "owner-1"},
    )
    if response.status_code != HTTP_422_UNPROCESSABLE:
        msg = f"Expected status {HTTP_422_UNPROCESSABLE}, got {response.status_code}"
        raise AssertionError(msg)
    body = response.json()
    if body["error"] != "validation_error" or "amount" not in body["errors"]:
        msg = f"Expected a field error on 'amount', got {body}"
        raise AssertionError(msg)


def test_blank_category_name_message(client: TestClient) -> None:
    """The category name validator's message is passed through without pydantic's prefix."""
    response = client.post("/categories", json={"name": "  "}, headers={"X-Owner-Id": "owner-1"})
    if response.status_code != HTTP_422_UNPROCESSABLE:
        msg = f"Expected status {HTTP_422_UNPROCESSABLE}, got {response.status_code}"
        raise AssertionError(msg)
    if response.json()["errors"].get("name") != ["Category name is required."]:
        msg = f"Unexpected errors: {response.json()['errors']}"
        raise AssertionError(msg)
