"""Schedule and holiday tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from tests.conftest import OWNER_HEADERS

HTTP_200_OK = 200
HTTP_404_NOT_FOUND = 404
HTTP_500_INTERNAL_ERROR = 500


def test_register_holidays_replaces_previous_set(client: TestClient) -> None:
    """Registering holidays drops the old ones and leaves other schedules alone."""
    client.post("/schedules", json={"date": "2024-05-02", "title": "Dentist"}, headers=OWNER_HEADERS)
    client.put("/holidays", json={"days": ["2024-05-03", "2024-05-04"]}, headers=OWNER_HEADERS)
    response = client.put(
        "/holidays", json={"days": ["2024-05-06", "2024-05-05", "2024-05-06"]}, headers=OWNER_HEADERS
    )
    if response.status_code != HTTP_200_OK or response.json()["count"] != 2:
        msg = f"Unexpected response: {response.status_code} {response.text}"
        raise AssertionError(msg)

    if client.get("/holidays").json() != ["2024-05-05", "2024-05-06"]:
        msg = f"Unexpected holidays: {client.get('/holidays').json()}"
        raise AssertionError(msg)
    schedules = [(s["date"], s["title"], s["type"]) for s in client.get("/schedules").json()]
    expected = [
        ("2024-05-02", "Dentist", "other"),
        ("2024-05-05", "Holiday", "holiday"),
        ("2024-05-06", "Holiday", "holiday"),
    ]
    if schedules != expected:
        msg = f"Unexpected schedules: {schedules}"
        raise AssertionError(msg)


def test_empty_registration_clears_holidays(client: TestClient) -> None:
    """An empty day list removes every holiday."""
    client.put("/holidays", json={"days": ["2024-01-01"]}, headers=OWNER_HEADERS)
    client.put("/holidays", json={"days": []}, headers=OWNER_HEADERS)
    if client.get("/holidays").json() != []:
        msg = "Holidays were not cleared"
        raise AssertionError(msg)


def test_delete_schedule(client: TestClient) -> None:
    """Schedules can be deleted; unknown ids are not_found."""
    schedule_id = client.post(
        "/schedules", json={"date": "2024-05-02", "title": "Dentist"}, headers=OWNER_HEADERS
    ).json()["id"]
    client.get("/schedules")
    client.delete(f"/schedules/{schedule_id}", headers=OWNER_HEADERS)
    if client.get("/schedules").json() != []:
        msg = "Deleted schedule is still listed"
        raise AssertionError(msg)
    if client.delete(f"/schedules/{schedule_id}", headers=OWNER_HEADERS).status_code != HTTP_404_NOT_FOUND:
        msg = "Expected not_found for a second delete"
        raise AssertionError(msg)


def test_failed_holiday_replacement_keeps_the_previous_set(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    """If writing the new holidays fails, the deleted ones come back with the rollback."""
    client.put("/holidays", json={"days": ["2024-01-01", "2024-01-02"]}, headers=OWNER_HEADERS)

    def failing_flush(self: Session, *args: object, **kwargs: object) -> None:  # noqa: ARG001
        msg = "database or disk is full"
        raise OperationalError("INSERT INTO schedules", {}, Exception(msg))

    with monkeypatch.context() as patch:
        patch.setattr(Session, "flush", failing_flush)
        response = client.put("/holidays", json={"days": ["2024-02-01"]}, headers=OWNER_HEADERS)

    body = response.json()
    if response.status_code != HTTP_500_INTERNAL_ERROR or body["success"] or body["error"] != "persistence_error":
        msg = f"Expected a persistence_error result, got {response.status_code} {body}"
        raise AssertionError(msg)
    if client.get("/holidays").json() != ["2024-01-01", "2024-01-02"]:
        msg = f"Expected the previous holidays, got {client.get('/holidays').json()}"
        raise AssertionError(msg)
