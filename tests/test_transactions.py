"""Transaction ledger tests."""

from collections.abc import Callable

from fastapi.testclient import TestClient

from tests.conftest import OWNER_HEADERS

HTTP_200_OK = 200
HTTP_201_CREATED = 201
HTTP_404_NOT_FOUND = 404
HTTP_422_UNPROCESSABLE = 422


def _add(client: TestClient, **body: object) -> str:
    response = client.post("/transactions", json=body, headers=OWNER_HEADERS)
    if response.status_code != HTTP_201_CREATED:
        msg = f"Expected status {HTTP_201_CREATED}, got {response.status_code}: {response.text}"
        raise AssertionError(msg)
    return response.json()["id"]


def test_create_edit_delete(client: TestClient, add_category: Callable[[str], str]) -> None:
    """A transaction can be recorded, edited and removed."""
    food = add_category("Food")
    txn_id = _add(client, date="2024-03-10", amount=1200, description="Groceries", category_id=food)

    fetched = client.get(f"/transactions/{txn_id}").json()
    if (fetched["date"], fetched["amount"], fetched["category_id"]) != ("2024-03-10", 1200, food):
        msg = f"Unexpected stored transaction: {fetched}"
        raise AssertionError(msg)

    response = client.put(
        f"/transactions/{txn_id}",
        json={"date": "2024-03-11", "amount": 900, "description": "", "category_id": ""},
        headers=OWNER_HEADERS,
    )
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}: {response.text}"
        raise AssertionError(msg)
    fetched = client.get(f"/transactions/{txn_id}").json()
    if (fetched["amount"], fetched["description"], fetched["category_id"]) != (900, None, None):
        msg = f"Blank description/category should be stored as null: {fetched}"
        raise AssertionError(msg)

    client.delete(f"/transactions/{txn_id}", headers=OWNER_HEADERS)
    if client.get(f"/transactions/{txn_id}").status_code != HTTP_404_NOT_FOUND:
        msg = "Deleted transaction is still readable"
        raise AssertionError(msg)


def test_amount_must_be_a_positive_integer(client: TestClient) -> None:
    """Zero and fractional amounts are rejected on the amount field."""
    for amount in (0, 12.5):
        response = client.post("/transactions", json={"date": "2024-03-10", "amount": amount}, headers=OWNER_HEADERS)
        if response.status_code != HTTP_422_UNPROCESSABLE or "amount" not in response.json()["errors"]:
            msg = f"Expected amount error for {amount}, got {response.status_code} {response.text}"
            raise AssertionError(msg)


def test_unknown_category_is_rejected(client: TestClient) -> None:
    """A category id that does not exist is a validation error."""
    response = client.post(
        "/transactions", json={"date": "2024-03-10", "amount": 5, "category_id": "nope"}, headers=OWNER_HEADERS
    )
    if response.status_code != HTTP_422_UNPROCESSABLE:
        msg = f"Expected status {HTTP_422_UNPROCESSABLE}, got {response.status_code}"
        raise AssertionError(msg)


def test_update_missing_transaction(client: TestClient) -> None:
    """Editing an unknown id reports not_found."""
    response = client.put("/transactions/nope", json={"date": "2024-03-10", "amount": 5}, headers=OWNER_HEADERS)
    if response.status_code != HTTP_404_NOT_FOUND:
        msg = f"Expected status {HTTP_404_NOT_FOUND}, got {response.status_code}"
        raise AssertionError(msg)


def test_month_listing_uses_a_half_open_window(client: TestClient) -> None:
    """The last day of the month is in, the first day of the next month is out."""
    _add(client, date="2024-02-01", amount=1)
    _add(client, date="2024-02-29", amount=2)
    _add(client, date="2024-03-01", amount=3)

    listed = client.get("/transactions", params={"year": 2024, "month": 2}).json()
    if [t["amount"] for t in listed] != [2, 1]:
        msg = f"Expected February entries newest first, got {listed}"
        raise AssertionError(msg)


def test_export_csv(client: TestClient, add_category: Callable[[str], str]) -> None:
    """The export streams a CSV with category names."""
    food = add_category("Food")
    _add(client, date="2024-02-03", amount=700, description="Lunch", category_id=food)
    _add(client, date="2024-02-01", amount=300)

    response = client.get("/transactions/export", params={"year": 2024, "month": 2})
    if response.status_code != HTTP_200_OK or not response.headers["content-type"].startswith("text/csv"):
        msg = f"Unexpected export response: {response.status_code} {response.headers}"
        raise AssertionError(msg)
    lines = response.text.strip().splitlines()
    if lines != ["date,amount,category,description", "2024-02-01,300,,", "2024-02-03,700,Food,Lunch"]:
        msg = f"Unexpected CSV: {lines}"
        raise AssertionError(msg)


def test_amount_beyond_the_storable_range_is_rejected(client: TestClient) -> None:
    """Amounts past the 64-bit integer range fail validation on the amount field."""
    response = client.post("/transactions", json={"date": "2024-03-10", "amount": 10**30}, headers=OWNER_HEADERS)
    if response.status_code != HTTP_422_UNPROCESSABLE or "amount" not in response.json()["errors"]:
        msg = f"Expected an amount error, got {response.status_code} {response.text}"
        raise AssertionError(msg)
    if client.get("/transactions", params={"year": 2024, "month": 3}).json() != []:
        msg = "The rejected transaction was stored"
        raise AssertionError(msg)
