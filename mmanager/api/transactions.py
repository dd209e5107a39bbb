"""Transaction ledger endpoints."""

import io
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from mmanager.api.dependencies import get_db, get_owner_id, get_view_cache
from mmanager.core.models import ActionResult, TransactionIn, TransactionOut
from mmanager.services.transaction_service import TransactionService
from mmanager.services.view_cache import ViewCache

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _month_or_current(year: int | None, month: int | None) -> tuple[int, int]:
    today = date.today()  # noqa: DTZ011
    return year or today.year, month or today.month


@router.get(
    "",
    response_model=list[TransactionOut],
    summary="List a month's transactions",
    description="Return the transactions of `year`/`month` (default: the current month), newest first.",
)
def list_transactions(
    year: int | None = Query(None, ge=1, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
) -> list[TransactionOut]:
    """List transactions in a month."""
    year, month = _month_or_current(year, month)
    return [TransactionOut.model_validate(t) for t in TransactionService(db).list_month(year, month)]


@router.get(
    "/export",
    response_class=StreamingResponse,
    summary="Export a month's transactions as CSV",
    description=(
        "Download the transactions of `year`/`month` as a CSV attachment with the columns "
        "`date, amount, category, description`."
    ),
    responses={200: {"description": "CSV file download.", "content": {"text/csv": {}}}},
)
def export_transactions(
    year: int | None = Query(None, ge=1, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    """Export transactions as CSV."""
    year, month = _month_or_current(year, month)
    data = TransactionService(db).export_csv(year, month)
    return StreamingResponse(
        io.BytesIO(data.encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=transactions_{year}-{month:02d}.csv"},
    )


@router.get(
    "/{transaction_id}",
    response_model=TransactionOut,
    summary="Get a transaction",
    responses={404: {"description": "Transaction not found."}},
)
def get_transaction(transaction_id: str, db: Session = Depends(get_db)) -> TransactionOut:
    """Get a single transaction."""
    return TransactionOut.model_validate(TransactionService(db).get_transaction(transaction_id))


@router.post(
    "",
    status_code=201,
    response_model=ActionResult,
    summary="Record a transaction",
    description=(
        "Add a ledger entry. `amount` must be a positive integer; `category_id` may be omitted "
        "for an uncategorized entry but must name an existing category when given."
    ),
)
def add_transaction(
    payload: TransactionIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Add a transaction."""
    return cache.confirm(TransactionService(db).add_transaction(owner_id, payload))


@router.put(
    "/{transaction_id}",
    response_model=ActionResult,
    summary="Edit a transaction",
    responses={404: {"description": "Transaction not found."}},
)
def update_transaction(
    transaction_id: str,
    payload: TransactionIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Edit a transaction."""
    return cache.confirm(TransactionService(db).update_transaction(owner_id, transaction_id, payload))


@router.delete(
    "/{transaction_id}",
    response_model=ActionResult,
    summary="Delete a transaction",
    responses={404: {"description": "Transaction not found."}},
)
def delete_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Delete a transaction."""
    return cache.confirm(TransactionService(db).delete_transaction(owner_id, transaction_id))
