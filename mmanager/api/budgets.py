"""Budget endpoints: the yearly grid and single-cell / whole-year upserts."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mmanager.api.dependencies import get_db, get_owner_id, get_view_cache
from mmanager.core.models import ActionResult, BudgetCellIn, BudgetGrid, BudgetYearIn, View
from mmanager.services.base import BaseService
from mmanager.services.budget_service import BudgetService
from mmanager.services.view_cache import ViewCache

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get(
    "",
    response_model=BudgetGrid,
    summary="Get the budget grid for a year",
    description=(
        "Return one row per category (in category order) with the planned amount of every month 1-12. "
        "Months without a budget are 0.\n\n"
        "**Query parameter:**\n"
        "- `year`: defaults to the current year."
    ),
    responses={
        200: {
            "description": "Budget grid.",
            "content": {
                "application/json": {
                    "example": {
                        "year": 2024,
                        "rows": [
                            {
                                "category_id": "123e4567-e89b-12d3-a456-426614174000",
                                "name": "Food",
                                "months": {str(m): 30000 if m == 1 else 0 for m in range(1, 13)},
                            }
                        ],
                    }
                }
            },
        },
        401: {"description": "No owner identity on the request."},
    },
)
def get_budget_grid(
    year: int | None = Query(None, ge=1, le=9999),
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> BudgetGrid:
    """Get the category x month budget grid."""
    owner = BaseService.require_owner(owner_id)
    year = year or date.today().year  # noqa: DTZ011
    return cache.get_or_load(View.BUDGETS, (owner, year), lambda: BudgetService(db).get_year_grid(owner, year))


@router.put(
    "/cell",
    response_model=ActionResult,
    summary="Set one month's budget for a category",
    description=(
        "Upsert the planned amount for `(category_id, year, month)`. The amount is coerced to a "
        "non-negative integer: `'12,000'` becomes 12000 and non-numeric input becomes 0."
    ),
)
def update_budget(
    payload: BudgetCellIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Set a single budget cell."""
    return cache.confirm(BudgetService(db).update_budget(owner_id, payload))


@router.put(
    "/year",
    response_model=ActionResult,
    summary="Set the same budget for every month of a year",
    description="Upsert the amount into all 12 months of `year` for `category_id`, all-or-nothing.",
)
def bulk_update_budgets(
    payload: BudgetYearIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Apply one amount to the whole year."""
    return cache.confirm(BudgetService(db).bulk_update_budgets(owner_id, payload))
