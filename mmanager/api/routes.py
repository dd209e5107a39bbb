"""FastAPI endpoints for the m-manager API.

This module defines the health check and the month dashboard, and mounts the routers of
every store (categories, budgets, transactions, fixed costs, schedules).
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mmanager.api import budgets, categories, fixed_costs, schedules, transactions
from mmanager.api.dependencies import get_db, get_owner_id, get_settings, get_view_cache
from mmanager.core.models import Dashboard, View
from mmanager.core.settings import Settings
from mmanager.services.base import BaseService
from mmanager.services.summary_service import SummaryService
from mmanager.services.view_cache import ViewCache

router = APIRouter()
router.include_router(categories.router)
router.include_router(budgets.router)
router.include_router(transactions.router)
router.include_router(fixed_costs.router)
router.include_router(schedules.router)


@router.get(
    "/dashboard",
    response_model=Dashboard,
    summary="Month dashboard",
    description=(
        "Budgeted vs. spent for every category in one month, with totals, the most recent "
        "transactions of the month and today's schedule.\n\n"
        "**Query parameters:**\n"
        "- `year`, `month`: default to the current month.\n\n"
        "`percentage` is `spent / budgeted * 100` rounded to a whole number, and 0 when nothing is budgeted."
    ),
    responses={
        200: {
            "description": "Dashboard.",
            "content": {
                "application/json": {
                    "example": {
                        "year": 2024,
                        "month": 2,
                        "categories": [
                            {
                                "id": "123e4567-e89b-12d3-a456-426614174000",
                                "name": "Food",
                                "budgeted": 1000,
                                "spent": 250,
                                "remaining": 750,
                                "percentage": 25,
                            }
                        ],
                        "totals": {"budgeted": 1000, "spent": 250, "remaining": 750, "percentage": 25},
                        "recent_transactions": [],
                        "today_schedules": [],
                    }
                }
            },
        },
        401: {"description": "No owner identity on the request."},
    },
)
def get_dashboard(
    year: int | None = Query(None, ge=1, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    settings: Settings = Depends(get_settings),
    cache: ViewCache = Depends(get_view_cache),
) -> Dashboard:
    """Get the month dashboard."""
    owner = BaseService.require_owner(owner_id)
    today = date.today()  # noqa: DTZ011
    year, month = year or today.year, month or today.month
    return cache.get_or_load(
        View.DASHBOARD,
        (owner, year, month, today),
        lambda: SummaryService(db).get_dashboard(
            owner, year, month, today, recent_limit=settings.recent_transactions_limit
        ),
    )


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
