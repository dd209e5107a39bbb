"""Fixed-cost template endpoints and the materialization trigger."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mmanager.api.dependencies import get_db, get_owner_id, get_view_cache
from mmanager.core.models import ActionResult, FixedCostIn, FixedCostOut, MaterializeIn, View
from mmanager.services.base import BaseService
from mmanager.services.fixed_cost_service import FixedCostService
from mmanager.services.view_cache import ViewCache

router = APIRouter(prefix="/fixed-costs", tags=["fixed-costs"])


@router.get(
    "",
    response_model=list[FixedCostOut],
    summary="List fixed costs",
    description="Return the owner's recurring charges ordered by execution day, with category names.",
)
def list_fixed_costs(
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> list[FixedCostOut]:
    """List the owner's fixed costs."""
    owner = BaseService.require_owner(owner_id)
    return cache.get_or_load(View.FIXED_COSTS, owner, lambda: FixedCostService(db).list_fixed_costs(owner))


@router.post(
    "",
    status_code=201,
    response_model=ActionResult,
    summary="Add a fixed cost",
    description=(
        "Create a recurring charge. `recurrence` is `monthly` or `yearly`; `execution_day` is 1-31 "
        "(clamped to the month's length when charged). Yearly charges use `execution_month`, "
        "defaulting to the current month."
    ),
)
def add_fixed_cost(
    payload: FixedCostIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Add a fixed cost."""
    return cache.confirm(FixedCostService(db).add_fixed_cost(owner_id, payload))


@router.post(
    "/materialize",
    response_model=ActionResult,
    summary="Charge due fixed costs",
    description=(
        "Add a transaction for every fixed cost of the owner that is due as of `as_of` "
        "(default: today) and was not charged yet for that period. Meant to be called by a scheduler."
    ),
)
def materialize_fixed_costs(
    payload: MaterializeIn | None = None,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Materialize due fixed costs."""
    as_of = payload.as_of if payload else None
    return cache.confirm(FixedCostService(db).materialize(owner_id, as_of))


@router.put(
    "/{fixed_cost_id}",
    response_model=ActionResult,
    summary="Edit a fixed cost",
    responses={404: {"description": "Fixed cost not found."}},
)
def update_fixed_cost(
    fixed_cost_id: str,
    payload: FixedCostIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Edit a fixed cost."""
    return cache.confirm(FixedCostService(db).update_fixed_cost(owner_id, fixed_cost_id, payload))


@router.delete(
    "/{fixed_cost_id}",
    response_model=ActionResult,
    summary="Delete a fixed cost",
    responses={404: {"description": "Fixed cost not found."}},
)
def delete_fixed_cost(
    fixed_cost_id: str,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Delete a fixed cost."""
    return cache.confirm(FixedCostService(db).delete_fixed_cost(owner_id, fixed_cost_id))
