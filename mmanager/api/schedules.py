"""Schedule and holiday endpoints."""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mmanager.api.dependencies import get_db, get_owner_id, get_view_cache
from mmanager.core.models import ActionResult, HolidaysIn, ScheduleIn, ScheduleOut, View
from mmanager.services.schedule_service import ScheduleService
from mmanager.services.view_cache import ViewCache

router = APIRouter(tags=["schedules"])


@router.get("/schedules", response_model=list[ScheduleOut], summary="List schedules")
def list_schedules(
    db: Session = Depends(get_db),
    cache: ViewCache = Depends(get_view_cache),
) -> list[ScheduleOut]:
    """List every calendar annotation ordered by date."""
    return cache.get_or_load(
        View.SCHEDULES,
        "all",
        lambda: [ScheduleOut.model_validate(s) for s in ScheduleService(db).list_schedules()],
    )


@router.post("/schedules", status_code=201, response_model=ActionResult, summary="Add a schedule")
def add_schedule(
    payload: ScheduleIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Add a calendar annotation."""
    return cache.confirm(ScheduleService(db).add_schedule(owner_id, payload))


@router.delete(
    "/schedules/{schedule_id}",
    response_model=ActionResult,
    summary="Delete a schedule",
    responses={404: {"description": "Schedule not found."}},
)
def delete_schedule(
    schedule_id: str,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Delete a calendar annotation."""
    return cache.confirm(ScheduleService(db).delete_schedule(owner_id, schedule_id))


@router.get("/holidays", response_model=list[date], summary="List holiday dates")
def list_holidays(db: Session = Depends(get_db)) -> list[date]:
    """List the dates marked as holidays."""
    return ScheduleService(db).list_holidays()


@router.put(
    "/holidays",
    response_model=ActionResult,
    summary="Replace holidays",
    description="Replace every holiday with `days` in one transaction. An empty list clears all holidays.",
)
def register_holidays(
    payload: HolidaysIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Replace holidays."""
    return cache.confirm(ScheduleService(db).register_holidays(owner_id, payload))
