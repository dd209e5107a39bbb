"""Schedule/holiday set: calendar annotations independent of the financial data."""

from datetime import date

from sqlalchemy import delete, select

from mmanager.core.db import Schedule, guarded_read, unit_of_work
from mmanager.core.errors import NotFound
from mmanager.core.models import ActionResult, HolidaysIn, ScheduleIn, ScheduleType, View
from mmanager.core.utils import get_logger
from mmanager.services.base import BaseService

logger = get_logger("mmanager.schedules")

SCHEDULE_VIEWS = [View.SCHEDULES, View.DASHBOARD]


class ScheduleService(BaseService):
    """Read and replace calendar annotations."""

    def list_schedules(self) -> list[Schedule]:
        """Return every schedule entry ordered by date."""
        with guarded_read("Failed to load schedules."):
            return list(self.session.scalars(select(Schedule).order_by(Schedule.date, Schedule.title)))

    def list_holidays(self) -> list[date]:
        """Return the dates marked as holidays."""
        with guarded_read("Failed to load holidays."):
            stmt = select(Schedule.date).where(Schedule.type == ScheduleType.HOLIDAY).order_by(Schedule.date)
            return list(self.session.scalars(stmt))

    def register_holidays(self, owner_id: str | None, payload: HolidaysIn) -> ActionResult:
        """Replace every holiday with ``payload.days``; an empty list clears them all."""
        self.require_owner(owner_id)
        days = sorted(set(payload.days))
        with unit_of_work(self.session, "Failed to update holidays."):
            self.session.execute(delete(Schedule).where(Schedule.type == ScheduleType.HOLIDAY))
            self.session.add_all(Schedule(date=day, title=payload.title, type=ScheduleType.HOLIDAY) for day in days)
        logger.info(f"Registered {len(days)} holidays")
        return ActionResult(message="Holidays updated.", count=len(days), revalidate=SCHEDULE_VIEWS)

    def add_schedule(self, owner_id: str | None, payload: ScheduleIn) -> ActionResult:
        """Add a single calendar annotation."""
        self.require_owner(owner_id)
        with unit_of_work(self.session, "Failed to add the schedule."):
            schedule = Schedule(date=payload.date, title=payload.title, type=payload.type)
            self.session.add(schedule)
            self.session.flush()
            schedule_id = schedule.id
        logger.info(f"Added schedule {schedule_id} on {payload.date}: {payload.title}")
        return ActionResult(message="Schedule added.", id=schedule_id, revalidate=SCHEDULE_VIEWS)

    def delete_schedule(self, owner_id: str | None, schedule_id: str) -> ActionResult:
        """Delete a calendar annotation."""
        self.require_owner(owner_id)
        with unit_of_work(self.session, "Failed to delete the schedule."):
            schedule = self.session.get(Schedule, schedule_id)
            if schedule is None:
                raise NotFound("Schedule not found.")
            self.session.delete(schedule)
        logger.info(f"Deleted schedule {schedule_id}")
        return ActionResult(message="Schedule deleted.", id=schedule_id, revalidate=SCHEDULE_VIEWS)
