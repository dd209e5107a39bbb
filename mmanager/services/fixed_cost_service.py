"""Fixed-cost templates: owner-scoped CRUD plus materialization into the ledger."""

from datetime import date

from sqlalchemy import select, update

from mmanager.core.db import Category, FixedCost, Transaction, guarded_read, unit_of_work
from mmanager.core.errors import NotFound
from mmanager.core.models import ActionResult, FixedCostIn, FixedCostOut, Recurrence, View
from mmanager.core.utils import get_logger
from mmanager.services.base import BaseService
from mmanager.workers.materializer import run_materializer

logger = get_logger("mmanager.fixed_costs")


class FixedCostService(BaseService):
    """Manage an owner's recurring charges."""

    def list_fixed_costs(self, owner_id: str | None) -> list[FixedCostOut]:
        """Return the owner's templates ordered by execution day, with category names."""
        owner = self.require_owner(owner_id)
        with guarded_read("Failed to load fixed costs."):
            stmt = (
                select(FixedCost, Category.name)
                .outerjoin(Category, FixedCost.category_id == Category.id)
                .where(FixedCost.owner_id == owner)
                .order_by(FixedCost.execution_day.asc(), FixedCost.description.asc())
            )
            rows = self.session.execute(stmt).all()
        return [
            FixedCostOut.model_validate(fixed_cost).model_copy(update={"category_name": name})
            for fixed_cost, name in rows
        ]

    def add_fixed_cost(self, owner_id: str | None, payload: FixedCostIn, today: date | None = None) -> ActionResult:
        """Create a template; yearly templates without a month recur in the creation month."""
        owner = self.require_owner(owner_id)
        self.check_category(payload.category_id)
        values = payload.model_dump()
        if payload.recurrence == Recurrence.YEARLY and payload.execution_month is None:
            values["execution_month"] = (today or date.today()).month  # noqa: DTZ011
        if payload.recurrence == Recurrence.MONTHLY:
            values["execution_month"] = None
        with unit_of_work(self.session, "Failed to add the fixed cost."):
            fixed_cost = FixedCost(owner_id=owner, **values)
            self.session.add(fixed_cost)
            self.session.flush()
            fixed_cost_id = fixed_cost.id
        logger.info(f"Added fixed cost {fixed_cost_id} for owner={owner}: {payload.description}")
        return ActionResult(message="Fixed cost added.", id=fixed_cost_id, revalidate=[View.FIXED_COSTS])

    def update_fixed_cost(self, owner_id: str | None, fixed_cost_id: str, payload: FixedCostIn) -> ActionResult:
        """Replace the editable fields of one of the owner's templates."""
        owner = self.require_owner(owner_id)
        self.check_category(payload.category_id)
        with unit_of_work(self.session, "Failed to update the fixed cost."):
            fixed_cost = self._owned(owner, fixed_cost_id)
            values = payload.model_dump()
            if payload.recurrence == Recurrence.MONTHLY:
                values["execution_month"] = None
            elif payload.execution_month is None:
                values["execution_month"] = fixed_cost.execution_month
            for field, value in values.items():
                setattr(fixed_cost, field, value)
        logger.info(f"Updated fixed cost {fixed_cost_id} for owner={owner}")
        return ActionResult(message="Fixed cost updated.", id=fixed_cost_id, revalidate=[View.FIXED_COSTS])

    def delete_fixed_cost(self, owner_id: str | None, fixed_cost_id: str) -> ActionResult:
        """Delete one of the owner's templates; transactions it produced stay in the ledger."""
        owner = self.require_owner(owner_id)
        with unit_of_work(self.session, "Failed to delete the fixed cost."):
            fixed_cost = self._owned(owner, fixed_cost_id)
            self.session.execute(
                update(Transaction).where(Transaction.fixed_cost_id == fixed_cost_id).values(fixed_cost_id=None)
            )
            self.session.delete(fixed_cost)
        logger.info(f"Deleted fixed cost {fixed_cost_id} for owner={owner}")
        return ActionResult(message="Fixed cost deleted.", id=fixed_cost_id, revalidate=[View.FIXED_COSTS])

    def materialize(self, owner_id: str | None, as_of: date | None = None) -> ActionResult:
        """Add the transactions of every template due as of ``as_of``."""
        return run_materializer(self.session, self.require_owner(owner_id), as_of)

    def _owned(self, owner: str, fixed_cost_id: str) -> FixedCost:
        fixed_cost = self.session.get(FixedCost, fixed_cost_id)
        if fixed_cost is None or fixed_cost.owner_id != owner:
            raise NotFound("Fixed cost not found.")
        return fixed_cost
