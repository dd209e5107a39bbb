"""Budget grid: yearly category x month matrix and single/bulk upserts.

Every budget row is keyed by ``(owner_id, category_id, month_key)`` where ``month_key`` is
the last day of the calendar month. Writes go through ``INSERT ... ON CONFLICT DO UPDATE``
so repeated saves of the same cell replace the amount instead of adding rows.
"""

from sqlalchemy import select

from mmanager.core.dates import month_key, year_bounds
from mmanager.core.db import Budget, guarded_read, new_id, unit_of_work, upsert_statement
from mmanager.core.models import ActionResult, BudgetCellIn, BudgetGrid, BudgetGridRow, BudgetYearIn, View
from mmanager.core.utils import get_logger
from mmanager.services.base import BaseService

logger = get_logger("mmanager.budgets")

MONTHS = range(1, 13)
UPSERT_KEY = ("owner_id", "category_id", "month_key")


def build_grid(categories: list, rows: list) -> dict[str, dict[int, int]]:
    """Fold budget rows into ``grid[category_id][month]``, zero-filled for every category.

    ``categories`` fixes the row order; rows whose category is not listed are dropped.
    """
    grid: dict[str, dict[int, int]] = {c.id: dict.fromkeys(MONTHS, 0) for c in categories}
    for row in rows:
        if row.category_id in grid:
            grid[row.category_id][row.month_key.month] = row.amount
    return grid


class BudgetService(BaseService):
    """Read and write the per-owner budget grid."""

    def get_year_grid(self, owner_id: str | None, year: int) -> BudgetGrid:
        """Return the category x month matrix of planned amounts for ``year``."""
        owner = self.require_owner(owner_id)
        categories = self.ordered_categories()
        first, last = year_bounds(year)
        with guarded_read("Failed to load budgets."):
            stmt = select(Budget).where(
                Budget.owner_id == owner,
                Budget.month_key >= first,
                Budget.month_key <= last,
            )
            rows = list(self.session.scalars(stmt))
        grid = build_grid(categories, rows)
        return BudgetGrid(
            year=year,
            rows=[BudgetGridRow(category_id=c.id, name=c.name, months=grid[c.id]) for c in categories],
        )

    def get_month_amounts(self, owner_id: str | None, year: int, month: int) -> dict[str, int]:
        """Return ``{category_id: amount}`` for one month."""
        owner = self.require_owner(owner_id)
        with guarded_read("Failed to load budgets."):
            stmt = select(Budget.category_id, Budget.amount).where(
                Budget.owner_id == owner,
                Budget.month_key == month_key(year, month),
            )
            return {category_id: amount for category_id, amount in self.session.execute(stmt)}

    def update_budget(self, owner_id: str | None, payload: BudgetCellIn) -> ActionResult:
        """Set the planned amount of one (category, month) cell."""
        owner = self.require_owner(owner_id)
        row = self._row(owner, payload.category_id, payload.year, payload.month, payload.amount)
        self._upsert([row], failure="Failed to update budget.")
        logger.info(
            f"Budget set: owner={owner} category={payload.category_id} "
            f"{payload.year}-{payload.month:02d} amount={payload.amount}"
        )
        return ActionResult(message="Budget updated.", count=1, revalidate=[View.BUDGETS, View.DASHBOARD])

    def bulk_update_budgets(self, owner_id: str | None, payload: BudgetYearIn) -> ActionResult:
        """Set the same planned amount for all 12 months of a year, all-or-nothing."""
        owner = self.require_owner(owner_id)
        rows = [self._row(owner, payload.category_id, payload.year, month, payload.amount) for month in MONTHS]
        self._upsert(rows, failure="Failed to bulk update budget.")
        logger.info(
            f"Budget set for year: owner={owner} category={payload.category_id} "
            f"year={payload.year} amount={payload.amount}"
        )
        return ActionResult(
            message="Budget updated for the whole year.",
            count=len(rows),
            revalidate=[View.BUDGETS, View.DASHBOARD],
        )

    @staticmethod
    def _row(owner: str, category_id: str, year: int, month: int, amount: int) -> dict:
        return {
            "id": new_id(),
            "owner_id": owner,
            "category_id": category_id,
            "month_key": month_key(year, month),
            "amount": amount,
        }

    def _upsert(self, rows: list[dict], failure: str) -> None:
        """Write ``rows`` as one batched upsert inside one transaction."""
        self.check_category(rows[0]["category_id"])
        with unit_of_work(self.session, failure):
            stmt = upsert_statement(self.session, Budget.__table__).values(rows)
            stmt = stmt.on_conflict_do_update(index_elements=list(UPSERT_KEY), set_={"amount": stmt.excluded.amount})
            self.session.execute(stmt)
