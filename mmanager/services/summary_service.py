"""Dashboard summary: spent vs. budgeted per category for one month."""

from datetime import date

from sqlalchemy import func, select

from mmanager.core.dates import month_window
from mmanager.core.db import Schedule, Transaction, guarded_read
from mmanager.core.models import CategorySummary, Dashboard, ScheduleOut, SummaryTotals, TransactionOut
from mmanager.services.base import BaseService
from mmanager.services.budget_service import BudgetService


def percentage(spent: int, budgeted: int) -> int:
    """Return ``spent / budgeted`` as a whole percent, rounded half up; 0 when nothing is budgeted."""
    if budgeted <= 0:
        return 0
    return (spent * 200 + budgeted) // (budgeted * 2)


def summarize(categories: list, spent: dict[str, int], budgeted: dict[str, int]) -> list[CategorySummary]:
    """Build one summary per category, in category order, defaulting missing amounts to 0."""
    summaries = []
    for category in categories:
        cat_budget = budgeted.get(category.id, 0)
        cat_spent = spent.get(category.id, 0)
        summaries.append(
            CategorySummary(
                id=category.id,
                name=category.name,
                budgeted=cat_budget,
                spent=cat_spent,
                remaining=cat_budget - cat_spent,
                percentage=percentage(cat_spent, cat_budget),
            )
        )
    return summaries


def totals(summaries: list[CategorySummary]) -> SummaryTotals:
    """Sum the per-category summaries."""
    budgeted = sum(s.budgeted for s in summaries)
    spent = sum(s.spent for s in summaries)
    return SummaryTotals(
        budgeted=budgeted,
        spent=spent,
        remaining=budgeted - spent,
        percentage=percentage(spent, budgeted),
    )


class SummaryService(BaseService):
    """Aggregate the ledger and the budget grid into the month dashboard."""

    def spent_by_category(self, year: int, month: int) -> dict[str, int]:
        """Return ``{category_id: total amount}`` for transactions in the month window."""
        start, end = month_window(year, month)
        with guarded_read("Failed to load transactions."):
            stmt = (
                select(Transaction.category_id, func.sum(Transaction.amount))
                .where(Transaction.date >= start, Transaction.date < end, Transaction.category_id.is_not(None))
                .group_by(Transaction.category_id)
            )
            return {category_id: int(total or 0) for category_id, total in self.session.execute(stmt)}

    def get_dashboard(
        self, owner_id: str | None, year: int, month: int, today: date, recent_limit: int = 5
    ) -> Dashboard:
        """Return the month overview for ``owner_id``."""
        owner = self.require_owner(owner_id)
        categories = self.ordered_categories()
        budgeted = BudgetService(self.session).get_month_amounts(owner, year, month)
        summaries = summarize(categories, self.spent_by_category(year, month), budgeted)

        start, end = month_window(year, month)
        with guarded_read("Failed to load dashboard data."):
            recent = self.session.scalars(
                select(Transaction)
                .where(Transaction.date >= start, Transaction.date < end)
                .order_by(Transaction.date.desc(), Transaction.created_at.desc())
                .limit(recent_limit)
            ).all()
            schedules = self.session.scalars(
                select(Schedule).where(Schedule.date == today).order_by(Schedule.title)
            ).all()

        return Dashboard(
            year=year,
            month=month,
            categories=summaries,
            totals=totals(summaries),
            recent_transactions=[TransactionOut.model_validate(t) for t in recent],
            today_schedules=[ScheduleOut.model_validate(s) for s in schedules],
        )
