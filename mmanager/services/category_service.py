"""Category store: add, delete, list and reorder spending categories."""

from sqlalchemy import delete, func, select, update

from mmanager.core.db import Budget, Category, FixedCost, Transaction, unit_of_work
from mmanager.core.errors import NotFound
from mmanager.core.models import ActionResult, CategoryIn, View
from mmanager.core.utils import get_logger
from mmanager.services.base import BaseService

logger = get_logger("mmanager.categories")


class CategoryService(BaseService):
    """Operations on the ordered category list."""

    def list_categories(self) -> list[Category]:
        """Return every category in display order."""
        return self.ordered_categories()

    def add_category(self, owner_id: str | None, payload: CategoryIn) -> ActionResult:
        """Append a new category after the current last position."""
        self.require_owner(owner_id)
        conflict = f'Category "{payload.name}" already exists.'
        with unit_of_work(self.session, "Failed to add category.", conflict=conflict):
            next_index = self.session.scalar(select(func.coalesce(func.max(Category.order_index) + 1, 0)))
            category = Category(name=payload.name, order_index=next_index)
            self.session.add(category)
            self.session.flush()
            category_id = category.id
        logger.info(f"Added category {payload.name!r} at position {next_index}")
        return ActionResult(
            message="Category added.",
            id=category_id,
            revalidate=[View.CATEGORIES, View.BUDGETS, View.DASHBOARD],
        )

    def delete_category(self, owner_id: str | None, category_id: str) -> ActionResult:
        """Delete a category with its budgets and fixed costs; its transactions become uncategorized."""
        self.require_owner(owner_id)
        with unit_of_work(self.session, "Failed to delete category."):
            category = self.session.get(Category, category_id)
            if category is None:
                raise NotFound("Category not found.")
            self.session.execute(
                update(Transaction).where(Transaction.category_id == category_id).values(category_id=None)
            )
            fixed_cost_ids = select(FixedCost.id).where(FixedCost.category_id == category_id)
            self.session.execute(
                update(Transaction).where(Transaction.fixed_cost_id.in_(fixed_cost_ids)).values(fixed_cost_id=None)
            )
            self.session.execute(delete(Budget).where(Budget.category_id == category_id))
            self.session.execute(delete(FixedCost).where(FixedCost.category_id == category_id))
            self.session.delete(category)
        logger.info(f"Deleted category {category_id}")
        return ActionResult(
            message="Category deleted.",
            id=category_id,
            revalidate=[View.CATEGORIES, View.BUDGETS, View.DASHBOARD, View.TRANSACTIONS, View.FIXED_COSTS],
        )

    def reorder_categories(self, owner_id: str | None, ordered_ids: list[str]) -> ActionResult:
        """Persist ``ordered_ids`` as the new order: each id gets its 0-based position.

        All position writes share one transaction, so a failure leaves the previous order intact.
        Ids that match no category are ignored.
        """
        self.require_owner(owner_id)
        with unit_of_work(self.session, "Failed to reorder categories."):
            for index, category_id in enumerate(ordered_ids):
                self.session.execute(
                    update(Category).where(Category.id == category_id).values(order_index=index)
                )
        logger.info(f"Reordered {len(ordered_ids)} categories")
        return ActionResult(
            message="Category order saved.",
            count=len(ordered_ids),
            revalidate=[View.CATEGORIES, View.BUDGETS, View.DASHBOARD],
        )
