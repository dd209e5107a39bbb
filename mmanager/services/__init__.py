"""Services package: business operations over the database, one service per store."""

from .base import BaseService  # noqa: F401
from .budget_service import BudgetService  # noqa: F401
from .category_service import CategoryService  # noqa: F401
from .fixed_cost_service import FixedCostService  # noqa: F401
from .schedule_service import ScheduleService  # noqa: F401
from .summary_service import SummaryService  # noqa: F401
from .transaction_service import TransactionService  # noqa: F401
from .view_cache import ViewCache  # noqa: F401
