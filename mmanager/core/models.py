"""Pydantic request and response models for m-manager.

Request models validate and normalize user input (amount coercion, blank-to-null);
response models are built from ORM rows with ``from_attributes``.
"""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mmanager.core.utils import MAX_AMOUNT, coerce_amount


class View(StrEnum):
    """Logical read surfaces whose cached rendering goes stale after a mutation."""

    DASHBOARD = "dashboard"
    BUDGETS = "budgets"
    CATEGORIES = "categories"
    TRANSACTIONS = "transactions"
    FIXED_COSTS = "fixed_costs"
    SCHEDULES = "schedules"


class Recurrence(StrEnum):
    """How often a fixed cost recurs."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class ScheduleType(StrEnum):
    """Kind of calendar annotation."""

    HOLIDAY = "holiday"
    OTHER = "other"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ActionResult(BaseModel):
    """Structured result of a successful mutation."""

    success: bool = True
    message: str | None = None
    id: str | None = None
    count: int | None = None
    revalidate: list[View] = Field(default_factory=list)


# --- Categories ---


class CategoryIn(BaseModel):
    """Request body for adding a category."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value:
            msg = "Category name is required."
            raise ValueError(msg)
        return value


class CategoryOrderIn(BaseModel):
    """Full ordering of category ids, first id gets position 0."""

    ordered_ids: list[str]


class CategoryOut(BaseModel):
    """A category as listed to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    order_index: int


# --- Budgets ---


class _BudgetAmount(BaseModel):
    amount: int = 0

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce(cls, value: object) -> int:
        return coerce_amount(value)


class BudgetCellIn(_BudgetAmount):
    """Set the planned amount for one (category, month) pair."""

    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)
    category_id: str


class BudgetYearIn(_BudgetAmount):
    """Set the same planned amount for every month of a year."""

    year: int = Field(ge=1, le=9999)
    category_id: str


class BudgetGridRow(BaseModel):
    """One category's planned amounts, keyed by month number 1-12."""

    category_id: str
    name: str
    months: dict[int, int]


class BudgetGrid(BaseModel):
    """Category x month matrix of planned amounts for a year."""

    year: int
    rows: list[BudgetGridRow]


# --- Transactions ---


class TransactionIn(BaseModel):
    """Request body for creating or editing a transaction."""

    date: date
    amount: int = Field(gt=0, le=MAX_AMOUNT)
    description: str | None = None
    category_id: str | None = None

    @field_validator("description", "category_id", mode="before")
    @classmethod
    def _blank(cls, value: object) -> object:
        return _blank_to_none(value)


class TransactionOut(BaseModel):
    """A ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    date: date
    amount: int
    description: str | None = None
    category_id: str | None = None
    fixed_cost_id: str | None = None


# --- Fixed costs ---


class FixedCostIn(BaseModel):
    """Request body for creating or editing a fixed-cost template."""

    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(min_length=1)
    amount: int = Field(gt=0, le=MAX_AMOUNT)
    category_id: str
    recurrence: Recurrence
    execution_day: int = Field(ge=1, le=31)
    execution_month: int | None = Field(default=None, ge=1, le=12)

    @field_validator("execution_month", mode="before")
    @classmethod
    def _blank(cls, value: object) -> object:
        return _blank_to_none(value)


class FixedCostOut(BaseModel):
    """A fixed-cost template with its category name."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str
    amount: int
    category_id: str
    category_name: str | None = None
    recurrence: Recurrence
    execution_day: int
    execution_month: int | None = None
    last_applied: date | None = None


class MaterializeIn(BaseModel):
    """Run the fixed-cost materializer as of a date (defaults to today)."""

    as_of: date | None = None


# --- Schedules ---


class ScheduleIn(BaseModel):
    """Request body for adding a calendar annotation."""

    model_config = ConfigDict(str_strip_whitespace=True)

    date: date
    title: str = Field(min_length=1)
    type: ScheduleType = ScheduleType.OTHER


class HolidaysIn(BaseModel):
    """Replace every holiday with these days."""

    days: list[date] = Field(default_factory=list)
    title: str = "Holiday"


class ScheduleOut(BaseModel):
    """A calendar annotation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    date: date
    title: str
    type: ScheduleType


# --- Dashboard ---


class CategorySummary(BaseModel):
    """Budgeted vs. spent for one category in one month."""

    id: str
    name: str
    budgeted: int
    spent: int
    remaining: int
    percentage: int


class SummaryTotals(BaseModel):
    """Budgeted vs. spent across every category."""

    budgeted: int
    spent: int
    remaining: int
    percentage: int


class Dashboard(BaseModel):
    """Month overview."""

    year: int
    month: int
    categories: list[CategorySummary]
    totals: SummaryTotals
    recent_transactions: list[TransactionOut]
    today_schedules: list[ScheduleOut]
