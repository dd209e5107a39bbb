"""Fixed-cost materialization: turn due recurring charges into ledger entries.

``materialize`` is a pure function of a template and a date; ``FixedCostMaterializer``
runs it over an owner's templates and writes the results. An external scheduler is
expected to call the ``/fixed-costs/materialize`` endpoint (typically once a day).
Only the occurrence of the current period is considered, so periods skipped while the
scheduler was down are not back-filled.
"""

from dataclasses import asdict, dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from mmanager.core.dates import clamp_day
from mmanager.core.db import FixedCost, Transaction, unit_of_work
from mmanager.core.models import ActionResult, Recurrence, View
from mmanager.core.utils import get_logger

logger = get_logger("mmanager.worker")


@dataclass(frozen=True)
class TransactionDraft:
    """A transaction a template wants to add to the ledger."""

    date: date
    amount: int
    description: str
    category_id: str
    fixed_cost_id: str


def _created_on(template: object) -> date | None:
    created_at = getattr(template, "created_at", None)
    if not created_at:
        return None
    return date.fromisoformat(str(created_at)[:10])


def occurrence(template: object, as_of: date) -> date:
    """Return the template's charge date in the period (month or year) containing ``as_of``."""
    if template.recurrence == Recurrence.YEARLY:
        created = _created_on(template)
        month = template.execution_month or (created.month if created else 1)
        return clamp_day(as_of.year, month, template.execution_day)
    return clamp_day(as_of.year, as_of.month, template.execution_day)


def materialize(template: object, as_of: date) -> TransactionDraft | None:
    """Return the transaction due for ``template`` as of ``as_of``, or None.

    A charge is due once its occurrence date has arrived, provided the template already
    existed on that date and the occurrence was not applied before.
    """
    due = occurrence(template, as_of)
    if due > as_of:
        return None
    created = _created_on(template)
    if created is not None and due < created:
        return None
    if template.last_applied is not None and template.last_applied >= due:
        return None
    return TransactionDraft(
        date=due,
        amount=template.amount,
        description=template.description,
        category_id=template.category_id,
        fixed_cost_id=template.id,
    )


class FixedCostMaterializer:
    """Writes due fixed costs of one owner into the ledger."""

    def __init__(self, session: Session) -> None:
        """Bind the materializer to a SQLAlchemy session."""
        self.session = session

    def run(self, owner: str, as_of: date) -> ActionResult:
        """Insert every due draft and advance ``last_applied``, all in one transaction."""
        logger.info(f"Materializing fixed costs: owner={owner}, as_of={as_of}")
        created = 0
        with unit_of_work(self.session, "Failed to materialize fixed costs."):
            templates = self.session.scalars(select(FixedCost).where(FixedCost.owner_id == owner)).all()
            for template in templates:
                draft = materialize(template, as_of)
                if draft is None:
                    continue
                self.session.add(Transaction(**asdict(draft)))
                template.last_applied = draft.date
                created += 1
                logger.info(f"Fixed cost {template.id} ({template.description}) charged on {draft.date}")
        logger.info(f"Materialized {created} of {len(templates)} fixed costs for owner={owner}")
        return ActionResult(
            message=f"Created {created} transactions.",
            count=created,
            revalidate=[View.DASHBOARD, View.TRANSACTIONS, View.FIXED_COSTS],
        )


def run_materializer(session: Session, owner: str, as_of: date | None = None) -> ActionResult:
    """Top-level function to run the materializer (for scheduler-triggered requests)."""
    return FixedCostMaterializer(session).run(owner, as_of or date.today())  # noqa: DTZ011
