"""Transaction ledger: create, edit, delete, list and export entries."""

import pandas as pd
from sqlalchemy import select

from mmanager.core.dates import month_window
from mmanager.core.db import Category, Transaction, guarded_read, unit_of_work
from mmanager.core.errors import NotFound
from mmanager.core.models import ActionResult, TransactionIn, View
from mmanager.core.utils import get_logger
from mmanager.services.base import BaseService

logger = get_logger("mmanager.transactions")

EXPORT_COLUMNS = ["date", "amount", "category", "description"]
LEDGER_VIEWS = [View.DASHBOARD, View.TRANSACTIONS]


class TransactionService(BaseService):
    """Operations on individual ledger entries."""

    def get_transaction(self, transaction_id: str) -> Transaction:
        """Return one transaction or raise ``NotFound``."""
        with guarded_read("Failed to load transaction."):
            txn = self.session.get(Transaction, transaction_id)
        if txn is None:
            raise NotFound("Transaction not found.")
        return txn

    def list_month(self, year: int, month: int) -> list[Transaction]:
        """Return the month's transactions, newest first."""
        start, end = month_window(year, month)
        with guarded_read("Failed to load transactions."):
            stmt = (
                select(Transaction)
                .where(Transaction.date >= start, Transaction.date < end)
                .order_by(Transaction.date.desc(), Transaction.created_at.desc())
            )
            return list(self.session.scalars(stmt))

    def add_transaction(self, owner_id: str | None, payload: TransactionIn) -> ActionResult:
        """Record a new transaction."""
        self.require_owner(owner_id)
        self.check_category(payload.category_id)
        with unit_of_work(self.session, "Failed to save the transaction."):
            txn = Transaction(**payload.model_dump())
            self.session.add(txn)
            self.session.flush()
            txn_id = txn.id
        logger.info(f"Added transaction {txn_id}: {payload.date} amount={payload.amount}")
        return ActionResult(message="Transaction saved.", id=txn_id, revalidate=LEDGER_VIEWS)

    def update_transaction(self, owner_id: str | None, transaction_id: str, payload: TransactionIn) -> ActionResult:
        """Replace every editable field of an existing transaction."""
        self.require_owner(owner_id)
        self.check_category(payload.category_id)
        with unit_of_work(self.session, "Failed to update the transaction."):
            txn = self.session.get(Transaction, transaction_id)
            if txn is None:
                raise NotFound("Transaction not found.")
            for field, value in payload.model_dump().items():
                setattr(txn, field, value)
        logger.info(f"Updated transaction {transaction_id}")
        return ActionResult(message="Transaction updated.", id=transaction_id, revalidate=LEDGER_VIEWS)

    def delete_transaction(self, owner_id: str | None, transaction_id: str) -> ActionResult:
        """Delete a transaction."""
        self.require_owner(owner_id)
        with unit_of_work(self.session, "Failed to delete the transaction."):
            txn = self.session.get(Transaction, transaction_id)
            if txn is None:
                raise NotFound("Transaction not found.")
            self.session.delete(txn)
        logger.info(f"Deleted transaction {transaction_id}")
        return ActionResult(message="Transaction deleted.", id=transaction_id, revalidate=LEDGER_VIEWS)

    def export_csv(self, year: int, month: int) -> str:
        """Render the month's transactions as CSV, oldest first, with category names."""
        start, end = month_window(year, month)
        with guarded_read("Failed to export transactions."):
            stmt = (
                select(Transaction.date, Transaction.amount, Category.name, Transaction.description)
                .outerjoin(Category, Transaction.category_id == Category.id)
                .where(Transaction.date >= start, Transaction.date < end)
                .order_by(Transaction.date.asc(), Transaction.created_at.asc())
            )
            rows = self.session.execute(stmt).all()
        data_frame = pd.DataFrame([tuple(r) for r in rows], columns=EXPORT_COLUMNS)
        data_frame["date"] = data_frame["date"].astype(str)
        logger.info(f"Exported {len(data_frame)} transactions for {year}-{month:02d}")
        return data_frame.to_csv(index=False)
