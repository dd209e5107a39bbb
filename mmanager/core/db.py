"""DB tables, engine and session helpers for m-manager."""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text, UniqueConstraint, create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from mmanager.core.errors import ConflictError, PersistenceError
from mmanager.core.settings import Settings, get_settings
from mmanager.core.utils import get_logger, utcnow_iso

Base = declarative_base()
logger = get_logger("mmanager.db")


def new_id() -> str:
    """Return a fresh primary key."""
    return str(uuid.uuid4())


class Category(Base):
    """A spending category; ``order_index`` drives listing order."""

    __tablename__ = "categories"
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, unique=True, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    created_at = Column(String, nullable=False, default=utcnow_iso)


class Budget(Base):
    """Planned amount for one owner, category and month (keyed by the month's last day)."""

    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("owner_id", "category_id", "month_key", name="uq_budgets_owner_category_month"),
    )
    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String, nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    month_key = Column(Date, nullable=False, index=True)
    amount = Column(Integer, nullable=False, default=0)


class FixedCost(Base):
    """A recurring charge template; materialized into transactions by the scheduler job."""

    __tablename__ = "fixed_costs"
    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Integer, nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    recurrence = Column(String, nullable=False)
    execution_day = Column(Integer, nullable=False)
    execution_month = Column(Integer, nullable=True)
    last_applied = Column(Date, nullable=True)
    created_at = Column(String, nullable=False, default=utcnow_iso)


class Transaction(Base):
    """A dated ledger entry."""

    __tablename__ = "transactions"
    id = Column(String(36), primary_key=True, default=new_id)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    fixed_cost_id = Column(String(36), ForeignKey("fixed_costs.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(String, nullable=False, default=utcnow_iso)
    updated_at = Column(String, nullable=False, default=utcnow_iso, onupdate=utcnow_iso)


class Schedule(Base):
    """A calendar annotation (holiday or other)."""

    __tablename__ = "schedules"
    id = Column(String(36), primary_key=True, default=new_id)
    date = Column(Date, nullable=False, index=True)
    title = Column(String, nullable=False)
    type = Column(String, nullable=False, default="other")


def get_engine(settings: Settings | None = None) -> Engine:
    """Create a SQLAlchemy engine using the configured database URL."""
    url = (settings or get_settings()).database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def upsert_statement(session: Session, table: object) -> object:
    """Return a dialect-specific ``INSERT`` that supports ``on_conflict_do_update``."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    msg = f"Upsert is not supported on dialect {dialect!r}"
    raise PersistenceError(msg)


@contextmanager
def unit_of_work(session: Session, failure: str, conflict: str | None = None) -> Iterator[Session]:
    """Commit everything done in the block, or roll it all back.

    Database errors become ``PersistenceError(failure)``; uniqueness violations become
    ``ConflictError(conflict)`` when a conflict message is given.
    """
    try:
        yield session
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        if conflict is None:
            logger.exception(failure)
            raise PersistenceError(failure) from exc
        logger.warning(f"{conflict} ({exc.orig})")
        raise ConflictError(conflict) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception(failure)
        raise PersistenceError(failure) from exc
    except Exception:
        session.rollback()
        raise


@contextmanager
def guarded_read(failure: str) -> Iterator[None]:
    """Report query failures as ``PersistenceError(failure)``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception(failure)
        raise PersistenceError(failure) from exc
