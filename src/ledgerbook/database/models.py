"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class LedgerEntry(Base):
    """Ledger entry model.

    The entry date is stored as text, as received from data entry or an
    import, so rows with an unparsable date survive in raw listings.
    """

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    date = Column(String, nullable=False)
    particulars = Column(String, nullable=False, default="")
    main_category = Column(String, nullable=False)
    sub_category = Column(String, nullable=False)
    debit = Column(Numeric(14, 2), nullable=False, default=0)
    credit = Column(Numeric(14, 2), nullable=False, default=0)
    due_date = Column(Date, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class DebtRecord(Base):
    """Receivable/payable record model.

    Lifecycle state lives in the ``status`` column of this single table.
    """

    __tablename__ = "debt_records"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    nationality = Column(String, nullable=True)
    description = Column(String, nullable=True)
    date = Column(String, nullable=False)
    particulars = Column(String, nullable=False, default="")
    main_category = Column(String, nullable=False)
    sub_category = Column(String, nullable=False)
    debit = Column(Numeric(14, 2), nullable=False, default=0)
    credit = Column(Numeric(14, 2), nullable=False, default=0)
    due_date = Column(Date, nullable=True)
    notes = Column(String, nullable=True)
    status = Column(String(16), nullable=False, default="Active")
    status_changed_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_debt_records_status", "status"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
