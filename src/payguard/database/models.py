"""SQLAlchemy models for payguard database."""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Subscription(Base):
    """Subscription model."""

    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String, nullable=False)
    frequency = Column(String, nullable=False)
    next_debit_date = Column(DateTime, nullable=False)
    category = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    merchant = Column(String, nullable=True)
    last_debit_date = Column(DateTime, nullable=True)
    bank_account = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    cancelled_at = Column(DateTime, nullable=True)
    sync_to_calendar = Column(Boolean, default=False, nullable=False)
    calendar_event_id = Column(String, nullable=True)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String, nullable=False)
    merchant = Column(String, nullable=True)
    date = Column(DateTime, nullable=False)
    description = Column(String, nullable=False)
    bank_account = Column(String, nullable=True)
    # Dangling references after a subscription delete are tolerated, so no foreign key
    subscription_id = Column(String(36), nullable=True)
    is_subscription = Column(Boolean, default=False, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Saves run on the side-effect worker thread
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
