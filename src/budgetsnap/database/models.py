"""SQLAlchemy models for budgetsnap database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class BudgetEntry(Base):
    """One-time budget entry model."""

    __tablename__ = "budget_entries"

    id = Column(String(36), primary_key=True, default=_new_id)
    owner_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    paid_on = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class BudgetRule(Base):
    """Recurring budget rule model."""

    __tablename__ = "budget_rules"

    id = Column(String(36), primary_key=True, default=_new_id)
    owner_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Numeric(12, 2), nullable=False)
    frequency = Column(String, nullable=False)
    dom = Column(Integer, nullable=True)
    dow = Column(Integer, nullable=True)
    interval = Column(Integer, nullable=False, default=1)
    start_anchor = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    entry_id = Column(String(36), ForeignKey("budget_entries.id", ondelete="SET NULL"), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    overrides = relationship(
        "BudgetRuleOverride", back_populates="rule", cascade="all, delete-orphan"
    )


class BudgetRuleOverride(Base):
    """Per-occurrence override model."""

    __tablename__ = "budget_rule_overrides"

    id = Column(String(36), primary_key=True, default=_new_id)
    owner_id = Column(String, nullable=False, index=True)
    rule_id = Column(String(36), ForeignKey("budget_rules.id"), nullable=False)
    occurrence_date = Column(Date, nullable=False)
    override_type = Column(String, nullable=False)
    paid_on = Column(Date, nullable=True)
    new_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # One override per occurrence; writes upsert on this key
    __table_args__ = (
        UniqueConstraint(
            "owner_id", "rule_id", "occurrence_date", name="uq_owner_rule_occurrence"
        ),
    )

    # Relationships
    rule = relationship("BudgetRule", back_populates="overrides")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
