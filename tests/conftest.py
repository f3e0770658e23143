"""Shared pytest fixtures for budgetsnap tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from budgetsnap.database.factories import create_sqlite_database
from budgetsnap.domain.budget import BudgetService
from budgetsnap.domain.entities import (
    EntryType,
    Frequency,
    OneTimeEntry,
    Override,
    OverrideType,
    Rule,
)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db, owner_id="tester")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def make_entry():
    """Factory for OneTimeEntry entities with sensible defaults."""

    def _make(id="e1", due_date=date(2024, 4, 10), amount="100", type=EntryType.EXPENSE, **kwargs):
        return OneTimeEntry(
            id=id,
            type=type,
            category=kwargs.pop("category", "bill"),
            description=kwargs.pop("description", f"Entry {id}"),
            amount=Decimal(amount),
            due_date=due_date,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_rule():
    """Factory for Rule entities with sensible defaults."""

    def _make(
        id="r1",
        frequency=Frequency.MONTHLY,
        start_anchor=date(2024, 1, 15),
        amount="50",
        type=EntryType.EXPENSE,
        **kwargs,
    ):
        return Rule(
            id=id,
            type=type,
            category=kwargs.pop("category", "subscription"),
            description=kwargs.pop("description", f"Rule {id}"),
            amount=Decimal(amount),
            frequency=frequency,
            start_anchor=start_anchor,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_override():
    """Factory for Override entities with sensible defaults."""

    def _make(id="o1", rule_id="r1", occurrence_date=date(2024, 4, 15), override_type=OverrideType.PAID, **kwargs):
        return Override(
            id=id,
            rule_id=rule_id,
            occurrence_date=occurrence_date,
            override_type=override_type,
            **kwargs,
        )

    return _make
