"""
Pytest configuration and shared fixtures for the freedom point planner tests.
"""

import pytest

from freedom_point.config import reset_global_settings
from freedom_point.models import BalanceSheet, ExpenseModel, LifePlan, RevenueModel, Stage


@pytest.fixture(autouse=True)
def app_environment(monkeypatch):
    """Provide the settings every test run needs and drop cached settings."""
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-123")
    monkeypatch.setenv("APP_ENV", "testing")
    reset_global_settings()
    yield
    reset_global_settings()


@pytest.fixture
def balance_sheet():
    """A 30 to 34 plan starting from nothing."""
    return BalanceSheet(begin=30, end=34)


@pytest.fixture
def working_stage():
    """Earns 30 a year, spends 10 a year."""
    return Stage(
        name="Working",
        description="Full-time job",
        from_age=30,
        to_age=34,
        revenue_model=RevenueModel(net_salary=30),
        expenses_model=ExpenseModel(other_expenses=10),
    )


@pytest.fixture
def life_plan(balance_sheet, working_stage):
    return LifePlan(balance_sheet=balance_sheet, stages=[working_stage])


@pytest.fixture
def client():
    from freedom_point import create_app

    app = create_app()
    with app.test_client() as test_client:
        yield test_client
