"""Pytest fixtures for testing"""

import pytest
from unittest.mock import AsyncMock
from risk_gateway.domain.models import CustomerProfile, CustomerStatus
from risk_gateway.domain.workflow import WorkflowCoordinator
from risk_gateway.infrastructure.store import InMemoryCustomerStore


@pytest.fixture
def medium_risk_profile() -> CustomerProfile:
    """Reference customer scoring 37 (Medium)"""
    return CustomerProfile(
        customer_id="CUST-001",
        name="Ada Mensah",
        monthly_income=4000,
        monthly_expenses=2500,
        credit_score=620,
        outstanding_loans=24000,
        loan_repayment_history=(1, 1, 0, 1, 1, 1),
        account_balance=1500,
        status=CustomerStatus.REVIEW,
    )


@pytest.fixture
def low_risk_profile() -> CustomerProfile:
    """Excellent credit, clean history, no debt"""
    return CustomerProfile(
        customer_id="CUST-002",
        name="Ben Okafor",
        monthly_income=9000,
        monthly_expenses=3000,
        credit_score=820,
        outstanding_loans=0,
        loan_repayment_history=(1, 1, 1, 1, 1, 1),
        status=CustomerStatus.REVIEW,
    )


@pytest.fixture
def high_risk_profile() -> CustomerProfile:
    """Poor credit, mostly missed payments, heavy debt burden"""
    return CustomerProfile(
        customer_id="CUST-003",
        name="Carla Ruiz",
        monthly_income=2000,
        monthly_expenses=1900,
        credit_score=380,
        outstanding_loans=36000,
        loan_repayment_history=(0, 0, 1, 0, 0, 1),
        status=CustomerStatus.REVIEW,
    )


@pytest.fixture
def store(medium_risk_profile, low_risk_profile, high_risk_profile) -> InMemoryCustomerStore:
    return InMemoryCustomerStore([medium_risk_profile, low_risk_profile, high_risk_profile])


@pytest.fixture
def alert_sink() -> AsyncMock:
    """Alert sink double recording notify() calls"""
    sink = AsyncMock()
    sink.notify.return_value = None
    return sink


@pytest.fixture
def coordinator(store: InMemoryCustomerStore, alert_sink: AsyncMock) -> WorkflowCoordinator:
    return WorkflowCoordinator(store=store, alert_sink=alert_sink, alert_timeout=1.0)
