"""Unit tests for portfolio aggregates"""

import pytest
from dataclasses import replace
from risk_gateway.domain.models import CustomerStatus, RiskLevel
from risk_gateway.domain.portfolio import status_counts, summarize_portfolio


def test_summarize_empty_portfolio():
    metrics = summarize_portfolio([])

    assert metrics.total_customers == 0
    assert metrics.average_income == 0
    assert metrics.high_risk_customers == 0
    assert metrics.risk_distribution == {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 0, RiskLevel.HIGH: 0}


def test_summarize_portfolio(medium_risk_profile, low_risk_profile, high_risk_profile):
    metrics = summarize_portfolio([medium_risk_profile, low_risk_profile, high_risk_profile])

    assert metrics.total_customers == 3
    assert metrics.average_income == 5000  # (4000 + 9000 + 2000) / 3
    assert metrics.average_expenses == pytest.approx(7400 / 3)
    assert metrics.average_credit_score == pytest.approx(1820 / 3)
    assert metrics.total_outstanding_loans == 60000
    assert metrics.high_risk_customers == 1
    assert metrics.unscored_customers == 0
    assert metrics.risk_distribution == {RiskLevel.LOW: 1, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 1}


def test_unscorable_customers_are_counted_separately(medium_risk_profile, high_risk_profile):
    no_income = replace(medium_risk_profile, customer_id="CUST-009", monthly_income=0)

    metrics = summarize_portfolio([no_income, high_risk_profile])

    assert metrics.total_customers == 2
    assert metrics.unscored_customers == 1
    assert metrics.average_income == 1000
    assert sum(metrics.risk_distribution.values()) == 1
    assert metrics.high_risk_customers == 1


def test_status_counts(medium_risk_profile, low_risk_profile, high_risk_profile):
    approved = replace(low_risk_profile, status=CustomerStatus.APPROVED)

    counts = status_counts([medium_risk_profile, approved, high_risk_profile])

    assert counts == {
        CustomerStatus.REVIEW: 2,
        CustomerStatus.APPROVED: 1,
        CustomerStatus.REJECTED: 0,
    }
