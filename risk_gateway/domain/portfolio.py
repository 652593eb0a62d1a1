"""Portfolio-level aggregates over the customer book"""

from collections import Counter
from typing import Dict, Iterable

from risk_gateway.domain.models import CustomerProfile, CustomerStatus, PortfolioMetrics, RiskLevel
from risk_gateway.domain.scoring import score_all


def summarize_portfolio(profiles: Iterable[CustomerProfile]) -> PortfolioMetrics:
    """
    Compute dashboard metrics for a set of customers.

    Averages cover every customer. The risk distribution only covers customers
    that could be scored; the rest are counted in unscored_customers.
    """
    profiles = list(profiles)
    if not profiles:
        return PortfolioMetrics()

    total = len(profiles)
    outcomes = score_all(profiles)
    levels = Counter(o.risk_score.level for o in outcomes if o.ok)

    return PortfolioMetrics(
        total_customers=total,
        average_income=sum(p.monthly_income for p in profiles) / total,
        average_expenses=sum(p.monthly_expenses for p in profiles) / total,
        average_credit_score=sum(p.credit_score for p in profiles) / total,
        total_outstanding_loans=sum(p.outstanding_loans for p in profiles),
        high_risk_customers=levels[RiskLevel.HIGH],
        unscored_customers=sum(1 for o in outcomes if not o.ok),
        risk_distribution={level: levels[level] for level in RiskLevel},
    )


def status_counts(profiles: Iterable[CustomerProfile]) -> Dict[CustomerStatus, int]:
    """Number of customers in each workflow state"""
    counts = Counter(p.status for p in profiles)
    return {status: counts[status] for status in CustomerStatus}
