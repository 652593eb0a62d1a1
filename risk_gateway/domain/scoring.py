"""Risk scoring engine - core business logic for customer risk assessment"""

import logging
import math
from typing import Iterable, List, Optional

from risk_gateway.config import settings
from risk_gateway.domain.exceptions import DivisionByZeroError, ValidationError
from risk_gateway.domain.models import (
    CustomerProfile,
    RiskFactors,
    RiskLevel,
    RiskScore,
    ScoringOutcome,
)
from risk_gateway.infrastructure.observability.logging import log_risk_score
from risk_gateway.infrastructure.observability.metrics import record_risk_score, record_scoring_failure

logger = logging.getLogger(__name__)

# Component weights (sum to 100)
CREDIT_SCORE_WEIGHT = 40
REPAYMENT_HISTORY_WEIGHT = 30
LOAN_RATIO_WEIGHT = 30

# Standard bureau scale
MIN_CREDIT_SCORE = 300
MAX_CREDIT_SCORE = 850

# Level breakpoints: score < 30 Low, < 60 Medium, otherwise High
LOW_RISK_THRESHOLD = 30
HIGH_RISK_THRESHOLD = 60

RISK_COLORS = {
    RiskLevel.LOW: "#52c41a",
    RiskLevel.MEDIUM: "#faad14",
    RiskLevel.HIGH: "#f5222d",
}


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores use the usual half-up rule
    return int(math.floor(value + 0.5))


def _require_finite(value: float, field: str, customer_id: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(field, "a finite number", value, customer_id)


def validate_profile(profile: CustomerProfile, loan_period_months: float) -> None:
    """
    Check every scoring precondition before any arithmetic happens.

    Raises:
        ValidationError: naming the offending field and its expected range
        DivisionByZeroError: when monthly income is zero
    """
    cid = profile.customer_id

    credit = profile.credit_score
    if isinstance(credit, bool) or not isinstance(credit, int):
        raise ValidationError("credit_score", "an integer", credit, cid)
    if not MIN_CREDIT_SCORE <= credit <= MAX_CREDIT_SCORE:
        raise ValidationError(
            "credit_score", f"between {MIN_CREDIT_SCORE} and {MAX_CREDIT_SCORE}", credit, cid
        )

    _require_finite(profile.monthly_income, "monthly_income", cid)
    if profile.monthly_income < 0:
        raise ValidationError("monthly_income", ">= 0", profile.monthly_income, cid)

    _require_finite(profile.outstanding_loans, "outstanding_loans", cid)
    if profile.outstanding_loans < 0:
        raise ValidationError("outstanding_loans", ">= 0", profile.outstanding_loans, cid)

    _require_finite(loan_period_months, "loan_period_months", cid)
    if loan_period_months <= 0:
        raise ValidationError("loan_period_months", "> 0", loan_period_months, cid)

    for payment in profile.loan_repayment_history:
        if isinstance(payment, bool) or payment not in (0, 1):
            raise ValidationError(
                "loan_repayment_history", "a sequence of 0 (missed) or 1 (paid)", payment, cid
            )

    if profile.monthly_income == 0:
        raise DivisionByZeroError(profile.monthly_income, cid)


def credit_score_impact(credit_score: int) -> float:
    """Invert and normalize the bureau score: 850 contributes 0, 300 the full weight"""
    normalized = (MAX_CREDIT_SCORE - credit_score) / (MAX_CREDIT_SCORE - MIN_CREDIT_SCORE)
    return _clamp(normalized) * CREDIT_SCORE_WEIGHT


def repayment_history_impact(history: Iterable[int]) -> float:
    """
    Fraction of missed payments scaled to the component weight.

    An empty history is treated as average risk and contributes exactly half
    of the weight.
    """
    history = list(history)
    if not history:
        return REPAYMENT_HISTORY_WEIGHT / 2
    missed = sum(1 for payment in history if payment == 0)
    return (missed / len(history)) * REPAYMENT_HISTORY_WEIGHT


def loan_to_income_impact(
    outstanding_loans: float,
    monthly_income: float,
    loan_period_months: float,
    ceiling: float,
) -> float:
    """
    Monthly debt burden relative to income, normalized against the ceiling.

    Thresholds rationale:
    - burden = outstanding principal spread evenly over the loan period
    - ratio >= ceiling (50% debt-to-income by default) is maximal risk
    """
    monthly_burden = outstanding_loans / loan_period_months
    ratio = monthly_burden / monthly_income
    return _clamp(ratio / ceiling) * LOAN_RATIO_WEIGHT


def classify_risk_level(score: float) -> RiskLevel:
    """Map a score to its risk level using the fixed breakpoints"""
    if score < LOW_RISK_THRESHOLD:
        return RiskLevel.LOW
    elif score < HIGH_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.HIGH


def risk_color(score: float) -> str:
    """Display colour for a score (green / amber / red)"""
    return RISK_COLORS[classify_risk_level(score)]


def score_customer(
    profile: CustomerProfile,
    loan_period_months: Optional[float] = None,
    *,
    ceiling: Optional[float] = None,
) -> RiskScore:
    """
    Main entry point: compute a bounded, explainable risk score (0-100, higher is riskier).

    Scoring weights:
    - 40: Credit score (lower bureau score is riskier)
    - 30: Repayment history (share of missed payments)
    - 30: Loan-to-income ratio (monthly burden over income)

    The total is summed from un-rounded components and rounded once; each
    factor is rounded independently, so factors may re-sum to score +/- 1.

    Raises:
        ValidationError: on out-of-range input, nothing partial is returned
        DivisionByZeroError: when monthly income is zero
    """
    if loan_period_months is None:
        loan_period_months = settings.default_loan_period_months
    if ceiling is None:
        ceiling = settings.loan_to_income_ceiling
    if not ceiling > 0:
        raise ValidationError("loan_to_income_ceiling", "> 0", ceiling, profile.customer_id)

    validate_profile(profile, loan_period_months)

    credit = credit_score_impact(profile.credit_score)
    repayment = repayment_history_impact(profile.loan_repayment_history)
    loan_ratio = loan_to_income_impact(
        profile.outstanding_loans, profile.monthly_income, loan_period_months, ceiling
    )

    score = _round_half_up(credit + repayment + loan_ratio)

    return RiskScore(
        customer_id=profile.customer_id,
        score=score,
        level=classify_risk_level(score),
        factors=RiskFactors(
            credit_score_impact=_round_half_up(credit),
            repayment_history_impact=_round_half_up(repayment),
            loan_to_income_ratio_impact=_round_half_up(loan_ratio),
        ),
    )


def score_all(
    profiles: Iterable[CustomerProfile],
    loan_period_months: Optional[float] = None,
) -> List[ScoringOutcome]:
    """
    Score every profile, preserving order.

    A profile that fails validation yields an outcome carrying the error; the
    rest of the batch is still scored.
    """
    outcomes = []
    for profile in profiles:
        try:
            risk_score = score_customer(profile, loan_period_months)
        except ValidationError as e:
            record_scoring_failure(e.field)
            logger.warning(
                f"Scoring failed: {e}",
                extra={"customer_id": e.customer_id, "step": "scoring", "field": e.field},
            )
            outcomes.append(ScoringOutcome(customer_id=profile.customer_id, error=e))
            continue

        record_risk_score(risk_score.level)
        log_risk_score(risk_score)
        outcomes.append(ScoringOutcome(customer_id=profile.customer_id, risk_score=risk_score))

    return outcomes
