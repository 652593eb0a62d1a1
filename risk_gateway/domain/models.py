"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from risk_gateway.domain.exceptions import ValidationError


class CustomerStatus(str, Enum):
    """Workflow state of a customer application"""

    REVIEW = "Review"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class RiskLevel(str, Enum):
    """Categorical risk derived from the numeric score"""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class CustomerProfile:
    """Customer financial record as provided by the customer store"""

    customer_id: str
    monthly_income: float
    outstanding_loans: float
    credit_score: int
    loan_repayment_history: Tuple[int, ...] = ()  # 1 = paid, 0 = missed
    status: CustomerStatus = CustomerStatus.REVIEW
    name: str = ""
    monthly_expenses: float = 0.0
    account_balance: float = 0.0

    def __post_init__(self) -> None:
        # Accept lists from callers but keep the profile hashable/immutable
        if not isinstance(self.loan_repayment_history, tuple):
            object.__setattr__(self, "loan_repayment_history", tuple(self.loan_repayment_history))
        if not isinstance(self.status, CustomerStatus):
            try:
                object.__setattr__(self, "status", CustomerStatus(self.status))
            except ValueError as e:
                raise ValidationError(
                    field="status",
                    expected="one of Review, Approved, Rejected",
                    value=self.status,
                    customer_id=self.customer_id,
                ) from e


@dataclass(frozen=True)
class RiskFactors:
    """Per-category contribution to the total score, rounded for display"""

    credit_score_impact: int
    repayment_history_impact: int
    loan_to_income_ratio_impact: int


@dataclass(frozen=True)
class RiskScore:
    """Output of risk assessment"""

    customer_id: str
    score: int
    level: RiskLevel
    factors: RiskFactors


@dataclass(frozen=True)
class ScoringOutcome:
    """Single item of a batch scoring run"""

    customer_id: str
    risk_score: Optional[RiskScore] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class WorkflowDecision:
    """Requested transition paired with the score computed at transition time"""

    customer_id: str
    previous_status: CustomerStatus
    new_status: CustomerStatus
    risk_score: RiskScore
    notes: str = ""

    @property
    def alert_required(self) -> bool:
        return self.new_status == CustomerStatus.APPROVED and self.risk_score.level == RiskLevel.HIGH


@dataclass
class PortfolioMetrics:
    """Aggregate figures across the customer book"""

    total_customers: int = 0
    average_income: float = 0.0
    average_expenses: float = 0.0
    average_credit_score: float = 0.0
    total_outstanding_loans: float = 0.0
    high_risk_customers: int = 0
    unscored_customers: int = 0
    risk_distribution: Dict[RiskLevel, int] = field(
        default_factory=lambda: {level: 0 for level in RiskLevel}
    )
