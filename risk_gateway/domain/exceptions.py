"""Domain-specific exceptions"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.__class__.__name__, "message": str(self)}


class ValidationError(DomainException):
    """Customer profile or scoring input is out of range"""

    def __init__(
        self,
        field: str,
        expected: str,
        value: Any = None,
        customer_id: Optional[str] = None,
    ):
        self.field = field
        self.expected = expected
        self.value = value
        self.customer_id = customer_id
        who = f"customer {customer_id}: " if customer_id else ""
        super().__init__(f"{who}{field} must be {expected} (got {value!r})")

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "customer_id": self.customer_id,
            "field": self.field,
            "expected": self.expected,
            "value": self.value,
        }


class DivisionByZeroError(ValidationError):
    """Monthly income is zero so the loan-to-income ratio is undefined"""

    def __init__(self, value: Any = 0, customer_id: Optional[str] = None):
        super().__init__(
            field="monthly_income",
            expected="> 0 to compute the loan-to-income ratio",
            value=value,
            customer_id=customer_id,
        )


class NotFoundError(DomainException):
    """Customer does not exist in the store"""

    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} not found")


class DeliveryError(DomainException):
    """Alert sink could not deliver a notification"""

    pass


class WorkflowError(DomainException):
    """
    Status transition failed.

    Subclasses identify the failure point so callers can pick a recovery:
    reject the request, retry the write, or retry only the notification.
    """

    kind = "workflow_error"
    retryable = False
    status_changed = False

    def __init__(self, customer_id: str, message: str, cause: Optional[BaseException] = None):
        self.customer_id = customer_id
        self.cause = cause
        super().__init__(f"customer {customer_id}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "kind": self.kind,
            "customer_id": self.customer_id,
            "retryable": self.retryable,
            "status_changed": self.status_changed,
            "cause": str(self.cause) if self.cause else None,
        }


class ScoringFailed(WorkflowError):
    """Profile could not be scored, transition blocked"""

    kind = "scoring_failed"


class PersistenceFailed(WorkflowError):
    """Store rejected the status update, status unchanged"""

    kind = "persistence_failed"
    retryable = True


class AlertDeliveryFailed(WorkflowError):
    """Status was changed but the mandatory high-risk alert was not delivered"""

    kind = "alert_delivery_failed"
    retryable = True
    status_changed = True

    def __init__(self, customer_id: str, message: str, profile: Any, risk_score: Any,
                 decision: Any = None, cause: Optional[BaseException] = None):
        super().__init__(customer_id, message, cause)
        self.profile = profile
        self.risk_score = risk_score
        self.decision = decision
