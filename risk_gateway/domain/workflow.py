"""Approval workflow - status transitions gated by the high-risk alert rule"""

import asyncio
import logging
import time
from dataclasses import replace
from typing import List, Optional, Protocol, Tuple, Union

from risk_gateway.config import settings
from risk_gateway.domain.exceptions import (
    AlertDeliveryFailed,
    NotFoundError,
    PersistenceFailed,
    ScoringFailed,
    ValidationError,
)
from risk_gateway.domain.models import (
    CustomerProfile,
    CustomerStatus,
    ScoringOutcome,
    WorkflowDecision,
)
from risk_gateway.domain.scoring import score_all, score_customer
from risk_gateway.infrastructure.observability.logging import (
    log_high_risk_alert,
    log_risk_score,
    log_transition,
)
from risk_gateway.infrastructure.observability.metrics import (
    record_high_risk_alert,
    record_risk_score,
    record_scoring_failure,
    record_transition,
)
from risk_gateway.utils.locks import KeyedLock

logger = logging.getLogger(__name__)


class CustomerStore(Protocol):
    """Owner of customer records"""

    def list(self) -> List[CustomerProfile]: ...

    def get(self, customer_id: str) -> CustomerProfile:
        """Current stored record; raises NotFoundError"""
        ...

    def update(self, customer_id: str, status: CustomerStatus, notes: str = "") -> CustomerProfile:
        """Set the status and return the updated profile; raises NotFoundError"""
        ...


class AlertSink(Protocol):
    """Delivery channel for high-risk approval alerts"""

    async def notify(self, customer_id: str, score: int) -> None:
        """Deliver the alert; raises DeliveryError"""
        ...


class WorkflowCoordinator:
    """
    Mediates status transitions for customers.

    Any status may move to any other. The hard rule is the side effect:
    approving a High-risk customer is not complete until the alert sink has
    accepted the alert. Transitions on the same customer are serialized;
    different customers proceed independently.
    """

    def __init__(
        self,
        store: CustomerStore,
        alert_sink: AlertSink,
        alert_timeout: Optional[float] = None,
        loan_period_months: Optional[float] = None,
    ):
        self.store = store
        self.alert_sink = alert_sink
        self.alert_timeout = settings.alert_timeout_seconds if alert_timeout is None else alert_timeout
        self.loan_period_months = loan_period_months
        self._locks = KeyedLock()

    def customers_with_risk(self) -> List[Tuple[CustomerProfile, ScoringOutcome]]:
        """Every stored customer paired with its current scoring outcome"""
        customers = self.store.list()
        return list(zip(customers, score_all(customers, self.loan_period_months)))

    async def transition(
        self,
        profile: CustomerProfile,
        new_status: Union[CustomerStatus, str],
        notes: str = "",
    ) -> CustomerProfile:
        """
        Move a customer to a new status.

        Flow:
        1. Score the profile from its current financial data
        2. Read the stored status, then persist the new one through the customer store
        3. Deliver the high-risk alert if a High-risk customer is being approved
           (cancelled here: the stored previous status is written back)
        4. Return the updated profile

        Raises:
            ValidationError: new_status is not a known status
            ScoringFailed: profile invalid, nothing was changed (not retryable)
            PersistenceFailed: store rejected the update, nothing was changed
            AlertDeliveryFailed: status changed, alert must be retried via resend_alert
        """
        try:
            new_status = CustomerStatus(new_status)
        except ValueError as e:
            raise ValidationError(
                "new_status", "one of Review, Approved, Rejected", new_status, profile.customer_id
            ) from e

        start_time = time.perf_counter()
        customer_id = profile.customer_id

        async with self._locks.hold(customer_id):
            # 1. Score
            try:
                risk_score = score_customer(profile, self.loan_period_months)
            except ValidationError as e:
                record_scoring_failure(e.field)
                self._finish(customer_id, None, new_status, start_time, ScoringFailed.kind)
                raise ScoringFailed(customer_id, f"cannot score profile: {e}", cause=e) from e
            record_risk_score(risk_score.level)
            log_risk_score(risk_score)

            # 2. Persist, reading the stored status first: the caller's copy may be stale
            previous_status = None
            try:
                previous_status = self.store.get(customer_id).status
                updated = self.store.update(customer_id, new_status, notes)
            except NotFoundError as e:
                self._finish(customer_id, previous_status, new_status, start_time,
                             PersistenceFailed.kind, risk_score.score)
                raise PersistenceFailed(customer_id, str(e), cause=e) from e
            except Exception as e:
                self._finish(customer_id, previous_status, new_status, start_time,
                             PersistenceFailed.kind, risk_score.score)
                raise PersistenceFailed(customer_id, f"status update failed: {e}", cause=e) from e

            decision = WorkflowDecision(
                customer_id=customer_id,
                previous_status=previous_status,
                new_status=new_status,
                risk_score=risk_score,
                notes=notes,
            )

            # 3. Alert
            if decision.alert_required:
                try:
                    await self._deliver_alert(decision)
                except asyncio.CancelledError:
                    self._restore(decision)
                    raise
                except Exception as e:
                    self._finish(customer_id, previous_status, new_status, start_time,
                                 AlertDeliveryFailed.kind, risk_score.score)
                    raise AlertDeliveryFailed(
                        customer_id,
                        f"status set to {new_status.value} but high-risk alert was not delivered: {e!r}",
                        profile=updated,
                        risk_score=risk_score,
                        decision=decision,
                        cause=e,
                    ) from e

            self._finish(customer_id, previous_status, new_status, start_time, "success", risk_score.score)
            return updated

    async def resend_alert(self, failed: Union[AlertDeliveryFailed, WorkflowDecision]) -> None:
        """
        Retry only the notification of a transition whose status change already landed.

        Accepts the AlertDeliveryFailed raised by transition, or the decision it carries.

        Raises:
            AlertDeliveryFailed: delivery failed again
        """
        if isinstance(failed, AlertDeliveryFailed):
            decision = failed.decision or WorkflowDecision(
                customer_id=failed.customer_id,
                previous_status=CustomerStatus.APPROVED,
                new_status=CustomerStatus.APPROVED,
                risk_score=failed.risk_score,
            )
            profile = failed.profile
        else:
            decision = failed
            profile = None

        retry = replace(decision, notes="alert retry")
        async with self._locks.hold(retry.customer_id):
            try:
                await self._deliver_alert(retry)
            except Exception as e:
                raise AlertDeliveryFailed(
                    retry.customer_id,
                    f"high-risk alert retry failed: {e!r}",
                    profile=profile,
                    risk_score=retry.risk_score,
                    decision=decision,
                    cause=e,
                ) from e

    async def _deliver_alert(self, decision: WorkflowDecision) -> None:
        score = decision.risk_score.score
        try:
            await asyncio.wait_for(
                self.alert_sink.notify(decision.customer_id, score),
                timeout=self.alert_timeout,
            )
        except Exception:
            record_high_risk_alert(delivered=False)
            log_high_risk_alert(decision.customer_id, score, delivered=False, notes=decision.notes)
            raise
        record_high_risk_alert(delivered=True)
        log_high_risk_alert(decision.customer_id, score, delivered=True, notes=decision.notes)

    def _restore(self, decision: WorkflowDecision) -> None:
        """Put the stored pre-transition status back after a cancelled alert"""
        try:
            self.store.update(
                decision.customer_id,
                decision.previous_status,
                "transition cancelled before high-risk alert completed",
            )
        except Exception:
            logger.exception(
                "Failed to restore status after cancelled transition",
                extra={"customer_id": decision.customer_id, "step": "restore"},
            )
            raise
        logger.warning(
            "Transition cancelled, status restored",
            extra={
                "customer_id": decision.customer_id,
                "step": "restore",
                "previous_status": decision.previous_status.value,
            },
        )

    @staticmethod
    def _finish(
        customer_id: str,
        previous_status: Optional[CustomerStatus],
        new_status: CustomerStatus,
        start_time: float,
        outcome: str,
        score: Optional[int] = None,
    ) -> None:
        duration = time.perf_counter() - start_time
        record_transition(new_status, outcome, duration)
        log_transition(
            customer_id=customer_id,
            previous_status=previous_status.value if previous_status else None,
            new_status=new_status.value,
            outcome=outcome,
            duration_ms=duration * 1000,
            score=score,
            error_kind=None if outcome == "success" else outcome,
        )
