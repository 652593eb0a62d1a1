"""In-process customer store"""

import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List

from risk_gateway.domain.exceptions import NotFoundError
from risk_gateway.domain.models import CustomerProfile, CustomerStatus


@dataclass(frozen=True)
class StatusNote:
    """Audit entry written on every status update"""

    customer_id: str
    status: CustomerStatus
    notes: str
    recorded_at: datetime


class InMemoryCustomerStore:
    """Thread-safe customer store keyed by customer_id"""

    def __init__(self, customers: Iterable[CustomerProfile] = ()):
        self._lock = threading.Lock()
        self._customers: Dict[str, CustomerProfile] = {c.customer_id: c for c in customers}
        self._notes: List[StatusNote] = []

    def list(self) -> List[CustomerProfile]:
        with self._lock:
            return list(self._customers.values())

    def get(self, customer_id: str) -> CustomerProfile:
        with self._lock:
            try:
                return self._customers[customer_id]
            except KeyError:
                raise NotFoundError(customer_id) from None

    def update(self, customer_id: str, status: CustomerStatus, notes: str = "") -> CustomerProfile:
        """Replace the stored profile with one carrying the new status"""
        with self._lock:
            current = self._customers.get(customer_id)
            if current is None:
                raise NotFoundError(customer_id)
            updated = replace(current, status=CustomerStatus(status))
            self._customers[customer_id] = updated
            self._notes.append(
                StatusNote(
                    customer_id=customer_id,
                    status=updated.status,
                    notes=notes,
                    recorded_at=datetime.now(timezone.utc),
                )
            )
            return updated

    def notes_for(self, customer_id: str) -> List[StatusNote]:
        """Status history for a customer, oldest first"""
        with self._lock:
            return [n for n in self._notes if n.customer_id == customer_id]
