"""Service wiring - builds a ready-to-use workflow coordinator"""

from typing import Iterable, Optional

from risk_gateway.config import settings
from risk_gateway.domain.models import CustomerProfile
from risk_gateway.domain.workflow import AlertSink, CustomerStore, WorkflowCoordinator
from risk_gateway.infrastructure.clients.alerts import WebhookAlertSink
from risk_gateway.infrastructure.observability.logging import setup_logging
from risk_gateway.infrastructure.store import InMemoryCustomerStore


def get_customer_store(customers: Iterable[CustomerProfile] = ()) -> InMemoryCustomerStore:
    """Provide customer store instance"""
    return InMemoryCustomerStore(customers)


def get_alert_sink() -> WebhookAlertSink:
    """Provide alert webhook client instance"""
    return WebhookAlertSink()


def create_coordinator(
    store: Optional[CustomerStore] = None,
    alert_sink: Optional[AlertSink] = None,
    configure_logging: bool = True,
) -> WorkflowCoordinator:
    """Create and configure the workflow coordinator with default adapters"""
    if configure_logging:
        setup_logging(settings.log_level)

    return WorkflowCoordinator(
        store=store if store is not None else get_customer_store(),
        alert_sink=alert_sink if alert_sink is not None else get_alert_sink(),
        alert_timeout=settings.alert_timeout_seconds,
        loan_period_months=settings.default_loan_period_months,
    )
