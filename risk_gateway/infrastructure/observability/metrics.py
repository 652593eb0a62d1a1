"""Prometheus metrics for monitoring risk distribution, transitions, and alert delivery"""

from prometheus_client import Counter, Histogram

# Scoring metrics
risk_score_counter = Counter(
    "risk_scores_total",
    "Risk scores computed",
    ["level"],  # Low | Medium | High
)

scoring_failures_counter = Counter(
    "risk_scoring_failures_total",
    "Profiles rejected by scoring validation",
    ["field"],
)

# Workflow metrics
transition_counter = Counter(
    "risk_workflow_transitions_total",
    "Customer status transitions",
    ["status", "outcome"],  # outcome: success | scoring_failed | persistence_failed | alert_delivery_failed
)

transition_duration_histogram = Histogram(
    "risk_workflow_transition_duration_seconds",
    "Time spent in a status transition, including alert delivery",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Alert metrics
high_risk_alert_counter = Counter(
    "risk_high_risk_alerts_total",
    "High-risk approval alerts",
    ["outcome"],  # delivered | failed
)

alert_latency_histogram = Histogram(
    "risk_alert_webhook_latency_seconds",
    "Alert webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

alert_webhook_failure_counter = Counter(
    "risk_alert_webhook_failures_total",
    "Failed alert webhook attempts",
)


def record_risk_score(level) -> None:
    """Record score distribution by level"""
    risk_score_counter.labels(level=getattr(level, "value", level)).inc()


def record_scoring_failure(field: str) -> None:
    scoring_failures_counter.labels(field=field).inc()


def record_transition(status, outcome: str, duration_seconds: float) -> None:
    """Record transition outcome and latency"""
    transition_counter.labels(status=getattr(status, "value", status), outcome=outcome).inc()
    transition_duration_histogram.observe(duration_seconds)


def record_high_risk_alert(delivered: bool) -> None:
    high_risk_alert_counter.labels(outcome="delivered" if delivered else "failed").inc()
