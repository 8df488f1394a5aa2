"""Prometheus metrics for money movement, tax lifecycle events and HTTP latency"""

from prometheus_client import Counter, Histogram

# Money movement metrics
money_movement_counter = Counter(
    "treasury_money_movement_total",
    "Deposits, withdrawals, transfers, fees, interest and reversals",
    ["type", "outcome"],  # outcome: completed | failed | reversed
)

money_movement_amount_histogram = Histogram(
    "treasury_money_movement_amount_cents",
    "Size of completed money movements in minor units",
    ["type"],
    buckets=[100, 1_000, 10_000, 100_000, 1_000_000, 10_000_000],
)

# Treasury metrics
tax_payment_event_counter = Counter(
    "treasury_tax_payment_events_total",
    "Tax payment lifecycle events",
    ["event"],  # created | completed | failed | refunded | voided
)

filing_transition_counter = Counter(
    "treasury_filing_transitions_total",
    "Tax filing status transitions",
    ["status"],
)

reconciliation_failure_counter = Counter(
    "treasury_reconciliation_failures_total",
    "Payment-to-filing reconciliations that could not be applied",
)

# Storage
concurrency_conflict_counter = Counter(
    "treasury_concurrency_conflicts_total",
    "Updates rejected because the record changed since it was read",
    ["entity"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_money_movement(movement_type: str, amount_cents: int, outcome: str = "completed") -> None:
    """Count a money movement and, when it completed, observe its size"""
    money_movement_counter.labels(type=movement_type, outcome=outcome).inc()
    if outcome == "completed":
        money_movement_amount_histogram.labels(type=movement_type).observe(amount_cents)


def record_payment_event(event: str) -> None:
    tax_payment_event_counter.labels(event=event).inc()


def record_filing_transition(status: str) -> None:
    filing_transition_counter.labels(status=status).inc()
