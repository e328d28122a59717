"""Prometheus metrics for spending activity and ledger maintenance"""

from prometheus_client import Counter, Histogram

# Ledger metrics
daily_log_counter = Counter(
    "daily_budget_daily_log_total",
    "Daily log initializations",
    ["action"],  # created | refreshed
)

ledger_skip_counter = Counter(
    "daily_budget_ledger_skipped_total",
    "Expense changes recorded without a daily log to update",
)

# Spending metrics
expense_counter = Counter(
    "daily_budget_expense_total",
    "Expenses recorded",
    ["category"],
)

expense_reversal_counter = Counter(
    "daily_budget_expense_deleted_total",
    "Expenses deleted",
)

budget_copy_counter = Counter(
    "daily_budget_budget_copied_total",
    "Budgets auto-copied from the previous period",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_daily_log(action: str) -> None:
    daily_log_counter.labels(action=action).inc()


def record_expense(category: str) -> None:
    expense_counter.labels(category=category).inc()
