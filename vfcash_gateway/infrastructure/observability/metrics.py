"""Prometheus metrics for ingestion volume, validation failures and limit changes"""

from prometheus_client import Counter, Gauge, Histogram

from vfcash_gateway.domain.models import UpsertSummary

# Ingestion metrics
transactions_ingested_counter = Counter(
    "vfcash_transactions_ingested_total",
    "Transactions written to the store",
    ["outcome"],  # added | updated
)

validation_failure_counter = Counter(
    "vfcash_validation_failures_total",
    "Rejected submissions",
    ["kind"],  # transaction | limits | sms
)

transaction_store_size_gauge = Gauge(
    "vfcash_transaction_store_size",
    "Transactions currently held by the store",
)

# Limits metrics
limits_update_counter = Counter(
    "vfcash_limits_updates_total",
    "Successful limits replacements",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_ingestion(summary: UpsertSummary) -> None:
    """Record counts from one store write"""
    if summary.added:
        transactions_ingested_counter.labels(outcome="added").inc(summary.added)
    if summary.updated:
        transactions_ingested_counter.labels(outcome="updated").inc(summary.updated)
    transaction_store_size_gauge.set(summary.total)
