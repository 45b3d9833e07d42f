"""Prometheus metrics for deal import outcomes and HTTP performance"""

from typing import Dict, Type
from prometheus_client import Counter, Histogram

from fx_gateway.domain.deal_import import FAILURE_PREFIXES
from fx_gateway.domain.models import (
    BatchOutcome,
    BusinessRuleFailure,
    CreateResult,
    DealCreated,
    DuplicateFailure,
    StoreFailure,
    ValidationFailure,
)

# Per-deal import outcomes
deal_import_counter = Counter(
    "fx_deal_import_total",
    "FX deals processed by the import pipeline",
    ["outcome"],  # created | invalid | duplicate | currency_error | store_error
)

# Batch metrics
batch_size_histogram = Histogram(
    "fx_batch_size",
    "Number of deals per accepted batch",
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

batch_rejected_counter = Counter(
    "fx_batch_rejected_total",
    "Batches rejected before processing (missing or empty deal list)",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_deal_outcome(outcome: str) -> None:
    """Count one processed deal by terminal outcome"""
    deal_import_counter.labels(outcome=outcome).inc()


def record_batch(total_requests: int) -> None:
    """Record the size of an accepted batch"""
    batch_size_histogram.observe(total_requests)


OUTCOME_LABELS: Dict[Type, str] = {
    DealCreated: "created",
    ValidationFailure: "invalid",
    DuplicateFailure: "duplicate",
    BusinessRuleFailure: "currency_error",
    StoreFailure: "store_error",
}

# Batch failures carry only their reason text, so labels are looked up by prefix
_FAILURE_LABELS = {prefix: OUTCOME_LABELS[kind] for kind, prefix in FAILURE_PREFIXES.items()}


def record_create_result(result: CreateResult) -> None:
    """Count a single-create result"""
    record_deal_outcome(OUTCOME_LABELS[type(result)])


def record_batch_outcome(outcome: BatchOutcome) -> None:
    """Count every deal of a batch and, for accepted batches, its size"""
    if outcome.total_requests == 0:
        batch_rejected_counter.inc()
        return

    if outcome.successful_imports:
        deal_import_counter.labels(outcome="created").inc(outcome.successful_imports)
    for failure in outcome.failed_deals:
        record_deal_outcome(_FAILURE_LABELS[failure.reason.split(":", 1)[0]])
    record_batch(outcome.total_requests)
