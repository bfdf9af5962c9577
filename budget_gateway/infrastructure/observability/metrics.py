"""Prometheus metrics for predictions, statistics and balance adjustments"""

from prometheus_client import Counter, Histogram

# Prediction metrics
predictions_generated_counter = Counter(
    "budget_predictions_generated_total",
    "Predicted occurrences returned after window filtering",
)

prediction_anchor_histogram = Histogram(
    "budget_prediction_anchors",
    "Recurring anchors expanded per prediction request",
    buckets=[0, 1, 5, 10, 25, 50, 100, 250],
)

# Statistics metrics
stats_prediction_fallback_counter = Counter(
    "budget_stats_prediction_fallback_total",
    "Stats responses that fell back to real-only figures after a prediction failure",
)

# Adjustment metrics
adjustment_counter = Counter(
    "budget_balance_adjustments_total",
    "Balance adjustment requests by outcome",
    ["direction"],  # income | outcome | none
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_predictions(anchor_count: int, prediction_count: int) -> None:
    """Record how much work one prediction request did"""
    prediction_anchor_histogram.observe(anchor_count)
    predictions_generated_counter.inc(prediction_count)


def record_adjustment(transaction_type: str | None) -> None:
    """Record adjustment direction; None means the balance was already correct"""
    adjustment_counter.labels(direction=transaction_type or "none").inc()
