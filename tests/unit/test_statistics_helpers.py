"""Unit tests for statistics aggregation helpers"""

from datetime import date
from decimal import Decimal
from budget_gateway.domain.models import PredictedOccurrence, Totals
from budget_gateway.domain.statistics import build_monthly_breakdown, fold_predictions


def prediction(type_: str, amount: str, on: date) -> PredictedOccurrence:
    return PredictedOccurrence(type=type_, amount=Decimal(amount), date=on, original_transaction_id=1)


def test_fold_predictions_adds_by_type():
    totals = Totals(income=Decimal("100.00"), outcome=Decimal("40.00"))
    folded = fold_predictions(
        totals,
        [
            prediction("income", "10.10", date(2024, 2, 1)),
            prediction("outcome", "5.05", date(2024, 2, 2)),
            prediction("outcome", "1.00", date(2024, 2, 3)),
        ],
    )

    assert folded.income == Decimal("110.10")
    assert folded.outcome == Decimal("46.05")
    assert folded.balance == Decimal("64.05")
    # Input totals untouched
    assert totals.income == Decimal("100.00")


def test_fold_predictions_avoids_float_drift():
    """Ten 0.10 occurrences sum to exactly 1.00"""
    folded = fold_predictions(Totals(), [prediction("income", "0.10", date(2024, 1, d)) for d in range(1, 11)])
    assert folded.income == Decimal("1.00")


def test_monthly_breakdown_groups_and_sorts():
    rows = [
        (date(2024, 3, 2), "income", Decimal("50.00")),
        (date(2024, 1, 5), "income", Decimal("1000.00")),
        (date(2024, 1, 20), "outcome", Decimal("200.00")),
        (date(2024, 3, 30), "outcome", Decimal("80.00")),
    ]

    buckets = build_monthly_breakdown(rows)

    assert [b.month for b in buckets] == ["2024-01", "2024-03"]
    assert buckets[0].income == Decimal("1000.00")
    assert buckets[0].outcome == Decimal("200.00")
    assert buckets[0].balance == Decimal("800.00")
    assert buckets[1].balance == Decimal("-30.00")
    assert all(b.cumulative == 0 and b.predicted_income == 0 and b.predicted_outcome == 0 for b in buckets)


def test_monthly_breakdown_empty():
    assert build_monthly_breakdown([]) == []
