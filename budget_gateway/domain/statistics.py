"""Aggregation helpers for wallet statistics"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple
from budget_gateway.domain.models import INCOME, MonthlyBucket, PredictedOccurrence, Totals
from budget_gateway.utils.date_utils import month_key


def fold_predictions(totals: Totals, predictions: Iterable[PredictedOccurrence]) -> Totals:
    """Return a copy of `totals` with predicted income/outcome added"""
    income = totals.income
    outcome = totals.outcome

    for prediction in predictions:
        if prediction.type == INCOME:
            income += prediction.amount
        else:
            outcome += prediction.amount

    return Totals(income=income, outcome=outcome)


def build_monthly_breakdown(rows: Iterable[Tuple[date, str, Decimal]]) -> List[MonthlyBucket]:
    """
    Group (date, type, amount) rows by calendar month.

    Months without transactions are omitted. cumulative and predicted_*
    are left at zero.
    """
    buckets: Dict[str, MonthlyBucket] = {}

    for txn_date, txn_type, amount in rows:
        key = month_key(txn_date)
        bucket = buckets.setdefault(key, MonthlyBucket(month=key))
        if txn_type == INCOME:
            bucket.income += amount
        else:
            bucket.outcome += amount

    return [buckets[key] for key in sorted(buckets)]
