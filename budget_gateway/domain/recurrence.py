"""Recurrence rules and occurrence generation for recurring transactions"""

from datetime import date, timedelta
from typing import Dict, List
from dateutil.relativedelta import relativedelta
from budget_gateway.domain.models import RecurringAnchor, PredictedOccurrence

# relativedelta clamps to the last day of the target month:
# Jan 31 + 1 month -> Feb 28 (or 29), Feb 29 + 1 year -> Feb 28.
RECURRENCE_DELTAS: Dict[str, relativedelta | timedelta] = {
    "daily": timedelta(days=1),
    "weekly": timedelta(weeks=1),
    "biweekly": timedelta(weeks=2),
    "monthly": relativedelta(months=1),
    "bimonthly": relativedelta(months=2),
    "quarterly": relativedelta(months=3),
    "yearly": relativedelta(years=1),
}

DEFAULT_DELTA = RECURRENCE_DELTAS["monthly"]


def next_occurrence(current: date, frequency: str | None) -> date:
    """Return the occurrence following `current`; unknown frequencies step monthly"""
    return current + RECURRENCE_DELTAS.get(frequency, DEFAULT_DELTA)


def generate_occurrences(anchor: RecurringAnchor, horizon_end: date) -> List[PredictedOccurrence]:
    """
    Expand a recurring anchor into its virtual future occurrences.

    The anchor date itself is never emitted. Occurrences are produced by
    repeatedly applying the recurrence rule to the previous occurrence, so a
    clamped month-end day carries forward (Jan 31 -> Feb 29 -> Mar 29).

    Args:
        anchor: Recurring transaction acting as template
        horizon_end: Last date to consider (inclusive); always finite

    Returns:
        Occurrences in ascending date order, each <= min(recurrence end, horizon)
    """
    limit = horizon_end
    if anchor.recurrence_end_date is not None and anchor.recurrence_end_date < horizon_end:
        limit = anchor.recurrence_end_date

    occurrences = []
    current = anchor.date
    while True:
        current = next_occurrence(current, anchor.recurrence_type)
        if current > limit:
            break

        occurrences.append(
            PredictedOccurrence(
                type=anchor.type,
                amount=anchor.amount,
                date=current,
                original_transaction_id=anchor.transaction_id,
                description=anchor.description,
                category_id=anchor.category_id,
                category_name=anchor.category_name,
            )
        )

    return occurrences
