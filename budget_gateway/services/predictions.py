"""Prediction service - virtual future occurrences of recurring transactions"""

from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from budget_gateway.domain.models import PredictedOccurrence
from budget_gateway.domain.recurrence import generate_occurrences
from budget_gateway.infrastructure.database.repositories import TransactionRepository
from budget_gateway.infrastructure.observability.metrics import record_predictions


class PredictionService:
    """Expands a wallet's recurring anchors into dated occurrences"""

    def __init__(self, db: Session):
        self.transactions = TransactionRepository(db)

    def get_oldest_recurring_date(self, wallet_id: int) -> Optional[date]:
        return self.transactions.get_oldest_recurring_date(wallet_id)

    def get_predictions(self, wallet_id: int, start_date: date, end_date: date) -> List[PredictedOccurrence]:
        """
        Predicted occurrences of every recurring anchor falling in
        [start_date, end_date], ascending by date.

        Flow:
        1. Find the oldest recurring anchor (none -> no predictions)
        2. Load anchors dated <= end_date whose recurrence has not ended
           before that oldest anchor
        3. Expand each anchor up to end_date
        4. Keep occurrences inside the window and sort them
        """
        oldest = self.transactions.get_oldest_recurring_date(wallet_id)
        if oldest is None:
            return []

        anchors = self.transactions.get_active_anchors(wallet_id, end=end_date, oldest=oldest)

        occurrences: List[PredictedOccurrence] = []
        for anchor in anchors:
            occurrences.extend(generate_occurrences(anchor, horizon_end=end_date))

        in_window = [occ for occ in occurrences if start_date <= occ.date <= end_date]
        # Stable sort keeps anchor order for occurrences on the same day
        in_window.sort(key=lambda occ: occ.date)

        record_predictions(len(anchors), len(in_window))
        return in_window
