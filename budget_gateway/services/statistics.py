"""Statistics aggregator - period totals, cumulative balance and monthly breakdown"""

import logging
from datetime import date
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from budget_gateway.domain.exceptions import WalletNotFoundError
from budget_gateway.domain.models import Totals, WalletStats
from budget_gateway.domain.statistics import build_monthly_breakdown, fold_predictions
from budget_gateway.infrastructure.database.repositories import TransactionRepository, WalletRepository, to_decimal
from budget_gateway.infrastructure.observability.metrics import stats_prediction_fallback_counter
from budget_gateway.services.predictions import PredictionService

logger = logging.getLogger(__name__)


class StatisticsService:
    """Computes wallet statistics, optionally including predicted occurrences"""

    def __init__(self, db: Session, prediction_service: PredictionService | None = None):
        self.db = db
        self.wallets = WalletRepository(db)
        self.transactions = TransactionRepository(db)
        self.predictions = prediction_service or PredictionService(db)

    def get_stats(
        self,
        wallet_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_predictions: bool = False,
    ) -> WalletStats:
        """
        Compute statistics for a wallet.

        Period totals and the monthly breakdown cover [start_date, end_date]
        when both are given, otherwise every transaction. Cumulative figures
        cover everything up to end_date (or everything) and start from the
        wallet's initial balance.

        With include_predictions and an end_date, predicted occurrences are
        folded in: those since the oldest recurring anchor into the cumulative
        figures, and those inside [start_date, end_date] into the period
        totals. A failure at that stage degrades to real-only figures.

        Raises:
            WalletNotFoundError: If the wallet does not exist
        """
        wallet = self.wallets.get_wallet(wallet_id)
        if wallet is None:
            raise WalletNotFoundError(wallet_id)
        initial_balance = to_decimal(wallet.initial_balance)

        bounded = start_date is not None and end_date is not None
        window_start = start_date if bounded else None
        window_end = end_date if bounded else None

        period = self.transactions.get_totals(wallet_id, window_start, window_end)
        cumulative = self.transactions.get_totals(wallet_id, end=end_date)
        monthly = build_monthly_breakdown(
            self.transactions.get_amount_rows(wallet_id, window_start, window_end)
        )

        stats = WalletStats(
            period=period,
            cumulative=cumulative,
            initial_balance=initial_balance,
            monthly=monthly,
        )

        if include_predictions and end_date is not None:
            try:
                stats.period, stats.cumulative = self._fold_in_predictions(
                    wallet_id, start_date, end_date, period, cumulative
                )
                stats.predictions_included = True
            except Exception as e:
                stats_prediction_fallback_counter.inc()
                self.db.rollback()
                logger.error(
                    f"Prediction fold-in failed, using real transactions only: {e}",
                    extra={"wallet_id": wallet_id},
                    exc_info=True,
                )

        return stats

    def _fold_in_predictions(
        self,
        wallet_id: int,
        start_date: Optional[date],
        end_date: date,
        period: Totals,
        cumulative: Totals,
    ) -> Tuple[Totals, Totals]:
        oldest = self.predictions.get_oldest_recurring_date(wallet_id)
        if oldest is None:
            return period, cumulative

        # Everything since the first anchor feeds the running balance
        history = self.predictions.get_predictions(wallet_id, oldest, end_date)
        cumulative = fold_predictions(cumulative, history)

        # Only the requested window feeds the period cards
        if start_date is not None:
            in_period = self.predictions.get_predictions(wallet_id, start_date, end_date)
            period = fold_predictions(period, in_period)

        return period, cumulative
