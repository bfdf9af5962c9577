"""GET /api/stats - Period totals, cumulative balance and monthly breakdown"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_gateway.api.routes.schemas import MonthlyData, StatsResponse
from budget_gateway.api.dependencies import authorize_wallet, get_request_id, require_user_id
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.infrastructure.observability.logging import log_stats_computed
from budget_gateway.services.statistics import StatisticsService
from budget_gateway.utils.date_utils import parse_iso_date

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    request: Request,
    wallet_id: Optional[int] = Query(None, alias="walletId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    include_predictions: Optional[str] = Query(None, alias="includePredictions"),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """
    Compute wallet statistics.

    Flow:
    1. Period income/outcome over [startDate, endDate] (or all time)
    2. Cumulative balance up to endDate, from the wallet's initial balance
    3. With includePredictions=true, fold predicted occurrences into both
    4. Monthly breakdown of real transactions
    """
    start_time = time.time()
    request_id = get_request_id(request)

    if wallet_id is None:
        raise HTTPException(status_code=400, detail="walletId is required")

    authorize_wallet(db, wallet_id, user_id, "read")

    try:
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD.")

    predictions_requested = include_predictions == "true"

    try:
        stats = StatisticsService(db).get_stats(wallet_id, start, end, predictions_requested)
    except Exception as e:
        logging.error(f"Error computing statistics: {e}", extra={"request_id": request_id}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    log_stats_computed(request_id, wallet_id, predictions_requested, stats.predictions_included, duration_ms)

    return StatsResponse(
        total_income=stats.period.income,
        total_outcome=stats.period.outcome,
        period_balance=stats.period.balance,
        balance=stats.cumulative_balance,
        cumulative_income=stats.cumulative.income,
        cumulative_outcome=stats.cumulative.outcome,
        cumulative_balance=stats.cumulative_balance,
        monthly_data=[
            MonthlyData(
                month=bucket.month,
                income=bucket.income,
                outcome=bucket.outcome,
                balance=bucket.balance,
                cumulative=bucket.cumulative,
                predicted_income=bucket.predicted_income,
                predicted_outcome=bucket.predicted_outcome,
            )
            for bucket in stats.monthly
        ],
    )
