"""GET /api/predictions - Predicted occurrences of recurring transactions"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_gateway.api.routes.schemas import PredictionItem
from budget_gateway.api.dependencies import authorize_wallet, get_request_id, require_user_id
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.services.predictions import PredictionService
from budget_gateway.utils.date_utils import parse_iso_date

router = APIRouter()


@router.get("/predictions", response_model=List[PredictionItem])
def get_predictions(
    request: Request,
    wallet_id: Optional[int] = Query(None, alias="walletId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """
    List virtual occurrences of the wallet's recurring transactions
    within [startDate, endDate], ascending by date.
    """
    request_id = get_request_id(request)

    if wallet_id is None:
        raise HTTPException(status_code=400, detail="walletId is required")

    authorize_wallet(db, wallet_id, user_id, "read")

    if not start_date or not end_date:
        raise HTTPException(status_code=400, detail="startDate and endDate are required")
    try:
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD.")

    try:
        predictions = PredictionService(db).get_predictions(wallet_id, start, end)
    except Exception as e:
        logging.error(f"Error generating predictions: {e}", extra={"request_id": request_id}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return [
        PredictionItem(
            id=p.id,
            type=p.type,
            amount=p.amount,
            description=p.description,
            category_id=p.category_id,
            category_name=p.category_name,
            date=p.date,
            is_predicted=p.is_predicted,
            original_transaction_id=p.original_transaction_id,
        )
        for p in predictions
    ]
