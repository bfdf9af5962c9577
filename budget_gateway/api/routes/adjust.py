"""POST/GET /api/wallets/{wallet_id}/adjust - Balance reconciliation"""

import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from budget_gateway.api.routes.schemas import AdjustmentRequest, AdjustmentResponse, AdjustmentTransaction, BalanceResponse
from budget_gateway.api.dependencies import authorize_wallet, get_request_id, require_user_id
from budget_gateway.domain.exceptions import ValidationError, WalletNotFoundError
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.infrastructure.observability.logging import log_adjustment
from budget_gateway.infrastructure.observability.metrics import record_adjustment
from budget_gateway.services.adjustment import BalanceAdjustmentService

router = APIRouter()


def _to_decimal(value: int | float | None) -> Decimal | None:
    # str() keeps the value the client typed, e.g. 0.1 stays 0.1
    return None if value is None else Decimal(str(value))


@router.post("/wallets/{wallet_id}/adjust", response_model=AdjustmentResponse)
def adjust_balance(
    wallet_id: int,
    request_body: AdjustmentRequest,
    request: Request,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """
    Align the wallet with the balance the user declares.

    Creates at most one income/outcome transaction dated today, in the
    system adjustment category. Balance check and insert share one
    database transaction.
    """
    request_id = get_request_id(request)

    authorize_wallet(db, wallet_id, user_id, "write")

    try:
        result = BalanceAdjustmentService(db).adjust(
            wallet_id,
            declared_balance=_to_decimal(request_body.new_balance),
            known_current_balance=_to_decimal(request_body.current_balance),
            adjustment_date=request_body.date,
        )
        db.commit()

    except ValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    except WalletNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Error adjusting balance: {e}", extra={"request_id": request_id}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    txn = result.transaction
    record_adjustment(txn.type if txn else None)
    log_adjustment(request_id, wallet_id, user_id, result.difference, result.transaction_created)

    if txn is None:
        return AdjustmentResponse(
            message="Balance is already correct",
            previous_balance=result.previous_balance,
            new_balance=result.new_balance,
            difference=result.difference,
            transaction_created=False,
        )

    return AdjustmentResponse(
        message="Balance adjusted",
        previous_balance=result.previous_balance,
        new_balance=result.new_balance,
        difference=result.difference,
        transaction_created=True,
        transaction=AdjustmentTransaction(
            id=txn.id,
            type=txn.type,
            amount=txn.amount,
            description=txn.description,
            category_id=txn.category_id,
            date=txn.date,
        ),
    )


@router.get("/wallets/{wallet_id}/adjust", response_model=BalanceResponse)
def get_balance(
    wallet_id: int,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Read-only view of the wallet's current balance from real transactions"""
    authorize_wallet(db, wallet_id, user_id, "read")

    snapshot = BalanceAdjustmentService(db).get_balance(wallet_id)

    return BalanceResponse(
        wallet_id=snapshot.wallet_id,
        current_balance=snapshot.current_balance,
        initial_balance=snapshot.initial_balance,
        transactions_total=snapshot.transactions_total,
    )
