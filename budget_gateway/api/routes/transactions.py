"""/api/transactions - Wallet-scoped transaction CRUD"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_gateway.api.routes.schemas import TransactionCreate, TransactionResponse, TransactionUpdate
from budget_gateway.api.dependencies import authorize_wallet, get_request_id, require_user_id
from budget_gateway.domain.exceptions import CategoryNotFoundError, TransactionNotFoundError, ValidationError
from budget_gateway.infrastructure.database.models import Transaction
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.infrastructure.database.repositories import TransactionRepository
from budget_gateway.services.transactions import TransactionService
from budget_gateway.utils.date_utils import parse_iso_date

router = APIRouter()


def _to_response(txn: Transaction) -> TransactionResponse:
    category = txn.category
    return TransactionResponse(
        id=txn.id,
        wallet_id=txn.wallet_id,
        type=txn.type,
        amount=txn.amount,
        description=txn.description,
        category_id=txn.category_id,
        category_name=category.name if category else None,
        category_icon=category.icon if category else None,
        category_color=category.color if category else None,
        date=txn.date,
        is_recurring=txn.is_recurring,
        recurrence_type=txn.recurrence_type,
        recurrence_end_date=txn.recurrence_end_date,
        created_at=txn.created_at,
        updated_at=txn.updated_at,
    )


def _load_transaction(db: Session, transaction_id: int) -> Transaction:
    txn = TransactionRepository(db).get_transaction(transaction_id)
    if txn is None:
        raise HTTPException(status_code=404, detail=str(TransactionNotFoundError(transaction_id)))
    return txn


def _commit_write(db: Session, write, request_id: str):
    """Run a write, commit it, and translate domain errors to HTTP errors"""
    try:
        result = write()
        db.commit()
        return result

    except (ValidationError, CategoryNotFoundError) as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Error writing transaction: {e}", extra={"request_id": request_id}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    wallet_id: Optional[int] = Query(None, alias="walletId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Transactions of a wallet, newest first; the date window applies only when both bounds are given"""
    if wallet_id is None:
        raise HTTPException(status_code=400, detail="walletId is required")

    authorize_wallet(db, wallet_id, user_id, "read")

    try:
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD.")
    if start is None or end is None:
        start = end = None

    return [_to_response(t) for t in TransactionRepository(db).list_transactions(wallet_id, start, end)]


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request_body: TransactionCreate,
    request: Request,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    authorize_wallet(db, request_body.wallet_id, user_id, "write")

    fields = request_body.model_dump(exclude={"wallet_id"})
    txn = _commit_write(
        db,
        lambda: TransactionService(db).create(user_id, request_body.wallet_id, fields),
        get_request_id(request),
    )
    return _to_response(_load_transaction(db, txn.id))


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    txn = _load_transaction(db, transaction_id)
    authorize_wallet(db, txn.wallet_id, user_id, "read")
    return _to_response(txn)


@router.patch("/transactions/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    request_body: TransactionUpdate,
    request: Request,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Partial update; recurring anchors changed here reshape every future prediction"""
    txn = _load_transaction(db, transaction_id)
    authorize_wallet(db, txn.wallet_id, user_id, "write")

    changes = request_body.model_dump(exclude_unset=True)
    _commit_write(
        db,
        lambda: TransactionService(db).update(user_id, txn, changes),
        get_request_id(request),
    )
    return _to_response(_load_transaction(db, transaction_id))


@router.delete("/transactions/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    request: Request,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    txn = _load_transaction(db, transaction_id)
    authorize_wallet(db, txn.wallet_id, user_id, "write")

    _commit_write(db, lambda: TransactionService(db).delete(txn), get_request_id(request))
    return {"message": "Transaction deleted", "id": transaction_id}
