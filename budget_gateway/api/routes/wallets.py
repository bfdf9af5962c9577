"""/api/wallets - Wallet listing, creation, settings and deletion"""

import logging
from decimal import Decimal
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_gateway.api.routes.schemas import WalletCreate, WalletResponse, WalletUpdate
from budget_gateway.api.dependencies import authorize_wallet, get_request_id, require_user_id
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.infrastructure.database.repositories import PermissionRepository, WalletRepository, to_decimal

router = APIRouter()


def _wallet_response(wallet, permission: str | None, signed_total: Decimal, count: int) -> WalletResponse:
    initial_balance = to_decimal(wallet.initial_balance)
    return WalletResponse(
        id=wallet.id,
        user_id=wallet.user_id,
        name=wallet.name,
        description=wallet.description,
        initial_balance=initial_balance,
        current_balance=initial_balance + signed_total,
        transaction_count=count,
        is_default=wallet.is_default,
        archived=wallet.archived,
        permission=permission,
    )


def _single_wallet_response(db: Session, wallet, user_id: int) -> WalletResponse:
    wallet_repo = WalletRepository(db)
    signed_total, count = wallet_repo.get_transaction_stats([wallet.id]).get(wallet.id, (Decimal("0"), 0))
    permission = PermissionRepository(db).get_permission(wallet.id, user_id)
    return _wallet_response(wallet, permission, signed_total, count)


@router.get("/wallets", response_model=List[WalletResponse])
def list_wallets(
    include_archived: bool = Query(False, alias="includeArchived"),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Wallets the caller owns or has an accepted share on, with live balances"""
    wallet_repo = WalletRepository(db)
    permission_repo = PermissionRepository(db)

    wallets = wallet_repo.list_accessible(user_id, include_archived=include_archived)
    stats = wallet_repo.get_transaction_stats([w.id for w in wallets])

    return [
        _wallet_response(
            w,
            permission_repo.get_permission(w.id, user_id),
            *stats.get(w.id, (Decimal("0"), 0)),
        )
        for w in wallets
    ]


@router.post("/wallets", response_model=WalletResponse, status_code=201)
def create_wallet(
    request_body: WalletCreate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Create a wallet owned by the caller"""
    wallet = WalletRepository(db).create_wallet(
        user_id=user_id,
        name=request_body.name.strip(),
        description=request_body.description,
        initial_balance=request_body.initial_balance,
    )
    db.commit()
    return _wallet_response(wallet, "owner", Decimal("0"), 0)


@router.get("/wallets/{wallet_id}", response_model=WalletResponse)
def get_wallet(
    wallet_id: int,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    wallet = authorize_wallet(db, wallet_id, user_id, "read")
    return _single_wallet_response(db, wallet, user_id)


@router.patch("/wallets/{wallet_id}", response_model=WalletResponse)
def update_wallet(
    wallet_id: int,
    request_body: WalletUpdate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Change wallet settings; requires admin permission"""
    wallet = authorize_wallet(db, wallet_id, user_id, "admin")
    changes = request_body.model_dump(exclude_unset=True, exclude_none=True)

    WalletRepository(db).update_wallet(wallet, **changes)
    db.commit()

    return _single_wallet_response(db, wallet, user_id)


@router.delete("/wallets/{wallet_id}")
def delete_wallet(
    wallet_id: int,
    request: Request,
    force: bool = Query(False),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """
    Delete a wallet; owner only.

    The default wallet cannot be deleted. A wallet that still has
    transactions is deleted only with force=true, together with them.
    """
    request_id = get_request_id(request)
    wallet = authorize_wallet(db, wallet_id, user_id, "owner")

    if wallet.is_default:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete the default wallet. Please set another wallet as default first.",
        )

    wallet_repo = WalletRepository(db)
    _, transaction_count = wallet_repo.get_transaction_stats([wallet_id]).get(wallet_id, (Decimal("0"), 0))
    if transaction_count > 0 and not force:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete wallet with {transaction_count} transaction(s). "
            "Delete or move them first, archive the wallet, or retry with force=true.",
        )

    try:
        wallet_repo.delete_wallet(wallet)
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Error deleting wallet: {e}", extra={"request_id": request_id}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"message": "Wallet deleted successfully", "deleted": True, "transactions_deleted": transaction_count}
