"""Dependency injection for FastAPI endpoints"""

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session
from budget_gateway.config import settings
from budget_gateway.infrastructure.database.models import Wallet
from budget_gateway.infrastructure.database.repositories import PermissionRepository, WalletRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def require_user_id(request: Request) -> int:
    """
    Caller identity as set by the upstream authentication proxy.

    Raises:
        HTTPException 401: Header missing or not an integer
    """
    raw = request.headers.get(settings.user_id_header)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Unauthorized")


def authorize_wallet(db: Session, wallet_id: int, user_id: int, required: str = "read") -> Wallet:
    """
    Resolve a wallet and check the caller's permission level on it.

    Raises:
        HTTPException 404: Wallet does not exist
        HTTPException 403: Caller's permission is below `required`
    """
    wallet = WalletRepository(db).get_wallet(wallet_id)
    if wallet is None:
        raise HTTPException(status_code=404, detail="Wallet not found")

    permissions = PermissionRepository(db)
    checks = {
        "read": permissions.can_read,
        "write": permissions.can_write,
        "admin": permissions.can_admin,
        "owner": permissions.is_owner,
    }
    if not checks[required](wallet_id, user_id):
        raise HTTPException(status_code=403, detail="Wallet access denied")

    return wallet
