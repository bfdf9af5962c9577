"""Data access layer for wallets, categories and transactions"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session, joinedload
from budget_gateway.infrastructure.database.models import Wallet, WalletShare, Category, Transaction
from budget_gateway.domain.models import INCOME, OUTCOME, BOTH, RecurringAnchor, Totals

CENT = Decimal("0.01")

PERMISSION_LEVELS = {"read": 1, "write": 2, "admin": 3, "owner": 4}


def to_decimal(value: Any) -> Decimal:
    """Normalize a numeric column/aggregate value to a cent-precision Decimal"""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT)


def _signed_amount():
    return case((Transaction.type == INCOME, Transaction.amount), else_=-Transaction.amount)


def _window(query, start: Optional[date], end: Optional[date]):
    if start is not None:
        query = query.filter(Transaction.date >= start)
    if end is not None:
        query = query.filter(Transaction.date <= end)
    return query


class WalletRepository:
    """Repository for wallets"""

    def __init__(self, db: Session):
        self.db = db

    def get_wallet(self, wallet_id: int) -> Optional[Wallet]:
        return self.db.query(Wallet).filter(Wallet.id == wallet_id).first()

    def get_wallet_for_update(self, wallet_id: int) -> Optional[Wallet]:
        """Fetch and row-lock a wallet for the rest of the transaction"""
        return self.db.query(Wallet).filter(Wallet.id == wallet_id).with_for_update().first()

    def list_accessible(self, user_id: int, include_archived: bool = False) -> List[Wallet]:
        """Wallets owned by the user or shared with them through an accepted share"""
        shared_ids = select(WalletShare.wallet_id).where(
            WalletShare.user_id == user_id,
            WalletShare.accepted_at.isnot(None),
        )
        query = self.db.query(Wallet).filter(or_(Wallet.user_id == user_id, Wallet.id.in_(shared_ids)))
        if not include_archived:
            query = query.filter(Wallet.archived.is_(False))
        return query.order_by(Wallet.is_default.desc(), Wallet.created_at.asc(), Wallet.id.asc()).all()

    def create_wallet(
        self,
        user_id: int,
        name: str,
        description: Optional[str] = None,
        initial_balance: Decimal = Decimal("0"),
    ) -> Wallet:
        db_wallet = Wallet(
            user_id=user_id,
            name=name,
            description=description,
            initial_balance=initial_balance,
        )
        self.db.add(db_wallet)
        self.db.flush()
        return db_wallet

    def update_wallet(self, wallet: Wallet, **fields: Any) -> Wallet:
        """Apply field changes; setting is_default clears it on the owner's other wallets"""
        if fields.get("is_default"):
            (
                self.db.query(Wallet)
                .filter(Wallet.user_id == wallet.user_id, Wallet.id != wallet.id)
                .update({Wallet.is_default: False}, synchronize_session=False)
            )
        if "name" in fields:
            fields["name"] = fields["name"].strip()

        for name, value in fields.items():
            setattr(wallet, name, value)
        self.db.flush()
        return wallet

    def delete_wallet(self, wallet: Wallet) -> None:
        """Delete a wallet; its shares and transactions go with it"""
        self.db.delete(wallet)
        self.db.flush()

    def get_transaction_stats(self, wallet_ids: List[int]) -> Dict[int, Tuple[Decimal, int]]:
        """Signed transaction total and transaction count per wallet"""
        if not wallet_ids:
            return {}
        rows = (
            self.db.query(
                Transaction.wallet_id,
                func.coalesce(func.sum(_signed_amount()), 0),
                func.count(Transaction.id),
            )
            .filter(Transaction.wallet_id.in_(wallet_ids))
            .group_by(Transaction.wallet_id)
            .all()
        )
        return {wallet_id: (to_decimal(total), count) for wallet_id, total, count in rows}


class PermissionRepository:
    """Resolves a user's permission level on a wallet"""

    def __init__(self, db: Session):
        self.db = db

    def get_permission(self, wallet_id: int, user_id: int) -> Optional[str]:
        """
        Returns:
            "owner", "admin", "write", "read", or None when the user has no access.
            Pending (not yet accepted) shares grant nothing.
        """
        wallet = self.db.query(Wallet).filter(Wallet.id == wallet_id).first()
        if wallet is None:
            return None
        if wallet.user_id == user_id:
            return "owner"

        share = (
            self.db.query(WalletShare)
            .filter(
                WalletShare.wallet_id == wallet_id,
                WalletShare.user_id == user_id,
                WalletShare.accepted_at.isnot(None),
            )
            .first()
        )
        return share.permission if share else None

    def has_level(self, wallet_id: int, user_id: int, required: str) -> bool:
        permission = self.get_permission(wallet_id, user_id)
        if permission is None:
            return False
        return PERMISSION_LEVELS.get(permission, 0) >= PERMISSION_LEVELS[required]

    def can_read(self, wallet_id: int, user_id: int) -> bool:
        return self.has_level(wallet_id, user_id, "read")

    def can_write(self, wallet_id: int, user_id: int) -> bool:
        return self.has_level(wallet_id, user_id, "write")

    def can_admin(self, wallet_id: int, user_id: int) -> bool:
        return self.has_level(wallet_id, user_id, "admin")

    def is_owner(self, wallet_id: int, user_id: int) -> bool:
        return self.has_level(wallet_id, user_id, "owner")


class CategoryRepository:
    """Repository for system and user categories"""

    def __init__(self, db: Session):
        self.db = db

    def list_visible(self, user_id: int, type_filter: Optional[str] = None) -> List[Category]:
        """Active system categories plus the user's own, system first"""
        query = self.db.query(Category).filter(
            or_(Category.is_system.is_(True), Category.user_id == user_id),
            Category.is_active.is_(True),
        )
        if type_filter in (INCOME, OUTCOME):
            query = query.filter(or_(Category.type == type_filter, Category.type == BOTH))
        return query.order_by(Category.is_system.desc(), Category.sort_order.asc(), Category.name.asc()).all()

    def get_accessible(self, category_id: int, user_id: int) -> Optional[Category]:
        return (
            self.db.query(Category)
            .filter(
                Category.id == category_id,
                or_(Category.is_system.is_(True), Category.user_id == user_id),
                Category.is_active.is_(True),
            )
            .first()
        )

    def find_duplicate(self, name: str, user_id: int, type_: str) -> Optional[Category]:
        """Accessible category with the same name (case-insensitive) and an overlapping type"""
        query = self.db.query(Category).filter(
            func.lower(Category.name) == name.lower(),
            or_(Category.user_id == user_id, Category.is_system.is_(True)),
        )
        if type_ != BOTH:
            query = query.filter(or_(Category.type == type_, Category.type == BOTH))
        return query.first()

    def create_category(
        self,
        user_id: Optional[int],
        name: str,
        type_: str,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        is_system: bool = False,
        sort_order: int = 0,
    ) -> Category:
        db_category = Category(
            user_id=user_id,
            name=name,
            type=type_,
            icon=icon,
            color=color,
            is_system=is_system,
            is_active=True,
            sort_order=sort_order,
        )
        self.db.add(db_category)
        self.db.flush()
        return db_category

    def get_or_create_system_category(self, name: str) -> Category:
        """Fetch a system category by name, creating it (type "both") if absent"""
        category = (
            self.db.query(Category)
            .filter(Category.name == name, Category.is_system.is_(True))
            .first()
        )
        if category is not None:
            return category
        return self.create_category(
            user_id=None,
            name=name,
            type_=BOTH,
            icon="⚖️",
            color="#6366f1",
            is_system=True,
            sort_order=100,
        )


class TransactionRepository:
    """Repository for real (persisted) transactions"""

    def __init__(self, db: Session):
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return (
            self.db.query(Transaction)
            .options(joinedload(Transaction.category))
            .filter(Transaction.id == transaction_id)
            .first()
        )

    def list_transactions(
        self,
        wallet_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Transaction]:
        query = (
            self.db.query(Transaction)
            .options(joinedload(Transaction.category))
            .filter(Transaction.wallet_id == wallet_id)
        )
        query = _window(query, start, end)
        return query.order_by(Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc()).all()

    def create_transaction(self, wallet_id: int, **fields: Any) -> Transaction:
        db_transaction = Transaction(wallet_id=wallet_id, **fields)
        self.db.add(db_transaction)
        self.db.flush()  # Get ID without committing
        return db_transaction

    def update_transaction(self, transaction: Transaction, **fields: Any) -> Transaction:
        for name, value in fields.items():
            setattr(transaction, name, value)
        self.db.flush()
        return transaction

    def delete_transaction(self, transaction: Transaction) -> None:
        self.db.delete(transaction)
        self.db.flush()

    def get_totals(
        self,
        wallet_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Totals:
        """Income and outcome sums of real transactions, optionally date-bounded (inclusive)"""
        query = self.db.query(
            func.coalesce(func.sum(case((Transaction.type == INCOME, Transaction.amount), else_=0)), 0),
            func.coalesce(func.sum(case((Transaction.type == OUTCOME, Transaction.amount), else_=0)), 0),
        ).filter(Transaction.wallet_id == wallet_id)
        income, outcome = _window(query, start, end).one()
        return Totals(income=to_decimal(income), outcome=to_decimal(outcome))

    def get_signed_total(self, wallet_id: int) -> Decimal:
        """Σ(income − outcome) over every real transaction of the wallet"""
        total = (
            self.db.query(func.coalesce(func.sum(_signed_amount()), 0))
            .filter(Transaction.wallet_id == wallet_id)
            .scalar()
        )
        return to_decimal(total)

    def get_amount_rows(
        self,
        wallet_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Tuple[date, str, Decimal]]:
        """(date, type, amount) of each real transaction, for monthly grouping"""
        query = self.db.query(Transaction.date, Transaction.type, Transaction.amount).filter(
            Transaction.wallet_id == wallet_id
        )
        rows = _window(query, start, end).order_by(Transaction.date.asc()).all()
        return [(txn_date, txn_type, to_decimal(amount)) for txn_date, txn_type, amount in rows]

    def get_oldest_recurring_date(self, wallet_id: int) -> Optional[date]:
        """Earliest anchor date among the wallet's recurring transactions"""
        return (
            self.db.query(func.min(Transaction.date))
            .filter(Transaction.wallet_id == wallet_id, Transaction.is_recurring.is_(True))
            .scalar()
        )

    def get_active_anchors(self, wallet_id: int, end: date, oldest: date) -> List[RecurringAnchor]:
        """Recurring transactions that can still produce occurrences up to `end`"""
        rows = (
            self.db.query(Transaction)
            .options(joinedload(Transaction.category))
            .filter(
                Transaction.wallet_id == wallet_id,
                Transaction.is_recurring.is_(True),
                Transaction.date <= end,
                or_(Transaction.recurrence_end_date.is_(None), Transaction.recurrence_end_date >= oldest),
            )
            .order_by(Transaction.date.asc(), Transaction.id.asc())
            .all()
        )
        return [
            RecurringAnchor(
                transaction_id=row.id,
                type=row.type,
                amount=to_decimal(row.amount),
                date=row.date,
                recurrence_type=row.recurrence_type,
                recurrence_end_date=row.recurrence_end_date,
                description=row.description,
                category_id=row.category_id,
                category_name=row.category.name if row.category else None,
            )
            for row in rows
        ]
