"""Balance adjustment - reconcile a declared balance with the ledger"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session
from budget_gateway.config import settings
from budget_gateway.domain.adjustment import decide_adjustment, describe_adjustment
from budget_gateway.domain.exceptions import ValidationError, WalletNotFoundError
from budget_gateway.domain.models import BalanceSnapshot
from budget_gateway.infrastructure.database.models import Transaction
from budget_gateway.infrastructure.database.repositories import (
    CategoryRepository,
    TransactionRepository,
    WalletRepository,
    to_decimal,
)


@dataclass
class AdjustmentResult:
    """Outcome of a balance adjustment"""

    previous_balance: Decimal
    new_balance: Decimal
    difference: Decimal
    transaction: Optional[Transaction] = None

    @property
    def transaction_created(self) -> bool:
        return self.transaction is not None


class BalanceAdjustmentService:
    """Creates the corrective transaction that aligns a wallet with a declared balance"""

    def __init__(self, db: Session):
        self.wallets = WalletRepository(db)
        self.transactions = TransactionRepository(db)
        self.categories = CategoryRepository(db)

    def get_balance(self, wallet_id: int) -> BalanceSnapshot:
        """
        Raises:
            WalletNotFoundError: If the wallet does not exist
        """
        wallet = self.wallets.get_wallet(wallet_id)
        if wallet is None:
            raise WalletNotFoundError(wallet_id)

        return BalanceSnapshot(
            wallet_id=wallet_id,
            initial_balance=to_decimal(wallet.initial_balance),
            transactions_total=self.transactions.get_signed_total(wallet_id),
        )

    def adjust(
        self,
        wallet_id: int,
        declared_balance: Decimal,
        known_current_balance: Optional[Decimal] = None,
        adjustment_date: Optional[date] = None,
    ) -> AdjustmentResult:
        """
        Bring the wallet balance to `declared_balance`.

        Must run inside a single database transaction: the wallet row is
        locked before the balance is read, and the caller commits or rolls
        back. Nothing is written when the difference is under the
        configured epsilon.

        Args:
            wallet_id: Wallet to adjust
            declared_balance: Balance the user says the wallet holds
            known_current_balance: Balance the user was shown; recomputed when absent
            adjustment_date: Must be today (default)

        Raises:
            ValidationError: If adjustment_date is not today
            WalletNotFoundError: If the wallet does not exist
        """
        today = date.today()
        if adjustment_date is not None and adjustment_date != today:
            raise ValidationError("Balance can only be adjusted for the current day")

        wallet = self.wallets.get_wallet_for_update(wallet_id)
        if wallet is None:
            raise WalletNotFoundError(wallet_id)

        if known_current_balance is not None:
            current_balance = known_current_balance
        else:
            current_balance = to_decimal(wallet.initial_balance) + self.transactions.get_signed_total(wallet_id)

        decision = decide_adjustment(current_balance, declared_balance, settings.adjustment_epsilon)
        if not decision.needed:
            return AdjustmentResult(
                previous_balance=current_balance,
                new_balance=declared_balance,
                difference=decision.difference,
            )

        category = self.categories.get_or_create_system_category(settings.adjustment_category_name)
        transaction = self.transactions.create_transaction(
            wallet_id,
            type=decision.type,
            amount=decision.amount,
            description=describe_adjustment(decision, settings.currency_symbol),
            category_id=category.id,
            date=today,
            is_recurring=False,
        )

        return AdjustmentResult(
            previous_balance=current_balance,
            new_balance=declared_balance,
            difference=decision.difference,
            transaction=transaction,
        )
