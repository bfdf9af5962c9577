"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

INCOME = "income"
OUTCOME = "outcome"

# Category-level only; a transaction is never "both"
BOTH = "both"


@dataclass
class RecurringAnchor:
    """Persisted recurring transaction used as a template for virtual occurrences"""

    transaction_id: int
    type: str  # "income" or "outcome"
    amount: Decimal
    date: date
    recurrence_type: Optional[str]
    recurrence_end_date: Optional[date] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None


@dataclass
class PredictedOccurrence:
    """One future instance of a recurring anchor, never persisted"""

    type: str
    amount: Decimal
    date: date
    original_transaction_id: int
    description: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    is_predicted: bool = True

    @property
    def id(self) -> str:
        return f"predicted-{self.original_transaction_id}-{self.date.isoformat()}"


@dataclass
class Totals:
    """Income/outcome sums over some set of transactions"""

    income: Decimal = Decimal("0")
    outcome: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.income - self.outcome


@dataclass
class MonthlyBucket:
    """Real-transaction totals for one calendar month (YYYY-MM)"""

    month: str
    income: Decimal = Decimal("0")
    outcome: Decimal = Decimal("0")
    cumulative: Decimal = Decimal("0")
    predicted_income: Decimal = Decimal("0")
    predicted_outcome: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.income - self.outcome


@dataclass
class WalletStats:
    """Output of the statistics aggregator"""

    period: Totals
    cumulative: Totals
    initial_balance: Decimal
    monthly: List[MonthlyBucket] = field(default_factory=list)
    predictions_included: bool = False

    @property
    def cumulative_balance(self) -> Decimal:
        return self.initial_balance + self.cumulative.balance


@dataclass
class AdjustmentDecision:
    """Corrective transaction needed to reach a declared balance"""

    difference: Decimal
    type: Optional[str] = None
    amount: Decimal = Decimal("0")

    @property
    def needed(self) -> bool:
        return self.type is not None


@dataclass
class BalanceSnapshot:
    """Current wallet balance from real transactions"""

    wallet_id: int
    initial_balance: Decimal
    transactions_total: Decimal

    @property
    def current_balance(self) -> Decimal:
        return self.initial_balance + self.transactions_total
