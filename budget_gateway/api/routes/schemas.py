"""Pydantic schemas for API request/response validation"""

import datetime as dt
from decimal import Decimal
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, confloat, conint
from pydantic.alias_generators import to_camel

TransactionType = Literal["income", "outcome"]
CategoryType = Literal["income", "outcome", "both"]
Frequency = Literal["daily", "weekly", "biweekly", "monthly", "bimonthly", "quarterly", "yearly"]

# Declared balances must fit NUMERIC(12, 2); NaN and Infinity are rejected
MAX_BALANCE = 10**10
BalanceValue = Union[
    conint(strict=True, gt=-MAX_BALANCE, lt=MAX_BALANCE),
    confloat(strict=True, allow_inf_nan=False, gt=-MAX_BALANCE, lt=MAX_BALANCE),
]


class CamelModel(BaseModel):
    """Serialized with camelCase keys, accepts either spelling on input"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Predictions

class PredictionItem(BaseModel):
    """Single predicted occurrence of a recurring transaction"""

    id: str
    type: TransactionType
    amount: float
    description: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    date: dt.date
    is_predicted: bool = True
    original_transaction_id: int


# Statistics

class MonthlyData(CamelModel):
    """Real-transaction totals for one YYYY-MM month"""

    month: str
    income: float
    outcome: float
    balance: float
    cumulative: float = 0.0
    predicted_income: float = 0.0
    predicted_outcome: float = 0.0


class StatsResponse(CamelModel):
    """Response for GET /api/stats"""

    total_income: float
    total_outcome: float
    period_balance: float
    balance: float
    cumulative_income: float
    cumulative_outcome: float
    cumulative_balance: float
    monthly_data: List[MonthlyData]


# Balance adjustment

class AdjustmentRequest(CamelModel):
    """Request body for POST /api/wallets/{id}/adjust"""

    new_balance: BalanceValue = Field(..., description="Balance the wallet should hold")
    current_balance: Optional[BalanceValue] = Field(None, description="Balance shown to the user")
    date: Optional[dt.date] = Field(None, description="Adjustment day, must be today")


class AdjustmentTransaction(CamelModel):
    """Corrective transaction created by an adjustment"""

    id: int
    type: TransactionType
    amount: float
    description: Optional[str] = None
    category_id: Optional[int] = None
    date: dt.date


class AdjustmentResponse(CamelModel):
    """Response for POST /api/wallets/{id}/adjust"""

    message: str
    previous_balance: float
    new_balance: float
    difference: float
    transaction_created: bool
    transaction: Optional[AdjustmentTransaction] = None


class BalanceResponse(CamelModel):
    """Response for GET /api/wallets/{id}/adjust"""

    wallet_id: int
    current_balance: float
    initial_balance: float
    transactions_total: float


# Transactions

class TransactionCreate(BaseModel):
    """Request body for POST /api/transactions"""

    wallet_id: int
    type: TransactionType
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    description: Optional[str] = None
    category_id: Optional[int] = None
    date: dt.date
    is_recurring: bool = False
    recurrence_type: Optional[Frequency] = None
    recurrence_end_date: Optional[dt.date] = None


class TransactionUpdate(BaseModel):
    """Request body for PATCH /api/transactions/{id}; only sent fields change"""

    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    description: Optional[str] = None
    category_id: Optional[int] = None
    date: Optional[dt.date] = None
    is_recurring: Optional[bool] = None
    recurrence_type: Optional[Frequency] = None
    recurrence_end_date: Optional[dt.date] = None


class TransactionResponse(BaseModel):
    """Persisted transaction with its category display fields"""

    id: int
    wallet_id: int
    type: TransactionType
    amount: float
    description: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    category_icon: Optional[str] = None
    category_color: Optional[str] = None
    date: dt.date
    is_recurring: bool
    recurrence_type: Optional[str] = None
    recurrence_end_date: Optional[dt.date] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


# Categories

class CategoryCreate(BaseModel):
    """Request body for POST /api/categories"""

    name: str = Field(..., min_length=1, max_length=100)
    type: CategoryType
    icon: Optional[str] = None
    color: Optional[str] = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: CategoryType
    icon: Optional[str] = None
    color: Optional[str] = None
    user_id: Optional[int] = None
    is_system: bool
    is_active: bool
    sort_order: int


# Wallets

class WalletCreate(BaseModel):
    """Request body for POST /api/wallets"""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    initial_balance: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)


class WalletUpdate(BaseModel):
    """Request body for PATCH /api/wallets/{id}"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    initial_balance: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    is_default: Optional[bool] = None
    archived: Optional[bool] = None


class WalletResponse(BaseModel):
    """Wallet with its live balance and the caller's permission"""

    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    initial_balance: float
    current_balance: float
    transaction_count: int
    is_default: bool
    archived: bool
    permission: Optional[str] = None
