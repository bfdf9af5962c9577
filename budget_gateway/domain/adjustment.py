"""Balance adjustment rules"""

from decimal import Decimal, ROUND_HALF_UP
from budget_gateway.domain.models import INCOME, OUTCOME, AdjustmentDecision

CENT = Decimal("0.01")


def decide_adjustment(
    current_balance: Decimal,
    declared_balance: Decimal,
    epsilon: Decimal = CENT,
) -> AdjustmentDecision:
    """
    Work out the corrective transaction that brings `current_balance` to
    `declared_balance`.

    A difference smaller than `epsilon` in absolute value needs no
    transaction and is reported as zero.
    """
    difference = declared_balance - current_balance

    if abs(difference) < epsilon:
        return AdjustmentDecision(difference=Decimal("0"))

    return AdjustmentDecision(
        difference=difference,
        type=INCOME if difference > 0 else OUTCOME,
        amount=abs(difference).quantize(CENT, rounding=ROUND_HALF_UP),
    )


def describe_adjustment(decision: AdjustmentDecision, currency_symbol: str) -> str:
    """Human readable description stored on the corrective transaction"""
    sign = "+" if decision.type == INCOME else "-"
    return f"Balance adjustment ({sign}{decision.amount:.2f} {currency_symbol})"
