"""Unit tests for balance adjustment decisions"""

from decimal import Decimal
from budget_gateway.domain.adjustment import decide_adjustment, describe_adjustment


def test_increase_needs_income():
    decision = decide_adjustment(Decimal("100.00"), Decimal("150.00"))

    assert decision.needed
    assert decision.type == "income"
    assert decision.amount == Decimal("50.00")
    assert decision.difference == Decimal("50.00")


def test_decrease_needs_outcome():
    decision = decide_adjustment(Decimal("100.00"), Decimal("70.00"))

    assert decision.type == "outcome"
    assert decision.amount == Decimal("30.00")
    assert decision.difference == Decimal("-30.00")


def test_difference_under_a_cent_is_ignored():
    decision = decide_adjustment(Decimal("100.00"), Decimal("100.009"))

    assert not decision.needed
    assert decision.difference == 0
    assert decision.amount == 0


def test_exactly_one_cent_is_adjusted():
    decision = decide_adjustment(Decimal("100.00"), Decimal("99.99"))

    assert decision.needed
    assert decision.type == "outcome"
    assert decision.amount == Decimal("0.01")


def test_amount_rounded_to_cents():
    decision = decide_adjustment(Decimal("0"), Decimal("10.005"))
    assert decision.amount == Decimal("10.01")


def test_custom_epsilon():
    decision = decide_adjustment(Decimal("100"), Decimal("100.50"), epsilon=Decimal("1"))
    assert not decision.needed


def test_description_shows_signed_amount():
    assert describe_adjustment(decide_adjustment(Decimal("0"), Decimal("12.3")), "€") == "Balance adjustment (+12.30 €)"
    assert describe_adjustment(decide_adjustment(Decimal("20"), Decimal("7.66")), "$") == "Balance adjustment (-12.34 $)"
