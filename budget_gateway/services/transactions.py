"""Transaction write rules shared by the create and update endpoints"""

from typing import Any, Dict
from sqlalchemy.orm import Session
from budget_gateway.domain.exceptions import CategoryNotFoundError, ValidationError
from budget_gateway.infrastructure.database.models import Transaction
from budget_gateway.infrastructure.database.repositories import CategoryRepository, TransactionRepository

RECURRENCE_FIELDS = ("recurrence_type", "recurrence_end_date")
NON_NULLABLE_FIELDS = ("type", "amount", "date", "is_recurring")


def normalize_recurrence(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Enforce that recurrence fields are set only on recurring transactions.

    Raises:
        ValidationError: If a recurring transaction has no recurrence_type
    """
    if not fields.get("is_recurring"):
        for name in RECURRENCE_FIELDS:
            fields[name] = None
        return fields

    if not fields.get("recurrence_type"):
        raise ValidationError("recurrence_type is required for recurring transactions")
    return fields


class TransactionService:
    """Validates and persists transaction writes; the caller owns the commit"""

    def __init__(self, db: Session):
        self.transactions = TransactionRepository(db)
        self.categories = CategoryRepository(db)

    def _check_category(self, category_id: int | None, user_id: int) -> None:
        if category_id is None:
            raise ValidationError("category_id is required")
        if self.categories.get_accessible(category_id, user_id) is None:
            raise CategoryNotFoundError(category_id)

    def create(self, user_id: int, wallet_id: int, fields: Dict[str, Any]) -> Transaction:
        """
        Raises:
            ValidationError: Missing category or incomplete recurrence
            CategoryNotFoundError: Category inactive or not visible to the user
        """
        self._check_category(fields.get("category_id"), user_id)
        fields = normalize_recurrence(dict(fields))
        return self.transactions.create_transaction(wallet_id, **fields)

    def update(self, user_id: int, transaction: Transaction, changes: Dict[str, Any]) -> Transaction:
        """
        Apply a partial update; fields absent from `changes` keep their value.

        Raises:
            ValidationError: Category cleared or incomplete recurrence
            CategoryNotFoundError: Category inactive or not visible to the user
        """
        for name in NON_NULLABLE_FIELDS:
            if name in changes and changes[name] is None:
                raise ValidationError(f"{name} cannot be null")

        if "category_id" in changes:
            self._check_category(changes["category_id"], user_id)

        merged = {
            "is_recurring": transaction.is_recurring,
            "recurrence_type": transaction.recurrence_type,
            "recurrence_end_date": transaction.recurrence_end_date,
        }
        merged.update({name: changes[name] for name in ("is_recurring", *RECURRENCE_FIELDS) if name in changes})
        normalized = normalize_recurrence(merged)

        fields = {name: value for name, value in changes.items() if name not in normalized}
        fields.update(normalized)
        return self.transactions.update_transaction(transaction, **fields)

    def delete(self, transaction: Transaction) -> None:
        self.transactions.delete_transaction(transaction)
