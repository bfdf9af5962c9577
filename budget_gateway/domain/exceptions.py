"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input is well-formed JSON but violates a business rule"""

    pass


class NotFoundError(DomainException):
    """Referenced entity does not exist"""

    pass


class WalletNotFoundError(NotFoundError):
    """Wallet id does not resolve"""

    def __init__(self, wallet_id: int):
        super().__init__(f"Wallet {wallet_id} not found")
        self.wallet_id = wallet_id


class TransactionNotFoundError(NotFoundError):
    """Transaction id does not resolve"""

    def __init__(self, transaction_id: int):
        super().__init__(f"Transaction {transaction_id} not found")
        self.transaction_id = transaction_id


class CategoryNotFoundError(NotFoundError):
    """Category id does not resolve or is not accessible to the caller"""

    def __init__(self, category_id: int):
        super().__init__(f"Category {category_id} is invalid or inaccessible")
        self.category_id = category_id

