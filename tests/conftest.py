"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_gateway.api.main import create_app
from budget_gateway.infrastructure.database.models import Base, Category, Transaction, Wallet, WalletShare
from budget_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_ID = 1
COLLABORATOR_ID = 2
STRANGER_ID = 3


def auth(user_id: int) -> dict:
    """Header the upstream authentication proxy would set"""
    return {"X-User-ID": str(user_id)}


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database, authenticated as the wallet owner"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app, headers=auth(OWNER_ID))


@pytest.fixture
def wallet_factory(db: Session) -> Callable[..., Wallet]:
    """Persist a wallet owned by OWNER_ID unless told otherwise"""

    def make(user_id: int = OWNER_ID, name: str = "Main", initial_balance: str = "0") -> Wallet:
        wallet = Wallet(user_id=user_id, name=name, initial_balance=Decimal(initial_balance))
        db.add(wallet)
        db.commit()
        return wallet

    return make


@pytest.fixture
def category_factory(db: Session) -> Callable[..., Category]:
    def make(
        name: str = "Groceries",
        type_: str = "outcome",
        user_id: int | None = None,
        is_system: bool = True,
        is_active: bool = True,
    ) -> Category:
        category = Category(
            name=name,
            type=type_,
            user_id=user_id,
            is_system=is_system,
            is_active=is_active,
            sort_order=0,
        )
        db.add(category)
        db.commit()
        return category

    return make


@pytest.fixture
def transaction_factory(db: Session) -> Callable[..., Transaction]:
    """Persist a real transaction; pass recurrence_type to make it a recurring anchor"""

    def make(
        wallet: Wallet,
        type_: str,
        amount: str,
        on: date,
        recurrence_type: str | None = None,
        recurrence_end_date: date | None = None,
        description: str | None = None,
        category: Category | None = None,
    ) -> Transaction:
        txn = Transaction(
            wallet_id=wallet.id,
            type=type_,
            amount=Decimal(amount),
            date=on,
            description=description,
            category_id=category.id if category else None,
            is_recurring=recurrence_type is not None,
            recurrence_type=recurrence_type,
            recurrence_end_date=recurrence_end_date,
        )
        db.add(txn)
        db.commit()
        return txn

    return make


@pytest.fixture
def share_factory(db: Session) -> Callable[..., WalletShare]:
    def make(wallet: Wallet, user_id: int, permission: str, accepted: bool = True) -> WalletShare:
        share = WalletShare(
            wallet_id=wallet.id,
            user_id=user_id,
            permission=permission,
            accepted_at=datetime.now(timezone.utc) if accepted else None,
        )
        db.add(share)
        db.commit()
        return share

    return make
