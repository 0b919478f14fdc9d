"""Shared pytest fixtures for fintrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from fintrack.database.factories import create_sqlite_database
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.transaction import TransactionService
from fintrack.domain.user import UserService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def sample_user(user_service):
    """Create the profile the CLI acts as by default."""
    return user_service.get_or_create_user("default")


@pytest.fixture
def sample_account(account_service, sample_user):
    """Create a sample account with a 1000.00 opening balance."""
    account_id = account_service.create_account(
        user_id=sample_user.id,
        name="Test Account",
        bank_name="Test Bank",
        balance=Decimal("1000.00"),
    )
    return account_service.get_account(account_id)


@pytest.fixture
def second_account(account_service, sample_user):
    """Create a second account for transfer tests."""
    account_id = account_service.create_account(
        user_id=sample_user.id, name="Savings", bank_name="Test Bank", balance=Decimal("0")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def categories(category_service):
    """Seed the default categories and return them keyed by name."""
    category_service.ensure_default_categories()
    return {category.name: category for category in category_service.list_categories()}


@pytest.fixture
def add_expense(transaction_service, sample_user, sample_account, categories):
    """Return a helper that records an expense on the sample account."""

    def _add(amount, description="Groceries", txn_date=None, category="Food", account_id=None):
        return transaction_service.add_transaction(
            user_id=sample_user.id,
            account_id=account_id or sample_account.id,
            date=txn_date or date.today(),
            description=description,
            amount=Decimal(amount),
            type="expense",
            category_id=categories[category].id,
        )

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

