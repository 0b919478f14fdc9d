"""Account domain service."""

import logging
from decimal import Decimal
from typing import Callable, Optional

from fintrack.database.base import Database
from fintrack.domain.entities import Account as AccountEntity
from fintrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
    user_not_found,
)
from fintrack.utils.money import to_cents

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self, user_id: int, name: str, bank_name: str, balance: Decimal = Decimal("0")
    ) -> int:
        """Create a new account.

        Args:
            user_id: Owner of the account
            name: Account name
            bank_name: Bank name
            balance: Opening balance

        Returns:
            Account ID

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If name or bank name is empty
            ConflictError: If the user already has an account with that name
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))
        name = name.strip()
        bank_name = bank_name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        if not bank_name:
            raise ValidationError("Bank name cannot be empty")

        for acc in self.db.list_accounts(user_id):
            if acc.name == name:
                raise ConflictError(duplicate_account_name(name))

        account_id = self.db.create_account(
            user_id=user_id, name=name, bank_name=bank_name, balance=to_cents(balance)
        )
        logger.info("Created account %s '%s' with balance %s", account_id, name, balance)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self, user_id: int) -> list[AccountEntity]:
        """List a user's accounts ordered by name."""
        return self.db.list_accounts(user_id)

    def total_balance(self, user_id: int) -> Decimal:
        """Sum of all account balances of a user."""
        return sum((acc.balance for acc in self.db.list_accounts(user_id)), Decimal("0"))

    def update_account(
        self, account_id: int, name: Optional[str] = None, bank_name: Optional[str] = None
    ) -> None:
        """Rename an account or change its bank.

        The balance is only ever changed by transactions.

        Raises:
            NotFoundError: If account not found
            ValidationError: If a new value is empty
            ConflictError: If the new name is taken
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if name is not None and not name.strip():
            raise ValidationError("Account name cannot be empty")
        if bank_name is not None and not bank_name.strip():
            raise ValidationError("Bank name cannot be empty")

        self.db.update_account(
            account_id=account_id,
            name=name.strip() if name is not None else None,
            bank_name=bank_name.strip() if bank_name is not None else None,
        )

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If transactions or recurring items reference it
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)

    def watch_accounts(
        self, user_id: int, callback: Callable[[list[AccountEntity]], None]
    ) -> Callable[[], None]:
        """Call `callback` with the user's accounts now and after every change."""
        return self.db.subscribe("accounts", user_id, callback)
