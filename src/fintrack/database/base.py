"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from fintrack.domain.entities import (
    User,
    Account,
    Category,
    Transaction,
    Budget,
    RecurringTransaction,
    RecurringIncome,
    Goal,
    Notification,
    UserPreferences,
)


class Database(ABC):
    """Abstract database interface for fintrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Change listeners
    @abstractmethod
    def subscribe(
        self, collection: str, user_id: int, callback: Callable[[list[Any]], None]
    ) -> Callable[[], None]:
        """Listen to a user's collection. Returns an unsubscribe function."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, name: str, email: Optional[str] = None) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_name(self, name: str) -> Optional[User]:
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, user_id: int, name: str, bank_name: str, balance: Decimal = Decimal("0")
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: int) -> list[Account]:
        """List a user's accounts ordered by name."""
        pass

    @abstractmethod
    def update_account(
        self, account_id: int, name: Optional[str] = None, bank_name: Optional[str] = None
    ) -> None:
        """Update account name and/or bank name. Balance is not editable."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        pass

    @abstractmethod
    def get_account_recurring_count(self, account_id: int) -> int:
        """Count recurring bills and incomes that reference the account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, kind: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name, case-insensitively."""
        pass

    @abstractmethod
    def list_categories(self, kind: Optional[str] = None) -> list[Category]:
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: int,
        account_id: int,
        date: date,
        description: str,
        amount: Decimal,
        type: str,
        category_id: int,
    ) -> int:
        """Create a transaction and apply its balance delta atomically.

        Returns transaction ID.
        """
        pass

    @abstractmethod
    def create_transfer(
        self,
        user_id: int,
        from_account_id: int,
        to_account_id: int,
        amount: Decimal,
        date: date,
        description: str,
        category_id: int,
    ) -> tuple[int, int]:
        """Create both legs of a transfer and move the balance atomically.

        Returns (expense leg ID, income leg ID).
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        account_id: Optional[int] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        type: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> None:
        """Update a transaction, reverting the old and applying the new delta atomically."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> list[int]:
        """Delete a transaction (both legs for a transfer) and revert balances.

        Returns the IDs of the deleted transactions.
        """
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions newest first with optional filters."""
        pass

    # Budget operations
    @abstractmethod
    def create_budget(self, user_id: int, category_id: int, amount: Decimal) -> int:
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        pass

    @abstractmethod
    def get_budget_by_category(self, user_id: int, category_id: int) -> Optional[Budget]:
        pass

    @abstractmethod
    def list_budgets(self, user_id: int) -> list[Budget]:
        pass

    @abstractmethod
    def update_budget(
        self, budget_id: int, amount: Optional[Decimal] = None, category_id: Optional[int] = None
    ) -> None:
        pass

    @abstractmethod
    def delete_budget(self, budget_id: int) -> None:
        pass

    # Recurring bill operations
    @abstractmethod
    def create_recurring(
        self,
        user_id: int,
        description: str,
        amount: Decimal,
        day_of_month: int,
        start_date: date,
        installments: Optional[int],
        account_id: int,
        category_id: int,
    ) -> int:
        pass

    @abstractmethod
    def get_recurring(self, recurring_id: int) -> Optional[RecurringTransaction]:
        pass

    @abstractmethod
    def list_recurring(self, user_id: int) -> list[RecurringTransaction]:
        pass

    @abstractmethod
    def update_recurring(self, recurring_id: int, **fields: Any) -> None:
        """Update the given recurring bill fields. A field set to None is stored as None."""
        pass

    @abstractmethod
    def delete_recurring(self, recurring_id: int) -> None:
        pass

    # Recurring income operations
    @abstractmethod
    def create_recurring_income(
        self,
        user_id: int,
        description: str,
        amount: Decimal,
        day_of_month: int,
        account_id: int,
    ) -> int:
        pass

    @abstractmethod
    def get_recurring_income(self, income_id: int) -> Optional[RecurringIncome]:
        pass

    @abstractmethod
    def list_recurring_incomes(self, user_id: int) -> list[RecurringIncome]:
        pass

    @abstractmethod
    def update_recurring_income(self, income_id: int, **fields: Any) -> None:
        pass

    @abstractmethod
    def delete_recurring_income(self, income_id: int) -> None:
        pass

    # Goal operations
    @abstractmethod
    def create_goal(
        self,
        user_id: int,
        name: str,
        target_amount: Decimal,
        current_amount: Decimal,
        deadline: Optional[date],
    ) -> int:
        pass

    @abstractmethod
    def get_goal(self, goal_id: int) -> Optional[Goal]:
        pass

    @abstractmethod
    def list_goals(self, user_id: int) -> list[Goal]:
        pass

    @abstractmethod
    def update_goal(self, goal_id: int, **fields: Any) -> None:
        pass

    @abstractmethod
    def delete_goal(self, goal_id: int) -> None:
        pass

    @abstractmethod
    def contribute_to_goal(
        self,
        goal_id: int,
        account_id: int,
        amount: Decimal,
        date: date,
        description: str,
        category_id: int,
    ) -> int:
        """Record a contribution expense and raise the goal amount atomically.

        Returns the ID of the created transaction.
        """
        pass

    # Notification operations
    @abstractmethod
    def create_notification(
        self,
        user_id: int,
        type: str,
        related_id: int,
        message: str,
        href: str,
        timestamp: Optional[datetime] = None,
    ) -> int:
        pass

    @abstractmethod
    def get_notification(self, notification_id: int) -> Optional[Notification]:
        pass

    @abstractmethod
    def list_notifications(
        self,
        user_id: int,
        type: Optional[str] = None,
        related_id: Optional[int] = None,
        since: Optional[datetime] = None,
        unread_only: bool = False,
    ) -> list[Notification]:
        """List notifications newest first."""
        pass

    @abstractmethod
    def mark_all_notifications_read(self, user_id: int) -> int:
        """Mark every unread notification read in one commit. Returns the count."""
        pass

    @abstractmethod
    def delete_notification(self, notification_id: int) -> None:
        pass

    # Preferences
    @abstractmethod
    def get_preferences(self, user_id: int) -> Optional[UserPreferences]:
        pass

    @abstractmethod
    def save_preferences(self, user_id: int, **fields: Any) -> None:
        """Create or merge preferences; only the given fields change."""
        pass
