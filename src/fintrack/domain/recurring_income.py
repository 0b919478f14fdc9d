"""Recurring income domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional

from fintrack.database.base import Database
from fintrack.domain.category import SALARY_CATEGORY, CategoryService
from fintrack.domain.entities import RecurringIncome, TransactionType
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    account_owned_by_other_user,
    recurring_income_not_found,
)
from fintrack.domain.recurring import (
    validate_day_of_month,
    validate_recurring_amount,
    validate_recurring_description,
)
from fintrack.domain.transaction import TransactionService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"description", "amount", "day_of_month", "account_id"}


class RecurringIncomeService:
    """Service for income expected every month."""

    def __init__(self, db: Database):
        """Initialize recurring income service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_recurring_income(
        self,
        user_id: int,
        description: str,
        amount: Decimal,
        day_of_month: int,
        account_id: int,
    ) -> int:
        """Create a recurring income.

        Returns:
            Recurring income ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the account doesn't exist
        """
        description = validate_recurring_description(description)
        amount = validate_recurring_amount(amount)
        day_of_month = validate_day_of_month(day_of_month)
        self._require_account(user_id, account_id)

        income_id = self.db.create_recurring_income(
            user_id=user_id,
            description=description,
            amount=amount,
            day_of_month=day_of_month,
            account_id=account_id,
        )
        logger.info("Created recurring income %s '%s'", income_id, description)
        return income_id

    def update_recurring_income(self, income_id: int, **changes: Any) -> None:
        income = self._require_income(income_id)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}")

        fields = {name: value for name, value in changes.items() if value is not None}
        if "description" in fields:
            fields["description"] = validate_recurring_description(fields["description"])
        if "amount" in fields:
            fields["amount"] = validate_recurring_amount(fields["amount"])
        if "day_of_month" in fields:
            fields["day_of_month"] = validate_day_of_month(fields["day_of_month"])
        if "account_id" in fields:
            self._require_account(income.user_id, fields["account_id"])
        if fields:
            self.db.update_recurring_income(income_id, **fields)

    def delete_recurring_income(self, income_id: int) -> None:
        self._require_income(income_id)
        self.db.delete_recurring_income(income_id)

    def get_recurring_income(self, income_id: int) -> Optional[RecurringIncome]:
        return self.db.get_recurring_income(income_id)

    def list_recurring_incomes(self, user_id: int) -> list[RecurringIncome]:
        return self.db.list_recurring_incomes(user_id)

    def monthly_total(self, user_id: int) -> Decimal:
        """Sum of all recurring incomes of a user."""
        return sum(
            (income.amount for income in self.db.list_recurring_incomes(user_id)), Decimal("0")
        )

    def register_receipt(self, income_id: int, receipt_date: Optional[date] = None) -> int:
        """Record this month's receipt of an income in the Salary category.

        Returns:
            Transaction ID
        """
        income = self._require_income(income_id)
        category = CategoryService(self.db).require_category_by_name(SALARY_CATEGORY)
        transaction_id = TransactionService(self.db).add_transaction(
            user_id=income.user_id,
            account_id=income.account_id,
            date=receipt_date or date.today(),
            description=income.description,
            amount=income.amount,
            type=TransactionType.INCOME,
            category_id=category.id,
        )
        logger.info("Registered receipt of income %s as transaction %s", income_id, transaction_id)
        return transaction_id

    def watch_recurring_incomes(
        self, user_id: int, callback: Callable[[list[RecurringIncome]], None]
    ) -> Callable[[], None]:
        return self.db.subscribe("recurring_incomes", user_id, callback)

    def _require_income(self, income_id: int) -> RecurringIncome:
        income = self.db.get_recurring_income(income_id)
        if income is None:
            raise NotFoundError(recurring_income_not_found(income_id))
        return income

    def _require_account(self, user_id: int, account_id: int) -> None:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if account.user_id != user_id:
            raise ValidationError(account_owned_by_other_user(account_id, user_id))
