"""Recurring bill domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional

from fintrack.database.base import Database
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import (
    InstallmentState,
    InstallmentStatus,
    RecurringTransaction,
    TransactionType,
)
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    account_owned_by_other_user,
    recurring_not_found,
)
from fintrack.domain.schedule import month_offset, next_due_date
from fintrack.domain.transaction import TransactionService
from fintrack.utils.money import to_cents

logger = logging.getLogger(__name__)


def installment_status(item: RecurringTransaction, today: date) -> InstallmentStatus:
    """Where a bill stands in its installment plan on a given day.

    Counts calendar months like `is_active_in_month`: the current installment
    is the one due in today's month, so a plan started on Jan 31 is on its
    second installment from Feb 1. Before the start month the plan is on its
    first installment.
    """
    if item.installments is None:
        return InstallmentStatus(state=InstallmentState.FIXED)
    current = max(month_offset(item.start_date, today.year, today.month) + 1, 1)
    if current > item.installments:
        return InstallmentStatus(
            state=InstallmentState.FINISHED, current=item.installments, total=item.installments
        )
    return InstallmentStatus(state=InstallmentState.ACTIVE, current=current, total=item.installments)


def validate_day_of_month(day_of_month: int) -> int:
    if not 1 <= int(day_of_month) <= 31:
        raise ValidationError("Day of month must be between 1 and 31")
    return int(day_of_month)


def validate_recurring_amount(amount: Decimal) -> Decimal:
    amount = to_cents(amount)
    if amount <= 0:
        raise ValidationError("Amount must be positive")
    return amount


def validate_recurring_description(description: str) -> str:
    description = (description or "").strip()
    if len(description) < 2:
        raise ValidationError("Description must be at least 2 characters")
    return description


class RecurringService:
    """Service for recurring bills and installment plans."""

    def __init__(self, db: Database):
        """Initialize recurring bill service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_recurring(
        self,
        user_id: int,
        description: str,
        amount: Decimal,
        day_of_month: int,
        account_id: int,
        category_id: int,
        start_date: Optional[date] = None,
        installments: Optional[int] = None,
    ) -> int:
        """Create a recurring bill.

        Args:
            user_id: Owner of the bill
            description: What the bill is for
            amount: Amount due each month
            day_of_month: Due day (1-31, clamped to short months)
            account_id: Account the bill is paid from
            category_id: Expense category
            start_date: First due month; defaults to today
            installments: Number of installments, or None for a fixed bill

        Returns:
            Recurring bill ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If account or category doesn't exist
        """
        description = validate_recurring_description(description)
        amount = validate_recurring_amount(amount)
        day_of_month = validate_day_of_month(day_of_month)
        installments = self._validate_installments(installments)
        self._require_account(user_id, account_id)
        CategoryService(self.db).require_category_for(category_id, TransactionType.EXPENSE)

        recurring_id = self.db.create_recurring(
            user_id=user_id,
            description=description,
            amount=amount,
            day_of_month=day_of_month,
            start_date=start_date or date.today(),
            installments=installments,
            account_id=account_id,
            category_id=category_id,
        )
        logger.info("Created recurring bill %s '%s'", recurring_id, description)
        return recurring_id

    def update_recurring(self, recurring_id: int, **changes: Any) -> None:
        """Change fields of a recurring bill.

        Pass ``installments=None`` explicitly to turn a plan into a fixed bill.
        Other fields given as None are left unchanged.
        """
        item = self._require_recurring(recurring_id)
        fields: dict[str, Any] = {}
        for name, value in changes.items():
            if value is None and name != "installments":
                continue
            if name == "description":
                value = validate_recurring_description(value)
            elif name == "amount":
                value = validate_recurring_amount(value)
            elif name == "day_of_month":
                value = validate_day_of_month(value)
            elif name == "installments":
                value = self._validate_installments(value)
            elif name == "account_id":
                self._require_account(item.user_id, value)
            elif name == "category_id":
                CategoryService(self.db).require_category_for(value, TransactionType.EXPENSE)
            elif name != "start_date":
                raise ValidationError(f"Unknown field '{name}'")
            fields[name] = value
        if fields:
            self.db.update_recurring(recurring_id, **fields)

    def delete_recurring(self, recurring_id: int) -> None:
        self._require_recurring(recurring_id)
        self.db.delete_recurring(recurring_id)

    def get_recurring(self, recurring_id: int) -> Optional[RecurringTransaction]:
        return self.db.get_recurring(recurring_id)

    def list_recurring(self, user_id: int) -> list[RecurringTransaction]:
        return self.db.list_recurring(user_id)

    def installment_status(self, recurring_id: int, today: Optional[date] = None) -> InstallmentStatus:
        return installment_status(self._require_recurring(recurring_id), today or date.today())

    def register_payment(self, recurring_id: int, payment_date: Optional[date] = None) -> int:
        """Record this month's payment of a bill as an expense.

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the installment plan is finished
        """
        item = self._require_recurring(recurring_id)
        payment_date = payment_date or date.today()
        status = installment_status(item, payment_date)
        if status.state == InstallmentState.FINISHED:
            raise ValidationError(f"Recurring bill {recurring_id} is finished")

        description = item.description
        if status.state == InstallmentState.ACTIVE:
            description = f"{item.description} ({status.label})"

        transaction_id = TransactionService(self.db).add_transaction(
            user_id=item.user_id,
            account_id=item.account_id,
            date=payment_date,
            description=description,
            amount=item.amount,
            type=TransactionType.EXPENSE,
            category_id=item.category_id,
        )
        logger.info(
            "Registered payment of recurring bill %s as transaction %s", recurring_id, transaction_id
        )
        return transaction_id

    def upcoming(
        self, user_id: int, today: Optional[date] = None, days: int = 3
    ) -> list[tuple[RecurringTransaction, date]]:
        """Bills with a due date in [today, today + days], soonest first."""
        today = today or date.today()
        due_items = []
        for item in self.db.list_recurring(user_id):
            due = next_due_date(item.day_of_month, today, item.start_date, item.installments)
            if due is not None and (due - today).days <= days:
                due_items.append((item, due))
        return sorted(due_items, key=lambda pair: (pair[1], pair[0].id))

    def watch_recurring(
        self, user_id: int, callback: Callable[[list[RecurringTransaction]], None]
    ) -> Callable[[], None]:
        return self.db.subscribe("recurring", user_id, callback)

    def _validate_installments(self, installments: Optional[int]) -> Optional[int]:
        if installments is None:
            return None
        if int(installments) <= 0:
            raise ValidationError("Installments must be a positive number")
        return int(installments)

    def _require_recurring(self, recurring_id: int) -> RecurringTransaction:
        item = self.db.get_recurring(recurring_id)
        if item is None:
            raise NotFoundError(recurring_not_found(recurring_id))
        return item

    def _require_account(self, user_id: int, account_id: int) -> None:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if account.user_id != user_id:
            raise ValidationError(account_owned_by_other_user(account_id, user_id))
