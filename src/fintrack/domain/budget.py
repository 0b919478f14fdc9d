"""Budget domain service."""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional

from fintrack.database.base import Database
from fintrack.domain.entities import Budget, BudgetStatus, CategoryKind, TransactionType
from fintrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    budget_not_found,
    category_not_found,
)
from fintrack.domain.schedule import month_start
from fintrack.utils.money import to_cents

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def budget_percentage(spent: Decimal, amount: Decimal) -> Decimal:
    """Spent as a percentage of the budget amount; 0 for an empty budget."""
    if amount <= 0:
        return Decimal("0")
    return (spent / amount * 100).quantize(CENT, rounding=ROUND_HALF_UP)


class BudgetService:
    """Service for monthly category budgets."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_budget(self, user_id: int, category_id: int, amount: Decimal) -> int:
        """Create a monthly budget for an expense category.

        Args:
            user_id: Owner of the budget
            category_id: Expense category to limit
            amount: Monthly limit

        Returns:
            Budget ID

        Raises:
            ValidationError: If amount is not positive or category is not an expense category
            NotFoundError: If category doesn't exist
            ConflictError: If the user already budgets this category
        """
        amount = self._validate_amount(amount)
        self._require_expense_category(category_id)
        if self.db.get_budget_by_category(user_id, category_id) is not None:
            raise ConflictError(f"A budget for category {category_id} already exists")

        budget_id = self.db.create_budget(user_id=user_id, category_id=category_id, amount=amount)
        logger.info("Created budget %s of %s for category %s", budget_id, amount, category_id)
        return budget_id

    def update_budget(
        self, budget_id: int, amount: Optional[Decimal] = None, category_id: Optional[int] = None
    ) -> None:
        budget = self._require_budget(budget_id)
        if amount is not None:
            amount = self._validate_amount(amount)
        if category_id is not None and category_id != budget.category_id:
            self._require_expense_category(category_id)
            if self.db.get_budget_by_category(budget.user_id, category_id) is not None:
                raise ConflictError(f"A budget for category {category_id} already exists")
        self.db.update_budget(budget_id, amount=amount, category_id=category_id)

    def delete_budget(self, budget_id: int) -> None:
        self._require_budget(budget_id)
        self.db.delete_budget(budget_id)

    def get_budget(self, budget_id: int) -> Optional[Budget]:
        return self.db.get_budget(budget_id)

    def list_budgets(self, user_id: int) -> list[Budget]:
        return self.db.list_budgets(user_id)

    def budgets_with_spent(self, user_id: int, today: Optional[date] = None) -> list[BudgetStatus]:
        """Budgets with the amount spent in their category this month.

        Spent counts every expense in the category dated on or after the
        first day of today's month.
        """
        budgets = self.db.list_budgets(user_id)
        if not budgets:
            return []

        today = today or date.today()
        expenses = self.db.list_transactions(
            user_id=user_id,
            start_date=month_start(today),
            type=TransactionType.EXPENSE.value,
        )
        spent_by_category: dict[int, Decimal] = {}
        for txn in expenses:
            spent_by_category[txn.category_id] = (
                spent_by_category.get(txn.category_id, Decimal("0")) + txn.amount
            )

        statuses = []
        for budget in budgets:
            spent = spent_by_category.get(budget.category_id, Decimal("0"))
            statuses.append(
                BudgetStatus(
                    budget=budget,
                    spent=spent,
                    percentage=budget_percentage(spent, budget.amount),
                )
            )
        return statuses

    def watch_budgets_with_spent(
        self,
        user_id: int,
        callback: Callable[[list[BudgetStatus]], None],
        today: Optional[date] = None,
    ) -> Callable[[], None]:
        """Call `callback` with budget statuses now and after budget or transaction changes.

        Returns:
            A function that releases both underlying listeners
        """
        ready = False

        def refresh(_rows: list) -> None:
            if ready:
                callback(self.budgets_with_spent(user_id, today))

        unsubscribe_budgets = self.db.subscribe("budgets", user_id, refresh)
        unsubscribe_transactions = self.db.subscribe("transactions", user_id, refresh)
        ready = True
        callback(self.budgets_with_spent(user_id, today))

        def unsubscribe() -> None:
            unsubscribe_budgets()
            unsubscribe_transactions()

        return unsubscribe

    def _validate_amount(self, amount: Decimal) -> Decimal:
        amount = to_cents(amount)
        if amount <= 0:
            raise ValidationError("Budget amount must be positive")
        return amount

    def _require_budget(self, budget_id: int) -> Budget:
        budget = self.db.get_budget(budget_id)
        if budget is None:
            raise NotFoundError(budget_not_found(budget_id))
        return budget

    def _require_expense_category(self, category_id: int) -> None:
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        if category.kind != CategoryKind.EXPENSE:
            raise ValidationError(f"Category '{category.name}' is not an expense category")
