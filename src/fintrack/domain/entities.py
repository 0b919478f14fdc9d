"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
database schema. Services return these; the database layer maps ORM rows
into them so business logic never touches SQLAlchemy objects.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction relative to its account."""

    INCOME = "income"
    EXPENSE = "expense"


class CategoryKind(str, Enum):
    """Kind of category, used to filter categories per transaction type."""

    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"


class NotificationType(str, Enum):
    """Kinds of notification raised by the notification check."""

    BUDGET_WARNING = "budget_warning"
    GOAL_ACHIEVED = "goal_achieved"
    BILL_DUE = "bill_due"


class InstallmentState(str, Enum):
    FIXED = "fixed"
    ACTIVE = "active"
    FINISHED = "finished"


def signed_amount(type: TransactionType | str, amount: Decimal) -> Decimal:
    """Return the balance delta of a transaction: income adds, expense subtracts."""
    if TransactionType(type) == TransactionType.INCOME:
        return amount
    return -amount


@dataclass(frozen=True)
class User:
    """Owner of all per-user data."""

    id: int
    name: str
    email: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    user_id: int
    name: str
    bank_name: str
    balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str
    kind: CategoryKind


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    The amount is always positive; the type decides whether it adds to or
    subtracts from the account balance.
    """

    id: int
    user_id: int
    account_id: int
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    category_id: int
    transfer_id: Optional[str]
    created_at: datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount as applied to the account balance."""
        return signed_amount(self.type, self.amount)


@dataclass(frozen=True)
class Budget:
    """Monthly spending limit for one category."""

    id: int
    user_id: int
    category_id: int
    amount: Decimal
    created_at: datetime


@dataclass(frozen=True)
class BudgetStatus:
    """Budget with the amount spent in the current month."""

    budget: Budget
    spent: Decimal
    percentage: Decimal

    @property
    def remaining(self) -> Decimal:
        return max(self.budget.amount - self.spent, Decimal("0"))

    @property
    def over_budget_by(self) -> Decimal:
        return max(self.spent - self.budget.amount, Decimal("0"))

    @property
    def is_over_budget(self) -> bool:
        return self.percentage > 100


@dataclass(frozen=True)
class RecurringTransaction:
    """Recurring bill, either fixed (no installments) or an installment plan."""

    id: int
    user_id: int
    description: str
    amount: Decimal
    day_of_month: int
    start_date: date
    installments: Optional[int]
    account_id: int
    category_id: int
    created_at: datetime


@dataclass(frozen=True)
class RecurringIncome:
    """Income expected every month on a given day."""

    id: int
    user_id: int
    description: str
    amount: Decimal
    day_of_month: int
    account_id: int
    created_at: datetime


@dataclass(frozen=True)
class InstallmentStatus:
    """Where a recurring bill stands in its installment plan."""

    state: InstallmentState
    current: Optional[int] = None
    total: Optional[int] = None

    @property
    def label(self) -> str:
        if self.state == InstallmentState.FIXED:
            return "Fixed"
        if self.state == InstallmentState.FINISHED:
            return "Finished"
        return f"{self.current} of {self.total}"


@dataclass(frozen=True)
class Goal:
    """Savings goal."""

    id: int
    user_id: int
    name: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: Optional[date]
    created_at: datetime


@dataclass(frozen=True)
class GoalProgress:
    """Derived progress information for a goal."""

    goal: Goal
    percentage: Decimal
    remaining: Decimal
    days_left: Optional[int]
    deadline_text: str

    @property
    def is_achieved(self) -> bool:
        return self.goal.current_amount >= self.goal.target_amount


@dataclass(frozen=True)
class Notification:
    """User notification."""

    id: int
    user_id: int
    type: NotificationType
    related_id: int
    message: str
    href: str
    is_read: bool
    timestamp: datetime


@dataclass(frozen=True)
class UserPreferences:
    """Per-user preferences; defaults apply when nothing is stored."""

    user_id: int
    currency: str = "BRL"
    budget_warning_threshold: int = 90
    bill_reminder_days: int = 3


@dataclass(frozen=True)
class ProjectionMonth:
    """One month of a balance projection."""

    month: date
    income: Decimal
    expense: Decimal
    net: Decimal
    end_balance: Decimal


@dataclass(frozen=True)
class CategoryTotal:
    """Total amount for a category in a report."""

    category_id: Optional[int]
    name: str
    value: Decimal


@dataclass(frozen=True)
class MonthlyTotals:
    """Income and expense totals for a calendar month."""

    month: date
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class DashboardSummary:
    """Headline numbers for the current month."""

    total_balance: Decimal
    monthly_income: Decimal
    monthly_expenses: Decimal

    @property
    def monthly_savings(self) -> Decimal:
        return self.monthly_income - self.monthly_expenses


@dataclass
class ImportRow:
    """One CSV row classified for import.

    Mutable so that a caller can toggle `include`, correct the type or pick a
    category before committing the import. Rows without a category get the
    import-wide default.
    """

    row_number: int
    date: Optional[date]
    description: str
    amount: Decimal
    type: TransactionType
    account_id: int
    include: bool = True
    error: Optional[str] = None
    category_id: Optional[int] = None


@dataclass
class ImportResult:
    """Outcome of an import run."""

    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CategorySuggestion:
    """Suggested category for a transaction description."""

    category_id: int
    category_name: str
    confidence: float
