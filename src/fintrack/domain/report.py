"""Report domain service: category breakdowns, monthly totals and the dashboard."""

from datetime import date
from decimal import Decimal
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import (
    CategoryTotal,
    DashboardSummary,
    MonthlyTotals,
    Transaction,
    TransactionType,
)
from fintrack.domain.schedule import add_months, month_end, month_start

UNCATEGORIZED = "Uncategorized"


class ReportService:
    """Service for building reports from transactions."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_filtered_transactions(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        type: Optional[TransactionType] = None,
        include_transfers: bool = False,
    ) -> list[Transaction]:
        """Get transactions matching report criteria."""
        transactions = self.db.list_transactions(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            type=type.value if type is not None else None,
        )
        if include_transfers:
            return transactions
        return [txn for txn in transactions if txn.transfer_id is None]

    def expenses_by_category(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        include_transfers: bool = False,
    ) -> list[CategoryTotal]:
        """Total expenses per category, largest first.

        Args:
            user_id: Owner of the transactions
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            account_id: Optional account filter
            include_transfers: If True, outgoing transfer legs count as expenses

        Returns:
            Category totals sorted by value descending, then by name
        """
        expenses = self.get_filtered_transactions(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            type=TransactionType.EXPENSE,
            include_transfers=include_transfers,
        )

        totals: dict[int, Decimal] = {}
        for txn in expenses:
            totals[txn.category_id] = totals.get(txn.category_id, Decimal("0")) + txn.amount

        results = []
        for category_id, value in totals.items():
            category = self.db.get_category(category_id)
            name = category.name if category is not None else UNCATEGORIZED
            results.append(CategoryTotal(category_id=category_id, name=name, value=value))
        return sorted(results, key=lambda total: (-total.value, total.name))

    def monthly_overview(
        self, user_id: int, today: Optional[date] = None, months: int = 6
    ) -> list[MonthlyTotals]:
        """Income and expense totals for the last `months` calendar months.

        The current month is the last entry. Transfers are excluded.
        """
        if months < 1:
            raise ValueError("Months must be at least 1")
        today = today or date.today()
        first_month = add_months(month_start(today), -(months - 1))
        buckets: dict[date, dict[TransactionType, Decimal]] = {
            add_months(first_month, i): {
                TransactionType.INCOME: Decimal("0"),
                TransactionType.EXPENSE: Decimal("0"),
            }
            for i in range(months)
        }

        transactions = self.get_filtered_transactions(
            user_id=user_id, start_date=first_month, end_date=month_end(today)
        )
        for txn in transactions:
            bucket = buckets.get(month_start(txn.date))
            if bucket is not None:
                bucket[txn.type] += txn.amount

        return [
            MonthlyTotals(
                month=month,
                income=totals[TransactionType.INCOME],
                expense=totals[TransactionType.EXPENSE],
            )
            for month, totals in buckets.items()
        ]

    def dashboard_summary(self, user_id: int, today: Optional[date] = None) -> DashboardSummary:
        """Total balance plus this month's income and expenses, transfers excluded."""
        today = today or date.today()
        total_balance = sum(
            (acc.balance for acc in self.db.list_accounts(user_id)), Decimal("0")
        )
        income = Decimal("0")
        expenses = Decimal("0")
        for txn in self.get_filtered_transactions(
            user_id=user_id,
            start_date=month_start(today),
            end_date=month_end(today),
        ):
            if txn.type == TransactionType.INCOME:
                income += txn.amount
            else:
                expenses += txn.amount
        return DashboardSummary(
            total_balance=total_balance, monthly_income=income, monthly_expenses=expenses
        )
