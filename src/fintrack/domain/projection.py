"""Balance projection from recurring incomes and bills."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import ProjectionMonth
from fintrack.domain.errors import ValidationError
from fintrack.domain.schedule import add_months, is_active_in_month, month_start

logger = logging.getLogger(__name__)

MAX_PROJECTION_MONTHS = 120


class ProjectionService:
    """Service projecting account balances into future months."""

    def __init__(self, db: Database):
        """Initialize projection service.

        Args:
            db: Database instance
        """
        self.db = db

    def project(
        self, user_id: int, months: int = 6, today: Optional[date] = None
    ) -> list[ProjectionMonth]:
        """Project the total balance over the next `months` calendar months.

        Each month adds every recurring income and subtracts the recurring
        bills due in it. Installment plans stop contributing after their last
        installment.

        Args:
            user_id: Owner of the accounts
            months: Number of months to project (1-120)
            today: Reference day; the first projected month is the one after it

        Returns:
            One ProjectionMonth per month with a running end balance

        Raises:
            ValidationError: If months is out of range
        """
        if not 1 <= months <= MAX_PROJECTION_MONTHS:
            raise ValidationError(f"Months must be between 1 and {MAX_PROJECTION_MONTHS}")

        today = today or date.today()
        balance = sum((acc.balance for acc in self.db.list_accounts(user_id)), Decimal("0"))
        incomes = self.db.list_recurring_incomes(user_id)
        bills = self.db.list_recurring(user_id)
        monthly_income = sum((income.amount for income in incomes), Decimal("0"))

        results = []
        for offset in range(1, months + 1):
            month = add_months(month_start(today), offset)
            expense = sum(
                (
                    bill.amount
                    for bill in bills
                    if is_active_in_month(bill.start_date, bill.installments, month.year, month.month)
                ),
                Decimal("0"),
            )
            net = monthly_income - expense
            balance += net
            results.append(
                ProjectionMonth(
                    month=month,
                    income=monthly_income,
                    expense=expense,
                    net=net,
                    end_balance=balance,
                )
            )

        logger.debug("Projected %d month(s) for user %s", months, user_id)
        return results
