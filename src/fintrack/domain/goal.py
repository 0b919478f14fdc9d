"""Savings goal domain service."""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Optional

from fintrack.database.base import Database
from fintrack.domain.category import GOAL_CONTRIBUTION_CATEGORY, CategoryService
from fintrack.domain.entities import Goal, GoalProgress
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    account_owned_by_other_user,
    goal_not_found,
)
from fintrack.utils.money import to_cents

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
UPDATABLE_FIELDS = {"name", "target_amount", "current_amount", "deadline"}


def deadline_text(deadline: Optional[date], today: date) -> str:
    """Human-readable deadline status."""
    if deadline is None:
        return "No deadline"
    days_left = (deadline - today).days
    formatted = deadline.strftime("%d/%m/%Y")
    if days_left < 0:
        return f"Deadline passed on {formatted}"
    if days_left == 0:
        return "Deadline is today!"
    return f"{days_left} day(s) left ({formatted})"


def goal_progress(goal: Goal, today: Optional[date] = None) -> GoalProgress:
    """Derive percentage, remaining amount and deadline status of a goal."""
    today = today or date.today()
    if goal.target_amount > 0:
        percentage = (goal.current_amount / goal.target_amount * 100).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
    else:
        percentage = Decimal("0")
    return GoalProgress(
        goal=goal,
        percentage=percentage,
        remaining=max(goal.target_amount - goal.current_amount, Decimal("0")),
        days_left=(goal.deadline - today).days if goal.deadline is not None else None,
        deadline_text=deadline_text(goal.deadline, today),
    )


class GoalService:
    """Service for savings goals."""

    def __init__(self, db: Database):
        """Initialize goal service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_goal(
        self,
        user_id: int,
        name: str,
        target_amount: Decimal,
        current_amount: Decimal = Decimal("0"),
        deadline: Optional[date] = None,
    ) -> int:
        """Create a savings goal.

        Args:
            user_id: Owner of the goal
            name: Goal name
            target_amount: Amount to reach
            current_amount: Amount already saved
            deadline: Optional target date

        Returns:
            Goal ID

        Raises:
            ValidationError: If a field is invalid
        """
        name = self._validate_name(name)
        target_amount = self._validate_target(target_amount)
        current_amount = self._validate_current(current_amount)
        goal_id = self.db.create_goal(
            user_id=user_id,
            name=name,
            target_amount=target_amount,
            current_amount=current_amount,
            deadline=deadline,
        )
        logger.info("Created goal %s '%s' targeting %s", goal_id, name, target_amount)
        return goal_id

    def update_goal(self, goal_id: int, **changes: Any) -> None:
        """Change goal fields. Pass ``deadline=None`` explicitly to clear the deadline."""
        self._require_goal(goal_id)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}")

        fields = {
            name: value
            for name, value in changes.items()
            if value is not None or name == "deadline"
        }
        if "name" in fields:
            fields["name"] = self._validate_name(fields["name"])
        if "target_amount" in fields:
            fields["target_amount"] = self._validate_target(fields["target_amount"])
        if "current_amount" in fields:
            fields["current_amount"] = self._validate_current(fields["current_amount"])
        if fields:
            self.db.update_goal(goal_id, **fields)

    def delete_goal(self, goal_id: int) -> None:
        self._require_goal(goal_id)
        self.db.delete_goal(goal_id)

    def get_goal(self, goal_id: int) -> Optional[Goal]:
        return self.db.get_goal(goal_id)

    def list_goals(self, user_id: int) -> list[Goal]:
        return self.db.list_goals(user_id)

    def contribute(
        self,
        goal_id: int,
        account_id: int,
        amount: Decimal,
        date: Optional[date] = None,
    ) -> int:
        """Move money from an account into a goal.

        Records an expense in the Goal Contribution category and raises the
        goal's current amount in one database transaction.

        Returns:
            ID of the contribution transaction

        Raises:
            ValidationError: If amount is not positive or the account belongs to someone else
            NotFoundError: If goal or account doesn't exist
        """
        goal = self._require_goal(goal_id)
        amount = to_cents(amount)
        if amount <= 0:
            raise ValidationError("Contribution must be positive")
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if account.user_id != goal.user_id:
            raise ValidationError(account_owned_by_other_user(account_id, goal.user_id))

        category = CategoryService(self.db).require_category_by_name(GOAL_CONTRIBUTION_CATEGORY)
        return self.db.contribute_to_goal(
            goal_id=goal_id,
            account_id=account_id,
            amount=amount,
            date=date or _today(),
            description=f"Contribution to goal: {goal.name}",
            category_id=category.id,
        )

    def goal_progress(self, goal_id: int, today: Optional[date] = None) -> GoalProgress:
        return goal_progress(self._require_goal(goal_id), today)

    def watch_goals(
        self, user_id: int, callback: Callable[[list[Goal]], None]
    ) -> Callable[[], None]:
        """Call `callback` with the user's goals now and after every change."""
        return self.db.subscribe("goals", user_id, callback)

    def _require_goal(self, goal_id: int) -> Goal:
        goal = self.db.get_goal(goal_id)
        if goal is None:
            raise NotFoundError(goal_not_found(goal_id))
        return goal

    def _validate_name(self, name: str) -> str:
        name = (name or "").strip()
        if len(name) < MIN_NAME_LENGTH:
            raise ValidationError(f"Goal name must be at least {MIN_NAME_LENGTH} characters")
        return name

    def _validate_target(self, amount: Decimal) -> Decimal:
        amount = to_cents(amount)
        if amount <= 0:
            raise ValidationError("Target amount must be positive")
        return amount

    def _validate_current(self, amount: Decimal) -> Decimal:
        amount = to_cents(amount)
        if amount < 0:
            raise ValidationError("Current amount cannot be negative")
        return amount


def _today() -> date:
    return date.today()
