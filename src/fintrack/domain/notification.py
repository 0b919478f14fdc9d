"""Notification domain service.

Notifications are raised by an explicit check rather than by a scheduler.
Each (type, related item) pair raises at most one notification per calendar
month.
"""

import logging
from datetime import date, datetime, time, UTC
from typing import Callable, Optional

from fintrack.database.base import Database
from fintrack.domain.budget import BudgetService
from fintrack.domain.entities import Notification, NotificationType
from fintrack.domain.errors import NotFoundError, notification_not_found
from fintrack.domain.preferences import PreferencesService
from fintrack.domain.schedule import month_start, next_due_date

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for checking, listing and clearing notifications."""

    def __init__(self, db: Database):
        """Initialize notification service.

        Args:
            db: Database instance
        """
        self.db = db

    def check_for_notifications(
        self, user_id: int, today: Optional[date] = None
    ) -> list[Notification]:
        """Create notifications for budgets near their limit, achieved goals and due bills.

        Args:
            user_id: User to check
            today: Day to evaluate; defaults to the current date

        Returns:
            The notifications created by this check
        """
        now = datetime.now(UTC).replace(tzinfo=None)
        if today is None:
            today = now.date()
        else:
            now = datetime.combine(today, now.time())

        prefs = PreferencesService(self.db).get_preferences(user_id)
        created: list[Notification] = []

        for status in BudgetService(self.db).budgets_with_spent(user_id, today):
            if status.percentage >= prefs.budget_warning_threshold:
                category = self.db.get_category(status.budget.category_id)
                name = category.name if category is not None else "a category"
                message = (
                    f"You have used {status.percentage}% of your {name} budget "
                    f"(warning at {prefs.budget_warning_threshold}%)."
                )
                self._create_once(
                    created, user_id, NotificationType.BUDGET_WARNING,
                    status.budget.id, message, "/budgets", today, now,
                )

        for goal in self.db.list_goals(user_id):
            if goal.current_amount >= goal.target_amount:
                message = f'Congratulations! You reached your goal "{goal.name}".'
                self._create_once(
                    created, user_id, NotificationType.GOAL_ACHIEVED,
                    goal.id, message, "/goals", today, now,
                )

        for item in self.db.list_recurring(user_id):
            due = next_due_date(item.day_of_month, today, item.start_date, item.installments)
            if due is None or (due - today).days > prefs.bill_reminder_days:
                continue
            message = f'Bill "{item.description}" is due on {due.strftime("%d/%m/%Y")}.'
            self._create_once(
                created, user_id, NotificationType.BILL_DUE,
                item.id, message, "/recurring", today, now,
            )

        if created:
            logger.info("Created %d notification(s) for user %s", len(created), user_id)
        return created

    def _create_once(
        self,
        created: list[Notification],
        user_id: int,
        type: NotificationType,
        related_id: int,
        message: str,
        href: str,
        today: date,
        now: datetime,
    ) -> None:
        """Create a notification unless one for the same item exists this month."""
        since = datetime.combine(month_start(today), time.min)
        existing = self.db.list_notifications(
            user_id=user_id, type=type.value, related_id=related_id, since=since
        )
        if existing:
            logger.debug("Skipping %s for %s: already notified this month", type.value, related_id)
            return
        notification_id = self.db.create_notification(
            user_id=user_id,
            type=type.value,
            related_id=related_id,
            message=message,
            href=href,
            timestamp=now,
        )
        created.append(self.db.get_notification(notification_id))

    def list_notifications(self, user_id: int, unread_only: bool = False) -> list[Notification]:
        """List notifications newest first."""
        return self.db.list_notifications(user_id=user_id, unread_only=unread_only)

    def unread_count(self, user_id: int) -> int:
        return len(self.db.list_notifications(user_id=user_id, unread_only=True))

    def mark_all_as_read(self, user_id: int) -> int:
        """Mark every unread notification read.

        Returns:
            Number of notifications changed
        """
        return self.db.mark_all_notifications_read(user_id)

    def delete_notification(self, notification_id: int) -> None:
        if self.db.get_notification(notification_id) is None:
            raise NotFoundError(notification_not_found(notification_id))
        self.db.delete_notification(notification_id)

    def watch_notifications(
        self, user_id: int, callback: Callable[[list[Notification]], None]
    ) -> Callable[[], None]:
        return self.db.subscribe("notifications", user_id, callback)
