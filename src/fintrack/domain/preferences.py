"""User preferences domain service."""

import re
from typing import Any

from fintrack.database.base import Database
from fintrack.domain.entities import UserPreferences
from fintrack.domain.errors import ValidationError

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


class PreferencesService:
    """Service for per-user preferences."""

    def __init__(self, db: Database):
        """Initialize preferences service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_preferences(self, user_id: int) -> UserPreferences:
        """Stored preferences of a user, or the defaults if none were saved."""
        prefs = self.db.get_preferences(user_id)
        if prefs is None:
            return UserPreferences(user_id=user_id)
        return prefs

    def save_preferences(self, user_id: int, **fields: Any) -> UserPreferences:
        """Merge the given fields into the stored preferences.

        Fields not given (or given as None) keep their stored value.

        Args:
            user_id: Owner of the preferences
            currency: ISO 4217 code, e.g. "BRL"
            budget_warning_threshold: Budget usage percentage (1-100) that raises a warning
            bill_reminder_days: Days ahead (0-31) to remind about due bills

        Returns:
            The preferences after saving

        Raises:
            ValidationError: If a field is unknown or out of range
        """
        changes = {name: value for name, value in fields.items() if value is not None}
        unknown = set(changes) - {"currency", "budget_warning_threshold", "bill_reminder_days"}
        if unknown:
            raise ValidationError(f"Unknown preference(s): {', '.join(sorted(unknown))}")

        if "currency" in changes:
            currency = str(changes["currency"]).strip().upper()
            if not CURRENCY_PATTERN.match(currency):
                raise ValidationError(f"Invalid currency code '{changes['currency']}'")
            changes["currency"] = currency
        if "budget_warning_threshold" in changes:
            threshold = int(changes["budget_warning_threshold"])
            if not 1 <= threshold <= 100:
                raise ValidationError("Budget warning threshold must be between 1 and 100")
            changes["budget_warning_threshold"] = threshold
        if "bill_reminder_days" in changes:
            days = int(changes["bill_reminder_days"])
            if not 0 <= days <= 31:
                raise ValidationError("Bill reminder days must be between 0 and 31")
            changes["bill_reminder_days"] = days

        self.db.save_preferences(user_id, **changes)
        return self.get_preferences(user_id)
