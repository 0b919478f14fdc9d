"""Transaction domain service.

Every write goes through the database layer, which applies the balance delta
of the transaction in the same unit of work as the record itself.
"""

import logging
from typing import Any, Callable, Optional
from datetime import date
from decimal import Decimal

from fintrack.database.base import Database
from fintrack.domain.category import TRANSFER_CATEGORY, CategoryService
from fintrack.domain.entities import (
    Account,
    Transaction as TransactionEntity,
    TransactionType,
    signed_amount,
)
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    account_owned_by_other_user,
    transaction_not_found,
)
from fintrack.utils.money import to_cents

__all__ = ["TransactionService", "signed_amount", "MIN_DESCRIPTION_LENGTH"]

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 2
UPDATABLE_FIELDS = {"account_id", "date", "description", "amount", "type", "category_id"}


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_transaction(
        self,
        user_id: int,
        account_id: int,
        date: date,
        description: str,
        amount: Decimal,
        type: TransactionType | str,
        category_id: int,
    ) -> int:
        """Record a transaction and update the account balance.

        Args:
            user_id: Acting user
            account_id: Account the money moves in or out of
            date: Transaction date
            description: What the transaction was for
            amount: Positive amount
            type: "income" or "expense"
            category_id: Category ID

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If account or category doesn't exist
        """
        type = self._validate_type(type)
        amount = self._validate_amount(amount)
        description = self._validate_description(description)
        self._require_account(user_id, account_id)
        CategoryService(self.db).require_category_for(category_id, type)

        return self.db.create_transaction(
            user_id=user_id,
            account_id=account_id,
            date=date,
            description=description,
            amount=amount,
            type=type.value,
            category_id=category_id,
        )

    def update_transaction(self, transaction_id: int, **changes: Any) -> None:
        """Change fields of a transaction, moving the balance effect accordingly.

        Accepted fields are account_id, date, description, amount, type and
        category_id. Transfer legs cannot be edited; delete and recreate the
        transfer instead.

        Raises:
            NotFoundError: If transaction, account or category doesn't exist
            ValidationError: If a field is invalid or the transaction is a transfer leg
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if txn.transfer_id is not None:
            raise ValidationError(
                f"Transaction {transaction_id} is part of a transfer; delete and recreate it instead"
            )

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}")

        fields = {name: value for name, value in changes.items() if value is not None}
        if "type" in fields:
            fields["type"] = self._validate_type(fields["type"]).value
        if "amount" in fields:
            fields["amount"] = self._validate_amount(fields["amount"])
        if "description" in fields:
            fields["description"] = self._validate_description(fields["description"])
        if "account_id" in fields:
            self._require_account(txn.user_id, fields["account_id"])
        if "type" in fields or "category_id" in fields:
            CategoryService(self.db).require_category_for(
                fields.get("category_id", txn.category_id), fields.get("type", txn.type)
            )

        if not fields:
            logger.debug("No changes given for transaction %s", transaction_id)
            return
        self.db.update_transaction(transaction_id, **fields)

    def delete_transaction(self, transaction_id: int) -> list[int]:
        """Delete a transaction and revert its balance effect.

        Deleting either leg of a transfer deletes both.

        Returns:
            IDs of the deleted transactions
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return self.db.delete_transaction(transaction_id)

    def transfer(
        self,
        user_id: int,
        from_account_id: int,
        to_account_id: int,
        amount: Decimal,
        date: date,
        description: Optional[str] = None,
    ) -> tuple[int, int]:
        """Move money between two accounts of the same user.

        Creates an expense leg on the source and an income leg on the target,
        both in the Transfer category.

        Returns:
            (expense leg ID, income leg ID)

        Raises:
            ValidationError: If accounts are the same or amount is not positive
            NotFoundError: If an account doesn't exist
        """
        if from_account_id == to_account_id:
            raise ValidationError("Source and destination accounts must be different")
        amount = self._validate_amount(amount)
        source = self._require_account(user_id, from_account_id)
        target = self._require_account(user_id, to_account_id)

        if description is None or not description.strip():
            description = f"Transfer from {source.name} to {target.name}"
        else:
            description = self._validate_description(description)

        category = CategoryService(self.db).require_category_by_name(TRANSFER_CATEGORY)
        return self.db.create_transfer(
            user_id=user_id,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
            date=date,
            description=description,
            category_id=category.id,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        type: Optional[TransactionType | str] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions newest first.

        Args:
            user_id: Owner of the transactions
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            account_id: Optional account filter
            category_id: Optional category filter
            type: Optional "income" or "expense" filter
            limit: Optional maximum number of results

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            category_id=category_id,
            type=TransactionType(type).value if type is not None else None,
            limit=limit,
        )

    def recent_transactions(self, user_id: int, limit: int = 5) -> list[TransactionEntity]:
        return self.db.list_transactions(user_id=user_id, limit=limit)

    def watch_transactions(
        self, user_id: int, callback: Callable[[list[TransactionEntity]], None]
    ) -> Callable[[], None]:
        """Call `callback` with the user's transactions now and after every change."""
        return self.db.subscribe("transactions", user_id, callback)

    def _validate_type(self, type: TransactionType | str) -> TransactionType:
        try:
            return TransactionType(type)
        except ValueError:
            raise ValidationError(f"Invalid transaction type '{type}'") from None

    def _validate_amount(self, amount: Decimal) -> Decimal:
        amount = to_cents(amount)
        if amount <= 0:
            raise ValidationError("Amount must be positive")
        return amount

    def _validate_description(self, description: str) -> str:
        description = (description or "").strip()
        if len(description) < MIN_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
            )
        return description

    def _require_account(self, user_id: int, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if account.user_id != user_id:
            raise ValidationError(account_owned_by_other_user(account_id, user_id))
        return account
