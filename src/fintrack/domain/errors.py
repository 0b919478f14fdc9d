"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def budget_not_found(budget_id: int) -> str:
    return f"Budget {budget_id} not found"


def recurring_not_found(recurring_id: int) -> str:
    return f"Recurring bill {recurring_id} not found"


def recurring_income_not_found(income_id: int) -> str:
    return f"Recurring income {income_id} not found"


def goal_not_found(goal_id: int) -> str:
    return f"Goal {goal_id} not found"


def notification_not_found(notification_id: int) -> str:
    return f"Notification {notification_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def account_delete_blocked(
    account_id: int, transaction_count: int, recurring_count: int
) -> str:
    """Return message when account has dependent transactions or recurring items."""
    parts = []
    if transaction_count > 0:
        parts.append(
            f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}"
        )
    if recurring_count > 0:
        parts.append(
            f"{recurring_count} recurring item{'s' if recurring_count != 1 else ''}"
        )
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Please reassign or delete them first."
    )


def account_owned_by_other_user(account_id: int, user_id: int) -> str:
    """Return message when an account does not belong to the acting user."""
    return f"Account {account_id} does not belong to user {user_id}"
