"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the schema can evolve without
the services noticing.
"""

from fintrack.domain import entities as domain
from fintrack.database.models import (
    User as ORMUser,
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Budget as ORMBudget,
    RecurringTransaction as ORMRecurringTransaction,
    RecurringIncome as ORMRecurringIncome,
    Goal as ORMGoal,
    Notification as ORMNotification,
    UserPreferences as ORMUserPreferences,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        email=orm_user.email,
        created_at=orm_user.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        balance=orm_account.balance,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        kind=domain.CategoryKind(orm_category.kind),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        account_id=orm_transaction.account_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        type=domain.TransactionType(orm_transaction.type),
        category_id=orm_transaction.category_id,
        transfer_id=orm_transaction.transfer_id,
        created_at=orm_transaction.created_at,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    return domain.Budget(
        id=orm_budget.id,
        user_id=orm_budget.user_id,
        category_id=orm_budget.category_id,
        amount=orm_budget.amount,
        created_at=orm_budget.created_at,
    )


def recurring_to_domain(orm_recurring: ORMRecurringTransaction) -> domain.RecurringTransaction:
    return domain.RecurringTransaction(
        id=orm_recurring.id,
        user_id=orm_recurring.user_id,
        description=orm_recurring.description,
        amount=orm_recurring.amount,
        day_of_month=orm_recurring.day_of_month,
        start_date=orm_recurring.start_date,
        installments=orm_recurring.installments,
        account_id=orm_recurring.account_id,
        category_id=orm_recurring.category_id,
        created_at=orm_recurring.created_at,
    )


def recurring_income_to_domain(orm_income: ORMRecurringIncome) -> domain.RecurringIncome:
    return domain.RecurringIncome(
        id=orm_income.id,
        user_id=orm_income.user_id,
        description=orm_income.description,
        amount=orm_income.amount,
        day_of_month=orm_income.day_of_month,
        account_id=orm_income.account_id,
        created_at=orm_income.created_at,
    )


def goal_to_domain(orm_goal: ORMGoal) -> domain.Goal:
    return domain.Goal(
        id=orm_goal.id,
        user_id=orm_goal.user_id,
        name=orm_goal.name,
        target_amount=orm_goal.target_amount,
        current_amount=orm_goal.current_amount,
        deadline=orm_goal.deadline,
        created_at=orm_goal.created_at,
    )


def notification_to_domain(orm_notification: ORMNotification) -> domain.Notification:
    return domain.Notification(
        id=orm_notification.id,
        user_id=orm_notification.user_id,
        type=domain.NotificationType(orm_notification.type),
        related_id=orm_notification.related_id,
        message=orm_notification.message,
        href=orm_notification.href,
        is_read=orm_notification.is_read,
        timestamp=orm_notification.timestamp,
    )


def preferences_to_domain(orm_preferences: ORMUserPreferences) -> domain.UserPreferences:
    return domain.UserPreferences(
        user_id=orm_preferences.user_id,
        currency=orm_preferences.currency,
        budget_warning_threshold=orm_preferences.budget_warning_threshold,
        bill_reminder_days=orm_preferences.bill_reminder_days,
    )
