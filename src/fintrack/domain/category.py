"""Category domain service."""

from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import Category, CategoryKind, TransactionType
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    category_name_not_found,
    category_not_found,
)

TRANSFER_CATEGORY = "Transfer"
GOAL_CONTRIBUTION_CATEGORY = "Goal Contribution"
SALARY_CATEGORY = "Salary"
OTHER_INCOME_CATEGORY = "Other Income"
OTHER_EXPENSES_CATEGORY = "Other Expenses"

# Default categories (name, kind)
DEFAULT_CATEGORIES = [
    ("Housing", CategoryKind.EXPENSE),
    ("Food", CategoryKind.EXPENSE),
    ("Transportation", CategoryKind.EXPENSE),
    ("Health", CategoryKind.EXPENSE),
    ("Leisure", CategoryKind.EXPENSE),
    ("Shopping", CategoryKind.EXPENSE),
    ("Clothing", CategoryKind.EXPENSE),
    ("Education", CategoryKind.EXPENSE),
    ("Gifts", CategoryKind.EXPENSE),
    ("Books", CategoryKind.EXPENSE),
    (SALARY_CATEGORY, CategoryKind.INCOME),
    (OTHER_INCOME_CATEGORY, CategoryKind.INCOME),
    (OTHER_EXPENSES_CATEGORY, CategoryKind.EXPENSE),
    ("Fixed Bills", CategoryKind.EXPENSE),
    (TRANSFER_CATEGORY, CategoryKind.TRANSFER),
    (GOAL_CONTRIBUTION_CATEGORY, CategoryKind.EXPENSE),
]


class CategoryService:
    """Service for the shared category table."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def ensure_default_categories(self) -> int:
        """Create any missing default category.

        Returns:
            Number of categories created
        """
        created = 0
        for name, kind in DEFAULT_CATEGORIES:
            if self.db.get_category_by_name(name) is None:
                self.db.create_category(name=name, kind=kind.value)
                created += 1
        return created

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name, ignoring case and surrounding whitespace."""
        return self.db.get_category_by_name(name)

    def require_category_by_name(self, name: str) -> Category:
        """Get category by name, seeding the defaults once if it is missing.

        Raises:
            NotFoundError: If no category has this name
        """
        category = self.db.get_category_by_name(name)
        if category is None and self.ensure_default_categories() > 0:
            category = self.db.get_category_by_name(name)
        if category is None:
            raise NotFoundError(category_name_not_found(name))
        return category

    def list_categories(self, kind: Optional[CategoryKind | str] = None) -> list[Category]:
        """List categories, optionally only those of one kind."""
        return self.db.list_categories(
            kind=CategoryKind(kind).value if kind is not None else None
        )

    def require_category_for(self, category_id: int, type: TransactionType | str) -> Category:
        """Get a category a manual transaction of `type` may be filed under.

        Expenses need an expense category and incomes an income category.
        The transfer category is only used by transfers.

        Raises:
            NotFoundError: If category doesn't exist
            ValidationError: If the category kind doesn't fit the type
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        type = TransactionType(type)
        if category.kind == CategoryKind.TRANSFER:
            raise ValidationError(f"Category '{category.name}' is reserved for transfers")
        if category.kind.value != type.value:
            raise ValidationError(
                f"Category '{category.name}' is an {category.kind.value} category, "
                f"not valid for {type.value} transactions"
            )
        return category
