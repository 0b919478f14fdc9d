"""CSV import domain service.

Importing is a three step pipeline: read the file into a header and rows,
map the date, description and amount columns (suggested from the header
names), then classify each row and save the included ones as transactions.
"""

import csv
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.categorizer import CategorizerService, suggest_category
from fintrack.domain.category import (
    OTHER_EXPENSES_CATEGORY,
    OTHER_INCOME_CATEGORY,
    CategoryService,
)
from fintrack.domain.entities import ImportResult, ImportRow, TransactionType
from fintrack.domain.errors import NotFoundError, ValidationError, category_not_found
from fintrack.domain.transaction import TransactionService
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.money import to_cents

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("date", "description", "amount")

# Tried in order, first match wins
DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d", "%m/%d/%Y", "%d-%m-%Y", "%Y/%m/%d")

# Header keywords per field, English and Portuguese, most specific first
HEADER_KEYWORDS = {
    "date": ("date", "data", "posted", "lançamento", "lancamento"),
    "description": (
        "description",
        "descrição",
        "descricao",
        "histórico",
        "historico",
        "memo",
        "details",
        "payee",
        "estabelecimento",
        "name",
    ),
    "amount": ("amount", "valor", "value", "quantia", "montante", "total"),
}


def parse_import_date(value: str) -> Optional[date]:
    """Parse a CSV date with the known formats, or None if none matches."""
    value = (value or "").strip()
    if not value:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def suggest_mapping(headers: list[str]) -> dict[str, Optional[str]]:
    """Guess which header holds the date, description and amount.

    An exact (case-insensitive) keyword match beats a substring match, and
    one header is never mapped to two fields.

    Returns:
        Dict of field name to header, None where nothing matched
    """
    normalized = [(header, header.strip().lower()) for header in headers]
    mapping: dict[str, Optional[str]] = {}
    used: set[str] = set()

    for field_name, keywords in HEADER_KEYWORDS.items():
        match = None
        for keyword in keywords:
            match = next(
                (h for h, norm in normalized if norm == keyword and h not in used), None
            )
            if match is not None:
                break
        if match is None:
            for keyword in keywords:
                match = next(
                    (h for h, norm in normalized if keyword in norm and h not in used), None
                )
                if match is not None:
                    break
        mapping[field_name] = match
        if match is not None:
            used.add(match)
    return mapping


class CSVImportService:
    """Service for importing CSV files."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)
        self.category_service = CategoryService(db)
        self.categorizer = CategorizerService(db)

    def read_csv(self, csv_file_path: str) -> tuple[list[str], list[list[str]]]:
        """Read a CSV file into its header and data rows.

        The delimiter is sniffed and a UTF-8 byte order mark is ignored.
        Blank lines are dropped.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If there are no data rows or a row's column
                count differs from the header
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(4096)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
            except csv.Error:
                delimiter = ","
            records = [
                row for row in csv.reader(f, delimiter=delimiter) if any(c.strip() for c in row)
            ]

        if not records:
            raise ValidationError("CSV file is empty")
        headers = [header.strip() for header in records[0]]
        rows = records[1:]
        if not rows:
            raise ValidationError("CSV file has a header but no data rows")
        for row_num, row in enumerate(rows, start=2):
            if len(row) != len(headers):
                raise ValidationError(
                    f"Row {row_num} has {len(row)} columns, expected {len(headers)}"
                )
        return headers, rows

    def build_rows(
        self,
        headers: list[str],
        rows: list[list[str]],
        mapping: dict[str, Optional[str]],
        account_id: int,
    ) -> list[ImportRow]:
        """Classify CSV rows into import rows.

        Negative amounts become expenses, everything else income; the stored
        amount is absolute and rounded to cents. Rows whose date, description
        or amount cannot be read are kept with include=False and an error note.

        Raises:
            ValidationError: If a field is unmapped or mapped to an unknown header
        """
        indexes = {}
        for field_name in REQUIRED_FIELDS:
            column = mapping.get(field_name)
            if not column:
                raise ValidationError(f"Column for '{field_name}' is not mapped")
            if column not in headers:
                raise ValidationError(f"Column '{column}' not found in CSV header")
            indexes[field_name] = headers.index(column)

        result = []
        for row_num, row in enumerate(rows, start=2):
            raw_date = row[indexes["date"]]
            description = row[indexes["description"]].strip()
            raw_amount = row[indexes["amount"]]

            errors = []
            txn_date = parse_import_date(raw_date)
            if txn_date is None:
                errors.append(f"invalid date '{raw_date}'")

            amount = Decimal("0")
            try:
                amount = to_cents(parse_amount(raw_amount))
            except ValueError:
                errors.append(f"invalid amount '{raw_amount}'")
            else:
                if amount == 0:
                    errors.append("amount is zero")

            if len(description) < 2:
                errors.append("description too short")

            result.append(
                ImportRow(
                    row_number=row_num,
                    date=txn_date,
                    description=description,
                    amount=abs(amount),
                    type=TransactionType.EXPENSE if amount < 0 else TransactionType.INCOME,
                    account_id=account_id,
                    include=not errors,
                    error="; ".join(errors) if errors else None,
                )
            )
        return result

    def suggest_categories(self, user_id: int, rows: list[ImportRow]) -> int:
        """Fill in categories for included rows from the user's history.

        Rows that already have a category keep it, and a suggestion is only
        taken when its category kind fits the row type.

        Returns:
            Number of rows that got a category
        """
        history = self.categorizer.history(user_id)
        kinds = {category.id: category.kind for category in self.category_service.list_categories()}
        filled = 0
        for row in rows:
            if not row.include or row.category_id is not None:
                continue
            suggestion = suggest_category(row.description, history)
            if suggestion is None:
                continue
            kind = kinds.get(suggestion.category_id)
            if kind is not None and kind.value == row.type.value:
                row.category_id = suggestion.category_id
                filled += 1
        logger.debug("Suggested categories for %d of %d row(s)", filled, len(rows))
        return filled

    def import_rows(
        self, user_id: int, rows: list[ImportRow], category_id: Optional[int] = None
    ) -> ImportResult:
        """Save the included rows as transactions, applying balances.

        Args:
            user_id: Owner of the transactions
            rows: Classified rows; rows with include=False are skipped
            category_id: Category for rows without their own whose type fits
                its kind; others get Other Expenses or Other Income by type

        Returns:
            ImportResult with imported and skipped counts and per-row errors
        """
        result = ImportResult()
        defaults = {
            TransactionType.EXPENSE: self.category_service.require_category_by_name(
                OTHER_EXPENSES_CATEGORY
            ).id,
            TransactionType.INCOME: self.category_service.require_category_by_name(
                OTHER_INCOME_CATEGORY
            ).id,
        }
        if category_id is not None:
            category = self.category_service.get_category(category_id)
            if category is None:
                raise NotFoundError(category_not_found(category_id))
            for txn_type in defaults:
                if category.kind.value == txn_type.value:
                    defaults[txn_type] = category.id

        for row in rows:
            if not row.include:
                result.skipped += 1
                if row.error:
                    result.errors.append(f"Row {row.row_number}: {row.error}")
                continue
            try:
                self.transaction_service.add_transaction(
                    user_id=user_id,
                    account_id=row.account_id,
                    date=row.date,
                    description=row.description,
                    amount=row.amount,
                    type=row.type,
                    category_id=(
                        row.category_id if row.category_id is not None else defaults[row.type]
                    ),
                )
            except ValueError as e:
                result.skipped += 1
                result.errors.append(f"Row {row.row_number}: {e}")
                continue
            result.imported += 1

        logger.info(
            "Imported %d transaction(s) for user %s, skipped %d",
            result.imported,
            user_id,
            result.skipped,
        )
        return result

    def import_csv(
        self,
        user_id: int,
        csv_file_path: str,
        account_id: int,
        mapping: Optional[dict[str, Optional[str]]] = None,
        category_id: Optional[int] = None,
    ) -> ImportResult:
        """Read, map, classify and import a CSV file in one call.

        Args:
            user_id: Owner of the transactions
            csv_file_path: Path to CSV file
            account_id: Account every row is recorded on
            mapping: Field to header mapping; suggested from the header when
                omitted, and given entries override suggested ones
            category_id: Optional import-wide category, see `import_rows`

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the file or mapping is invalid
        """
        headers, rows = self.read_csv(csv_file_path)
        effective = suggest_mapping(headers)
        if mapping:
            effective.update({k: v for k, v in mapping.items() if v})
        import_rows = self.build_rows(headers, rows, effective, account_id)
        return self.import_rows(user_id, import_rows, category_id=category_id)
