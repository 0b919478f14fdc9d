"""Tests for category breakdowns, monthly overview and the dashboard."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.cli.main import cli
from fintrack.domain.report import ReportService


@pytest.fixture
def report_service(temp_db):
    return ReportService(temp_db)


@pytest.fixture
def add_income(transaction_service, sample_user, sample_account, categories):
    def _add(amount, txn_date, description="Salary"):
        return transaction_service.add_transaction(
            user_id=sample_user.id,
            account_id=sample_account.id,
            date=txn_date,
            description=description,
            amount=Decimal(amount),
            type="income",
            category_id=categories["Salary"].id,
        )

    return _add


@pytest.fixture
def transfer(transaction_service, sample_user, sample_account, second_account):
    def _transfer(amount, txn_date):
        return transaction_service.transfer(
            user_id=sample_user.id,
            from_account_id=sample_account.id,
            to_account_id=second_account.id,
            amount=Decimal(amount),
            date=txn_date,
        )

    return _transfer


def test_expenses_by_category_sorted_by_value(report_service, sample_user, add_expense):
    add_expense("50", txn_date=date(2024, 5, 1), category="Food")
    add_expense("30", txn_date=date(2024, 5, 2), category="Food")
    add_expense("120", txn_date=date(2024, 5, 3), category="Housing")
    add_expense("80", txn_date=date(2024, 5, 4), category="Leisure")

    totals = report_service.expenses_by_category(sample_user.id)
    assert [(t.name, t.value) for t in totals] == [
        ("Housing", Decimal("120")),
        ("Food", Decimal("80")),
        ("Leisure", Decimal("80")),
    ]


def test_expenses_by_category_date_range(report_service, sample_user, add_expense):
    add_expense("50", txn_date=date(2024, 4, 30))
    add_expense("30", txn_date=date(2024, 5, 1))
    totals = report_service.expenses_by_category(
        sample_user.id, start_date=date(2024, 5, 1), end_date=date(2024, 5, 31)
    )
    assert [(t.name, t.value) for t in totals] == [("Food", Decimal("30"))]


def test_expenses_by_category_excludes_transfers_by_default(
    report_service, sample_user, add_expense, transfer
):
    add_expense("30", txn_date=date(2024, 5, 1))
    transfer("500", date(2024, 5, 2))

    names = [t.name for t in report_service.expenses_by_category(sample_user.id)]
    assert names == ["Food"]

    with_transfers = report_service.expenses_by_category(sample_user.id, include_transfers=True)
    assert [(t.name, t.value) for t in with_transfers] == [
        ("Transfer", Decimal("500")),
        ("Food", Decimal("30")),
    ]


def test_expenses_by_category_account_filter(
    report_service, sample_user, second_account, add_expense
):
    add_expense("30", txn_date=date(2024, 5, 1))
    add_expense("70", txn_date=date(2024, 5, 1), account_id=second_account.id)
    totals = report_service.expenses_by_category(sample_user.id, account_id=second_account.id)
    assert [t.value for t in totals] == [Decimal("70")]


def test_monthly_overview(report_service, sample_user, add_expense, add_income, transfer):
    add_income("5000", date(2024, 3, 5))
    add_expense("1200", txn_date=date(2024, 3, 10))
    add_expense("300", txn_date=date(2024, 5, 2))
    add_expense("999", txn_date=date(2023, 12, 31))
    transfer("250", date(2024, 5, 3))

    overview = report_service.monthly_overview(sample_user.id, today=date(2024, 5, 15), months=3)
    assert [row.month for row in overview] == [date(2024, 3, 1), date(2024, 4, 1), date(2024, 5, 1)]
    assert overview[0].income == Decimal("5000")
    assert overview[0].expense == Decimal("1200")
    assert overview[0].net == Decimal("3800")
    assert overview[1].income == Decimal("0")
    assert overview[2].expense == Decimal("300")


def test_monthly_overview_rejects_zero_months(report_service, sample_user):
    with pytest.raises(ValueError):
        report_service.monthly_overview(sample_user.id, months=0)


def test_dashboard_summary(report_service, sample_user, add_expense, add_income, transfer):
    today = date(2024, 5, 15)
    add_income("5000", date(2024, 5, 5))
    add_expense("1200", txn_date=date(2024, 5, 10))
    add_expense("50", txn_date=date(2024, 4, 30))
    transfer("100", date(2024, 5, 11))

    summary = report_service.dashboard_summary(sample_user.id, today=today)
    assert summary.total_balance == Decimal("4750.00")
    assert summary.monthly_income == Decimal("5000")
    assert summary.monthly_expenses == Decimal("1200")
    assert summary.monthly_savings == Decimal("3800")


def test_report_categories_command(cli_runner, temp_db, add_expense):
    add_expense("75", txn_date=date(2024, 2, 10), category="Health")
    add_expense("25", txn_date=date(2024, 2, 11))
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "report",
            "categories",
            "--start-date",
            "2024-02-01",
            "--end-date",
            "2024-02-29",
        ],
    )
    assert result.exit_code == 0
    assert "Expenses by Category" in result.output
    lines = result.output.splitlines()
    health = next(i for i, line in enumerate(lines) if line.startswith("Health"))
    food = next(i for i, line in enumerate(lines) if line.startswith("Food"))
    assert health < food
    assert "75.0%" in lines[health]
    assert "R$ 100,00" in result.output


def test_report_categories_defaults_to_this_month(cli_runner, temp_db, add_expense):
    add_expense("75", txn_date=date(2020, 2, 10))
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "report", "categories"])
    assert result.exit_code == 0
    assert "No expenses found." in result.output


def test_report_overview_command(cli_runner, temp_db, add_expense):
    add_expense("40")
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "report", "overview", "--months", "2"]
    )
    assert result.exit_code == 0
    assert f"{date.today():%Y-%m}" in result.output
    assert "R$ 40,00" in result.output


def test_report_dashboard_command(cli_runner, temp_db, add_expense):
    add_expense("40", description="Pharmacy")
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "report", "dashboard"])
    assert result.exit_code == 0
    assert "Total balance:     R$ 960,00" in result.output
    assert "Monthly expenses:  R$ 40,00" in result.output
    assert "Pharmacy" in result.output
