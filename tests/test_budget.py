"""Tests for budgets and their monthly spending."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.cli.main import cli
from fintrack.domain.budget import BudgetService, budget_percentage
from fintrack.domain.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def budget_service(temp_db):
    return BudgetService(temp_db)


@pytest.mark.parametrize(
    "spent,amount,expected",
    [
        ("0", "500", "0.00"),
        ("450", "500", "90.00"),
        ("1", "3", "33.33"),
        ("2", "3", "66.67"),
        ("750", "500", "150.00"),
        ("10", "0", "0"),
    ],
)
def test_budget_percentage(spent, amount, expected):
    assert budget_percentage(Decimal(spent), Decimal(amount)) == Decimal(expected)


def test_add_budget(budget_service, sample_user, categories):
    budget_id = budget_service.add_budget(sample_user.id, categories["Food"].id, Decimal("800"))
    budget = budget_service.get_budget(budget_id)
    assert budget.amount == Decimal("800")
    assert budget.category_id == categories["Food"].id


def test_add_budget_twice_for_category(budget_service, sample_user, categories):
    budget_service.add_budget(sample_user.id, categories["Food"].id, Decimal("800"))
    with pytest.raises(ConflictError):
        budget_service.add_budget(sample_user.id, categories["Food"].id, Decimal("100"))


def test_add_budget_for_income_category(budget_service, sample_user, categories):
    with pytest.raises(ValidationError):
        budget_service.add_budget(sample_user.id, categories["Salary"].id, Decimal("100"))


def test_add_budget_non_positive(budget_service, sample_user, categories):
    with pytest.raises(ValidationError):
        budget_service.add_budget(sample_user.id, categories["Food"].id, Decimal("0"))


def test_budget_amount_rounded_to_cents(budget_service, sample_user, categories):
    budget_id = budget_service.add_budget(sample_user.id, categories["Food"].id, Decimal("99.995"))
    assert budget_service.get_budget(budget_id).amount == Decimal("100.00")
    with pytest.raises(ValidationError):
        budget_service.update_budget(budget_id, amount=Decimal("0.001"))


def test_update_and_delete_budget(budget_service, sample_user, categories):
    budget_id = budget_service.add_budget(sample_user.id, categories["Food"].id, Decimal("800"))
    budget_service.update_budget(budget_id, amount=Decimal("900"))
    assert budget_service.get_budget(budget_id).amount == Decimal("900")

    budget_service.delete_budget(budget_id)
    assert budget_service.get_budget(budget_id) is None
    with pytest.raises(NotFoundError):
        budget_service.delete_budget(budget_id)


def test_budgets_with_spent_counts_this_month_only(
    budget_service, sample_user, categories, add_expense
):
    today = date(2024, 5, 20)
    budget_service.add_budget(sample_user.id, categories["Food"].id, Decimal("500"))
    add_expense("200", txn_date=date(2024, 5, 2))
    add_expense("100", txn_date=date(2024, 5, 19))
    add_expense("999", txn_date=date(2024, 4, 30))
    add_expense("50", txn_date=date(2024, 5, 3), category="Transportation")

    [status] = budget_service.budgets_with_spent(sample_user.id, today)
    assert status.spent == Decimal("300")
    assert status.percentage == Decimal("60.00")
    assert status.remaining == Decimal("200")


def test_watch_budgets_with_spent(budget_service, sample_user, categories, add_expense):
    snapshots = []
    unsubscribe = budget_service.watch_budgets_with_spent(
        sample_user.id, snapshots.append, today=date.today()
    )
    assert snapshots == [[]]

    budget_service.add_budget(sample_user.id, categories["Food"].id, Decimal("100"))
    assert len(snapshots[-1]) == 1
    assert snapshots[-1][0].spent == Decimal("0")

    add_expense("25")
    assert snapshots[-1][0].spent == Decimal("25")

    count = len(snapshots)
    unsubscribe()
    add_expense("25")
    assert len(snapshots) == count


def test_budget_commands(cli_runner, temp_db, sample_account, add_expense):
    add_expense("90")
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "budget", "add", "Food", "100"]
    )
    assert result.exit_code == 0
    assert "Created budget" in result.output
    assert "R$ 100,00/month" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "budget", "list"])
    assert result.exit_code == 0
    assert "Food" in result.output
    assert "90.00%" in result.output


def test_budget_add_command_income_category(cli_runner, temp_db, sample_user):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "budget", "add", "Salary", "100"]
    )
    assert result.exit_code == 1
    assert "Error:" in result.output
