"""Tests for accounts: service rules and account commands."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.cli.main import cli
from fintrack.domain.account import AccountService
from fintrack.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from fintrack.utils.account_resolver import resolve_account


def test_create_account_with_opening_balance(account_service, sample_user):
    account_id = account_service.create_account(
        user_id=sample_user.id, name="Nubank", bank_name="Nu", balance=Decimal("250.75")
    )
    account = account_service.get_account(account_id)
    assert account.name == "Nubank"
    assert account.bank_name == "Nu"
    assert account.balance == Decimal("250.75")
    assert account.user_id == sample_user.id


def test_opening_balance_rounded_to_cents(account_service, sample_user):
    account_id = account_service.create_account(
        user_id=sample_user.id, name="Wallet", bank_name="Cash", balance=Decimal("12.345")
    )
    assert account_service.get_account(account_id).balance == Decimal("12.35")


def test_create_account_duplicate_name(account_service, sample_account):
    with pytest.raises(ConflictError):
        account_service.create_account(
            user_id=sample_account.user_id, name="Test Account", bank_name="Other"
        )


def test_same_account_name_for_different_users(account_service, user_service, sample_account):
    other_id = user_service.create_user("other")
    account_id = account_service.create_account(
        user_id=other_id, name="Test Account", bank_name="Test Bank"
    )
    assert account_service.get_account(account_id).user_id == other_id


def test_create_account_empty_name(account_service, sample_user):
    with pytest.raises(ValidationError):
        account_service.create_account(user_id=sample_user.id, name="  ", bank_name="Bank")


def test_create_account_unknown_user(account_service):
    with pytest.raises(NotFoundError):
        account_service.create_account(user_id=999, name="Ghost", bank_name="Bank")


def test_total_balance(account_service, sample_account, second_account):
    account_service.create_account(
        user_id=sample_account.user_id, name="Card", bank_name="Bank", balance=Decimal("-200")
    )
    assert account_service.total_balance(sample_account.user_id) == Decimal("800.00")


def test_update_account(account_service, sample_account):
    account_service.update_account(sample_account.id, name="Main", bank_name="New Bank")
    account = account_service.get_account(sample_account.id)
    assert account.name == "Main"
    assert account.bank_name == "New Bank"


def test_delete_unused_account(account_service, second_account):
    account_service.delete_account(second_account.id)
    assert account_service.get_account(second_account.id) is None


def test_delete_account_with_transactions_is_blocked(account_service, sample_account, add_expense):
    add_expense("10.00")
    with pytest.raises(DependencyError, match="1 transaction"):
        account_service.delete_account(sample_account.id)


def test_delete_missing_account(account_service):
    with pytest.raises(NotFoundError):
        account_service.delete_account(999)


def test_watch_accounts_receives_snapshots(account_service, sample_account):
    snapshots = []
    unsubscribe = account_service.watch_accounts(sample_account.user_id, snapshots.append)
    assert [acc.name for acc in snapshots[-1]] == ["Test Account"]

    account_service.create_account(
        user_id=sample_account.user_id, name="Savings", bank_name="Bank"
    )
    assert len(snapshots) == 2
    assert {acc.name for acc in snapshots[-1]} == {"Test Account", "Savings"}

    unsubscribe()
    account_service.update_account(sample_account.id, name="Renamed")
    assert len(snapshots) == 2


def test_resolve_account_by_id_name_and_case(account_service, sample_account):
    user_id = sample_account.user_id
    assert resolve_account(account_service, user_id, sample_account.id) == sample_account.id
    assert resolve_account(account_service, user_id, str(sample_account.id)) == sample_account.id
    assert resolve_account(account_service, user_id, "Test Account") == sample_account.id
    assert resolve_account(account_service, user_id, "test account") == sample_account.id


def test_resolve_account_of_other_user(account_service, user_service, sample_account):
    other_id = user_service.create_user("other")
    with pytest.raises(ValueError, match="not found"):
        resolve_account(account_service, other_id, sample_account.id)


def test_account_create_command(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "create", "Checking", "--balance", "1.500,00"],
    )
    assert result.exit_code == 0
    assert "Created account 'Checking'" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])
    assert result.exit_code == 0
    assert "Checking" in result.output
    assert "R$ 1.500,00" in result.output


def test_account_create_command_duplicate(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Test Account"]
    )
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_account_list_is_per_user(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", "someone-else", "account", "list"]
    )
    assert result.exit_code == 0
    assert "No accounts found." in result.output


def test_account_rename_command(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "rename", "Test Account", "Main"],
    )
    assert result.exit_code == 0
    assert "Renamed account to 'Main'" in result.output

    temp_db.disconnect()
    assert AccountService(temp_db).get_account(sample_account.id).name == "Main"


def test_account_delete_command_blocked(cli_runner, temp_db, sample_account, add_expense):
    add_expense("10.00", txn_date=date(2024, 1, 15))
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "delete", "Test Account", "--yes"],
    )
    assert result.exit_code == 1
    assert "Cannot delete account" in result.output
