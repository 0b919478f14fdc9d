"""Tests for recurring bills, installment plans and recurring incomes."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from fintrack.cli.main import cli
from fintrack.domain.entities import InstallmentState, RecurringTransaction
from fintrack.domain.errors import NotFoundError, ValidationError
from fintrack.domain.recurring import RecurringService, installment_status
from fintrack.domain.recurring_income import RecurringIncomeService


@pytest.fixture
def recurring_service(temp_db):
    return RecurringService(temp_db)


@pytest.fixture
def income_service(temp_db):
    return RecurringIncomeService(temp_db)


@pytest.fixture
def add_bill(recurring_service, sample_user, sample_account, categories):
    def _add(description="Rent", amount="1500", day=5, start=date(2024, 1, 1), installments=None):
        return recurring_service.add_recurring(
            user_id=sample_user.id,
            description=description,
            amount=Decimal(amount),
            day_of_month=day,
            account_id=sample_account.id,
            category_id=categories["Fixed Bills"].id,
            start_date=start,
            installments=installments,
        )

    return _add


def _bill(start, installments):
    return RecurringTransaction(
        id=1,
        user_id=1,
        description="Phone",
        amount=Decimal("100"),
        day_of_month=10,
        start_date=start,
        installments=installments,
        account_id=1,
        category_id=1,
        created_at=datetime(2024, 1, 1),
    )


def test_installment_status_fixed():
    assert installment_status(_bill(date(2024, 1, 15), None), date(2024, 6, 1)).state == (
        InstallmentState.FIXED
    )


@pytest.mark.parametrize(
    "today,state,current",
    [
        (date(2023, 12, 1), InstallmentState.ACTIVE, 1),
        (date(2024, 1, 15), InstallmentState.ACTIVE, 1),
        (date(2024, 2, 1), InstallmentState.ACTIVE, 2),
        (date(2024, 2, 15), InstallmentState.ACTIVE, 2),
        (date(2024, 3, 20), InstallmentState.ACTIVE, 3),
        (date(2024, 4, 15), InstallmentState.FINISHED, 3),
    ],
)
def test_installment_status_plan(today, state, current):
    status = installment_status(_bill(date(2024, 1, 15), 3), today)
    assert status.state == state
    assert status.current == current
    assert status.total == 3


def test_installment_status_counts_calendar_months():
    bill = _bill(date(2024, 1, 31), 1)
    assert installment_status(bill, date(2024, 1, 31)).label == "1 of 1"
    assert installment_status(bill, date(2024, 2, 1)).state == InstallmentState.FINISHED


def test_single_installment_cannot_be_paid_twice(recurring_service, add_bill):
    bill_id = add_bill(description="Course", start=date(2024, 1, 31), installments=1)
    recurring_service.register_payment(bill_id, date(2024, 1, 31))
    with pytest.raises(ValidationError, match="finished"):
        recurring_service.register_payment(bill_id, date(2024, 2, 29))


def test_recurring_amount_rounded_to_cents(recurring_service, add_bill):
    bill_id = add_bill(amount="33.333")
    assert recurring_service.get_recurring(bill_id).amount == Decimal("33.33")
    with pytest.raises(ValidationError):
        add_bill(amount="0.004")


def test_recurring_bill_needs_expense_category(
    recurring_service, sample_user, sample_account, categories, add_bill
):
    with pytest.raises(ValidationError):
        recurring_service.add_recurring(
            user_id=sample_user.id,
            description="Paycheck",
            amount=Decimal("100"),
            day_of_month=5,
            account_id=sample_account.id,
            category_id=categories["Salary"].id,
        )
    bill_id = add_bill()
    with pytest.raises(ValidationError):
        recurring_service.update_recurring(bill_id, category_id=categories["Transfer"].id)


def test_add_recurring_validation(add_bill):
    with pytest.raises(ValidationError):
        add_bill(day=0)
    with pytest.raises(ValidationError):
        add_bill(day=32)
    with pytest.raises(ValidationError):
        add_bill(amount="0")
    with pytest.raises(ValidationError):
        add_bill(description="R")
    with pytest.raises(ValidationError):
        add_bill(installments=0)


def test_update_recurring_to_fixed(recurring_service, add_bill):
    bill_id = add_bill(installments=12)
    recurring_service.update_recurring(bill_id, installments=None, amount=Decimal("90"))
    bill = recurring_service.get_recurring(bill_id)
    assert bill.installments is None
    assert bill.amount == Decimal("90")


def test_update_recurring_keeps_unset_fields(recurring_service, add_bill):
    bill_id = add_bill(installments=12)
    recurring_service.update_recurring(bill_id, description="Rent (new)", amount=None)
    bill = recurring_service.get_recurring(bill_id)
    assert bill.description == "Rent (new)"
    assert bill.amount == Decimal("1500")
    assert bill.installments == 12


def test_update_recurring_unknown_field(recurring_service, add_bill):
    bill_id = add_bill()
    with pytest.raises(ValidationError):
        recurring_service.update_recurring(bill_id, user_id=7)


def test_delete_recurring(recurring_service, add_bill):
    bill_id = add_bill()
    recurring_service.delete_recurring(bill_id)
    assert recurring_service.get_recurring(bill_id) is None
    with pytest.raises(NotFoundError):
        recurring_service.delete_recurring(bill_id)


def test_register_payment_fixed_bill(
    recurring_service, transaction_service, account_service, sample_account, add_bill
):
    bill_id = add_bill()
    txn_id = recurring_service.register_payment(bill_id, date(2024, 3, 5))
    txn = transaction_service.get_transaction(txn_id)
    assert txn.description == "Rent"
    assert txn.amount == Decimal("1500")
    assert txn.type.value == "expense"
    assert account_service.get_account(sample_account.id).balance == Decimal("-500.00")


def test_register_payment_installment_labels_description(
    recurring_service, transaction_service, add_bill
):
    bill_id = add_bill(description="Laptop", amount="300", start=date(2024, 1, 10), installments=10)
    txn_id = recurring_service.register_payment(bill_id, date(2024, 3, 10))
    assert transaction_service.get_transaction(txn_id).description == "Laptop (3 of 10)"


def test_register_payment_finished_plan(recurring_service, add_bill):
    bill_id = add_bill(start=date(2024, 1, 10), installments=2)
    with pytest.raises(ValidationError, match="finished"):
        recurring_service.register_payment(bill_id, date(2024, 6, 10))


def test_upcoming_bills(recurring_service, sample_user, add_bill):
    add_bill(description="Rent", day=12)
    add_bill(description="Internet", day=11)
    add_bill(description="Gym", day=25)
    add_bill(description="Old plan", day=11, start=date(2023, 1, 1), installments=3)

    upcoming = recurring_service.upcoming(sample_user.id, today=date(2024, 5, 10), days=3)
    assert [(item.description, due) for item, due in upcoming] == [
        ("Internet", date(2024, 5, 11)),
        ("Rent", date(2024, 5, 12)),
    ]


def test_income_crud_and_monthly_total(income_service, sample_user, sample_account):
    salary_id = income_service.add_recurring_income(
        user_id=sample_user.id,
        description="Salary",
        amount=Decimal("5000"),
        day_of_month=5,
        account_id=sample_account.id,
    )
    income_service.add_recurring_income(
        user_id=sample_user.id,
        description="Rent received",
        amount=Decimal("800"),
        day_of_month=10,
        account_id=sample_account.id,
    )
    assert income_service.monthly_total(sample_user.id) == Decimal("5800")

    income_service.update_recurring_income(salary_id, amount=Decimal("5500"))
    assert income_service.monthly_total(sample_user.id) == Decimal("6300")

    income_service.delete_recurring_income(salary_id)
    assert [i.description for i in income_service.list_recurring_incomes(sample_user.id)] == [
        "Rent received"
    ]


def test_income_unknown_field(income_service, sample_user, sample_account):
    income_id = income_service.add_recurring_income(
        user_id=sample_user.id,
        description="Salary",
        amount=Decimal("5000"),
        day_of_month=5,
        account_id=sample_account.id,
    )
    with pytest.raises(ValidationError):
        income_service.update_recurring_income(income_id, installments=3)


def test_register_receipt(
    income_service, transaction_service, account_service, sample_user, sample_account, categories
):
    income_id = income_service.add_recurring_income(
        user_id=sample_user.id,
        description="Salary",
        amount=Decimal("5000"),
        day_of_month=5,
        account_id=sample_account.id,
    )
    txn_id = income_service.register_receipt(income_id, date(2024, 5, 5))
    txn = transaction_service.get_transaction(txn_id)
    assert txn.type.value == "income"
    assert txn.category_id == categories["Salary"].id
    assert account_service.get_account(sample_account.id).balance == Decimal("6000.00")


def test_recurring_commands(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "recurring",
            "add",
            "--description",
            "New phone",
            "--amount",
            "250",
            "--day",
            "10",
            "--account",
            "Test Account",
            "--installments",
            "12",
        ],
    )
    assert result.exit_code == 0
    assert "Created recurring bill" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "recurring", "list"])
    assert result.exit_code == 0
    assert "New phone" in result.output
    assert "1 of 12" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "recurring", "pay", "1"]
    )
    assert result.exit_code == 0
    assert "Registered payment as transaction" in result.output


def test_recurring_update_fixed_with_installments_conflict(cli_runner, temp_db, add_bill):
    bill_id = add_bill(installments=3)
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "recurring",
            "update",
            str(bill_id),
            "--fixed",
            "--installments",
            "4",
        ],
    )
    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_recurring_pay_other_users_bill(cli_runner, temp_db, add_bill):
    bill_id = add_bill()
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--user", "mallory", "recurring", "pay", str(bill_id)],
    )
    assert result.exit_code == 1
    assert "not found" in result.output


def test_income_commands(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "income",
            "add",
            "--description",
            "Salary",
            "--amount",
            "5.000,00",
            "--day",
            "5",
            "--account",
            "Test Account",
        ],
    )
    assert result.exit_code == 0
    assert "Created recurring income" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "income", "list"])
    assert result.exit_code == 0
    assert "Monthly total: R$ 5.000,00" in result.output
