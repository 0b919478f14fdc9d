"""Tests for savings goals and contributions."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.cli.main import cli
from fintrack.domain.errors import NotFoundError, ValidationError
from fintrack.domain.goal import GoalService, deadline_text


@pytest.fixture
def goal_service(temp_db):
    return GoalService(temp_db)


@pytest.mark.parametrize(
    "deadline,expected",
    [
        (None, "No deadline"),
        (date(2024, 5, 10), "Deadline passed on 10/05/2024"),
        (date(2024, 5, 15), "Deadline is today!"),
        (date(2024, 5, 25), "10 day(s) left (25/05/2024)"),
    ],
)
def test_deadline_text(deadline, expected):
    assert deadline_text(deadline, date(2024, 5, 15)) == expected


def test_goal_progress(goal_service, sample_user):
    goal_id = goal_service.add_goal(
        sample_user.id, "Trip", Decimal("3000"), Decimal("1000"), deadline=date(2024, 12, 31)
    )
    progress = goal_service.goal_progress(goal_id, today=date(2024, 12, 1))
    assert progress.percentage == Decimal("33.33")
    assert progress.remaining == Decimal("2000")
    assert progress.days_left == 30
    assert not progress.is_achieved


def test_goal_progress_when_exceeded(goal_service, sample_user):
    goal_id = goal_service.add_goal(sample_user.id, "Bike", Decimal("500"), Decimal("600"))
    progress = goal_service.goal_progress(goal_id)
    assert progress.remaining == Decimal("0")
    assert progress.percentage == Decimal("120.00")
    assert progress.is_achieved


def test_add_goal_validation(goal_service, sample_user):
    with pytest.raises(ValidationError):
        goal_service.add_goal(sample_user.id, "X", Decimal("100"))
    with pytest.raises(ValidationError):
        goal_service.add_goal(sample_user.id, "Car", Decimal("0"))
    with pytest.raises(ValidationError):
        goal_service.add_goal(sample_user.id, "Car", Decimal("100"), Decimal("-1"))


def test_update_goal_clears_deadline(goal_service, sample_user):
    goal_id = goal_service.add_goal(
        sample_user.id, "Trip", Decimal("3000"), deadline=date(2024, 12, 31)
    )
    goal_service.update_goal(goal_id, name="Big trip", deadline=None)
    goal = goal_service.get_goal(goal_id)
    assert goal.name == "Big trip"
    assert goal.deadline is None
    assert goal.target_amount == Decimal("3000")


def test_update_goal_unknown_field(goal_service, sample_user):
    goal_id = goal_service.add_goal(sample_user.id, "Trip", Decimal("3000"))
    with pytest.raises(ValidationError):
        goal_service.update_goal(goal_id, user_id=2)


def test_contribute_moves_money_into_goal(
    goal_service,
    transaction_service,
    account_service,
    sample_user,
    sample_account,
    categories,
):
    goal_id = goal_service.add_goal(sample_user.id, "Emergency", Decimal("1000"))
    txn_id = goal_service.contribute(goal_id, sample_account.id, Decimal("250"), date(2024, 5, 1))

    assert goal_service.get_goal(goal_id).current_amount == Decimal("250")
    assert account_service.get_account(sample_account.id).balance == Decimal("750.00")
    txn = transaction_service.get_transaction(txn_id)
    assert txn.type.value == "expense"
    assert txn.category_id == categories["Goal Contribution"].id
    assert txn.description == "Contribution to goal: Emergency"


def test_contribute_rejects_non_positive(goal_service, sample_user, sample_account):
    goal_id = goal_service.add_goal(sample_user.id, "Emergency", Decimal("1000"))
    with pytest.raises(ValidationError):
        goal_service.contribute(goal_id, sample_account.id, Decimal("0"))


def test_contribute_rounds_to_cents(goal_service, account_service, sample_user, sample_account):
    goal_id = goal_service.add_goal(sample_user.id, "Emergency", Decimal("1000.004"))
    assert goal_service.get_goal(goal_id).target_amount == Decimal("1000.00")

    goal_service.contribute(goal_id, sample_account.id, Decimal("0.005"), date(2024, 5, 1))
    assert goal_service.get_goal(goal_id).current_amount == Decimal("0.01")
    assert account_service.get_account(sample_account.id).balance == Decimal("999.99")

    with pytest.raises(ValidationError):
        goal_service.contribute(goal_id, sample_account.id, Decimal("0.001"))


def test_failed_contribution_rolls_back(
    temp_db,
    goal_service,
    transaction_service,
    account_service,
    sample_user,
    sample_account,
    categories,
    monkeypatch,
):
    goal_id = goal_service.add_goal(sample_user.id, "Emergency", Decimal("1000"))
    session = temp_db._get_session()
    real_flush = session.flush

    def failing_flush(*args, **kwargs):
        if session.new:
            raise RuntimeError("disk full")
        return real_flush(*args, **kwargs)

    monkeypatch.setattr(session, "flush", failing_flush)
    with pytest.raises(RuntimeError, match="disk full"):
        goal_service.contribute(goal_id, sample_account.id, Decimal("250"), date(2024, 5, 1))

    temp_db.disconnect()
    assert goal_service.get_goal(goal_id).current_amount == Decimal("0")
    assert account_service.get_account(sample_account.id).balance == Decimal("1000.00")
    assert transaction_service.list_transactions(sample_user.id) == []


def test_contribute_from_other_users_account(
    goal_service, user_service, account_service, sample_account
):
    other_id = user_service.create_user("other")
    goal_id = goal_service.add_goal(other_id, "Theirs", Decimal("1000"))
    with pytest.raises(ValidationError):
        goal_service.contribute(goal_id, sample_account.id, Decimal("10"))
    assert account_service.get_account(sample_account.id).balance == Decimal("1000.00")


def test_contribute_to_missing_goal(goal_service, sample_account):
    with pytest.raises(NotFoundError):
        goal_service.contribute(999, sample_account.id, Decimal("10"))


def test_watch_goals(goal_service, sample_user, sample_account):
    snapshots = []
    goal_service.watch_goals(sample_user.id, snapshots.append)
    goal_id = goal_service.add_goal(sample_user.id, "Emergency", Decimal("1000"))
    goal_service.contribute(goal_id, sample_account.id, Decimal("100"))
    assert snapshots[-1][0].current_amount == Decimal("100")


def test_goal_commands(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "goal", "add", "Emergency fund", "1000"]
    )
    assert result.exit_code == 0
    assert "Created goal 1: Emergency fund" in result.output

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "goal",
            "contribute",
            "1",
            "1000",
            "--account",
            "Test Account",
        ],
    )
    assert result.exit_code == 0
    assert "Contributed R$ 1.000,00 to 'Emergency fund'" in result.output
    assert "Account balance: R$ 0,00" in result.output
    assert "Goal achieved!" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "goal", "list"])
    assert result.exit_code == 0
    assert "100.00%" in result.output
    assert "(achieved)" in result.output
