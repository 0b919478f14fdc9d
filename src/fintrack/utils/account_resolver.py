"""Utility for resolving account names to IDs."""

from fintrack.domain.account import AccountService


def resolve_account(account_service: AccountService, user_id: int, account: str | int) -> int:
    """Resolve an account name or ID to the ID of one of the user's accounts.

    Names are matched exactly first, then case-insensitively.

    Args:
        account_service: AccountService instance
        user_id: Owner of the account
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        ValueError: If account is not found
    """
    account_id = None
    if isinstance(account, int):
        account_id = account
    elif account.strip().isdigit():
        account_id = int(account)

    if account_id is not None:
        account_obj = account_service.get_account(account_id)
        if account_obj is None or account_obj.user_id != user_id:
            raise ValueError(f"Account ID {account_id} not found")
        return account_id

    accounts = account_service.list_accounts(user_id)
    for acc in accounts:
        if acc.name == account:
            return acc.id
    wanted = account.strip().lower()
    for acc in accounts:
        if acc.name.lower() == wanted:
            return acc.id

    raise ValueError(f"Account '{account}' not found")
