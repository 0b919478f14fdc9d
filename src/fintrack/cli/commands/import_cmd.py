"""CSV import command."""

import click
from fintrack.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.csv_import import CSVImportService, suggest_mapping
from fintrack.utils.money import format_money


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--account", required=True, help="Account name or ID to import into")
@click.option("--date-column", help="Header of the date column (guessed if omitted)")
@click.option("--description-column", help="Header of the description column (guessed if omitted)")
@click.option("--amount-column", help="Header of the amount column (guessed if omitted)")
@click.option(
    "--category",
    help="Category for rows of its kind (default: Other Expenses / Other Income)",
)
@click.option(
    "--suggest-categories",
    is_flag=True,
    help="Pick each row's category from similar past transactions",
)
@click.option("--dry-run", is_flag=True, help="Show what would be imported without saving")
@click.pass_context
def import_csv(
    ctx,
    csv_file: str,
    account: str,
    date_column: str | None,
    description_column: str | None,
    amount_column: str | None,
    category: str | None,
    suggest_categories: bool,
    dry_run: bool,
):
    """Import transactions from a bank CSV export.

    Negative amounts are imported as expenses and positive ones as income.

    Examples:
        fintrack import extrato.csv --account Nubank
        fintrack import bank.csv --account Checking --amount-column "Valor (R$)" --dry-run
    """
    db = ctx.obj["db"]
    service = CSVImportService(db)
    user_id = current_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    category_id = None
    if category:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), category).id

    try:
        headers, rows = service.read_csv(csv_file)
        mapping = suggest_mapping(headers)
        overrides = {
            "date": date_column,
            "description": description_column,
            "amount": amount_column,
        }
        mapping.update({name: column for name, column in overrides.items() if column})
        import_rows = service.build_rows(headers, rows, mapping, account_id)
        if suggest_categories:
            service.suggest_categories(user_id, import_rows)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(
        "Columns: "
        + ", ".join(f"{name}={column!r}" for name, column in mapping.items())
    )

    if dry_run:
        currency = current_currency(ctx)
        names = {cat.id: cat.name for cat in CategoryService(db).list_categories()}
        click.echo(f"\nDry run, {len(import_rows)} row(s):")
        for row in import_rows:
            if row.include:
                line = (
                    f"  Row {row.row_number:4d} | {row.date.isoformat()} | "
                    f"{row.type.value:7s} | {format_money(row.amount, currency):>14} | "
                    f"{row.description[:40]}"
                )
                if row.category_id is not None:
                    line += f" | {names.get(row.category_id, '')}"
                click.echo(line)
            else:
                click.echo(f"  Row {row.row_number:4d} | skipped: {row.error}")
        return

    result = service.import_rows(user_id, import_rows, category_id=category_id)
    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported} transactions")
    click.echo(f"  Skipped: {result.skipped} rows")
    if result.errors:
        click.echo(f"  Errors: {len(result.errors)}")
        for error in result.errors:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
