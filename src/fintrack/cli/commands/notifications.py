"""Notification commands."""

import click
from fintrack.cli.context import current_user_id
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.notification import NotificationService


@click.group()
def notifications_group():
    """Budget, goal and bill notifications."""
    pass


def _echo_notification(notification) -> None:
    status = " " if notification.is_read else "*"
    click.echo(
        f"{status} {notification.id:4d} | {notification.timestamp:%Y-%m-%d %H:%M} | "
        f"{notification.type.value:15s} | {notification.message}"
    )


@notifications_group.command("check")
@click.pass_context
def check(ctx):
    """Look for exceeded budgets, achieved goals and bills due soon."""
    created = NotificationService(ctx.obj["db"]).check_for_notifications(current_user_id(ctx))
    if not created:
        click.echo("No new notifications.")
        return
    click.echo(f"{len(created)} new notification(s):")
    for notification in created:
        _echo_notification(notification)


@notifications_group.command("list")
@click.option("--unread", is_flag=True, help="Only unread notifications")
@click.pass_context
def list_notifications(ctx, unread: bool):
    """List notifications, newest first. Unread ones are marked with *."""
    service = NotificationService(ctx.obj["db"])
    user_id = current_user_id(ctx)
    notifications = service.list_notifications(user_id, unread_only=unread)
    if not notifications:
        click.echo("No notifications.")
        return
    for notification in notifications:
        _echo_notification(notification)
    click.echo(f"\n{service.unread_count(user_id)} unread")


@notifications_group.command("read-all")
@click.pass_context
def read_all(ctx):
    """Mark every notification as read."""
    changed = NotificationService(ctx.obj["db"]).mark_all_as_read(current_user_id(ctx))
    click.echo(f"Marked {changed} notification(s) as read")


@notifications_group.command("delete")
@click.argument("notification_id", type=int)
@click.pass_context
def delete(ctx, notification_id: int):
    """Delete a notification."""
    db = ctx.obj["db"]
    notification = db.get_notification(notification_id)
    if notification is None or notification.user_id != current_user_id(ctx):
        click.echo(f"Error: Notification {notification_id} not found", err=True)
        ctx.exit(1)
    try:
        NotificationService(db).delete_notification(notification_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted notification {notification_id}")


def register_commands(cli):
    """Register notification commands with main CLI."""
    cli.add_command(notifications_group, name="notifications")
