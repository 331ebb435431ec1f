"""CLI commands for editing a placed order."""

from __future__ import annotations

import asyncio

import click

from orderedit.application.edit_session import OrderEditSession
from orderedit.application.show_order import ShowOrderHandler
from orderedit.domain.exceptions import DomainException, EntityNotFoundError
from orderedit.domain.model.inventory import Disposition, RemovalDecision
from orderedit.infrastructure.bootstrap import (
    eta_scheduler,
    menu_item_repository,
    order_repository,
)
from orderedit.infrastructure.config import Settings


def _parse_position(raw: str, count: int) -> int:
    try:
        position = int(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid item number '{raw}'.")
    if not 1 <= position <= count:
        raise click.BadParameter(f"Item number {position} is out of range (1-{count}).")
    return position


def _parse_set(raw: str) -> tuple[str, str, str]:
    """Parse '2:quantity=3' into (position, field, value)."""
    position, sep, assignment = raw.partition(":")
    field, eq, value = assignment.partition("=")
    if not sep or not eq or not field:
        raise click.BadParameter(
            f"Invalid edit '{raw}'. Expected 'ItemNumber:field=value'."
        )
    return position.strip(), field.strip(), value


def _parse_add(raw: str) -> tuple[str, str, str]:
    """Parse 'Name:Qty:Price'."""
    parts = raw.rsplit(":", 2)
    if len(parts) != 3:
        raise click.BadParameter(f"Invalid item '{raw}'. Expected 'Name:Qty:Price'.")
    return parts[0].strip(), parts[1], parts[2]


def _parse_menu_item(raw: str) -> tuple[str, str]:
    """Parse 'MenuItemId:Qty' (quantity defaults to 1)."""
    menu_item_id, _, qty = raw.partition(":")
    return menu_item_id.strip(), qty or "1"


def _display_order(dto) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    if dto.contact_name:
        click.echo(f"Customer: {dto.contact_name}")
    click.echo(f"Pickup:   {dto.pickup_time}")
    if dto.requires_advance_notice:
        click.echo("Requires advance notice")
    click.echo()
    click.echo(f"  {'#':>3} {'Item':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        marker = "*" if item.tracked else " "
        click.echo(
            f"  {item.position:>3} {item.name:<23}{marker} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Order Total':<30} {dto.total:>25}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@click.pass_obj
def order_show(settings: Settings, order_id: str) -> None:
    """Show details of an existing order (* = stock tracked)."""
    handler = ShowOrderHandler(order_repository(settings), eta_scheduler(settings))

    try:
        dto = asyncio.run(handler.handle(order_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("eta")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--eta", "eta_value", default=None, help="Minutes, or hour.fraction for advance-notice orders.")
@click.pass_obj
def order_eta(settings: Settings, order_id: str, eta_value: str | None) -> None:
    """Preview the pickup time an ETA value would set."""
    scheduler = eta_scheduler(settings)

    try:
        order = asyncio.run(order_repository(settings).get_by_id(order_id))
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        value = eta_value if eta_value is not None else scheduler.default_eta_value(order)
        pickup = scheduler.compute_pickup_time(order, value)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    local = pickup.astimezone(scheduler.timezone)
    click.echo(f"ETA {value} -> {local.strftime('%Y-%m-%d %H:%M %Z')} ({scheduler.format_pickup_time(pickup)})")


async def _run_edit(settings: Settings, order_id: str, options: dict) -> None:
    menu_repo = menu_item_repository(settings)
    order_repo = order_repository(settings)

    order = await order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")

    session = OrderEditSession(
        order,
        menu_repo,
        order_repo,
        eta_scheduler(settings),
        on_save=lambda payload: click.echo(f"Order #{payload.id} saved (status={payload.status})."),
    )
    await session.open()

    # Item numbers refer to the order as loaded, before any edit below.
    edit_ids = [item.edit_id for item in session.items]
    names = {item.edit_id: item.name for item in session.items}

    for raw in options["sets"]:
        position, field, value = _parse_set(raw)
        session.change_item(edit_ids[_parse_position(position, len(edit_ids)) - 1], field, value)

    for raw in options["adds"]:
        name, qty, price = _parse_add(raw)
        item = session.add_blank_item()
        session.change_item(item.edit_id, "name", name)
        session.change_item(item.edit_id, "quantity", qty)
        session.change_item(item.edit_id, "price", price)

    for raw in options["menu_items"]:
        menu_item_id, qty = _parse_menu_item(raw)
        menu_item = await menu_repo.get_by_id(menu_item_id)
        session.add_catalog_item(menu_item, quantity=qty)

    for raw in options["removes"]:
        edit_id = edit_ids[_parse_position(raw, len(edit_ids)) - 1]
        if session.request_removal(edit_id) is RemovalDecision.PROMPT_DISPOSITION:
            choice = click.prompt(
                f"'{names[edit_id]}' is stock tracked. Return it to inventory or mark it as damaged?",
                type=click.Choice(["return", "damaged"]),
                default="return",
            )
            if choice == "damaged":
                reason = click.prompt("Reason")
                session.resolve_removal(Disposition.MARK_AS_DAMAGED, reason)
            else:
                session.resolve_removal(Disposition.RETURN_TO_INVENTORY)

    if options["status"]:
        session.set_status(options["status"])
    if options["instructions"] is not None:
        session.set_instructions(options["instructions"])
    if options["recalculate_total"]:
        session.set_total(str(session.subtotal().amount))
    elif options["total"] is not None:
        session.set_total(options["total"])

    outcome = await session.save()
    if outcome is None:
        eta_value = options["eta"]
        if eta_value is None:
            eta_value = click.prompt(
                "Estimated pickup (minutes, or hour.fraction for tomorrow)",
                default=session.default_eta_value(),
            )
        outcome = await session.confirm_eta(eta_value)

    for change in outcome.inventory_changes:
        click.echo(f"  {change.name}: {change.original_quantity} -> {change.new_quantity}")
    if outcome.flush_report.failed:
        click.echo(
            f"Warning: {len(outcome.flush_report.failed)} damaged-item report(s) failed.",
            err=True,
        )


@click.command("edit")
@click.option("--id", "order_id", required=True, help="Order ID to edit.")
@click.option("--set", "sets", multiple=True, help="Edit a line: 'ItemNumber:field=value'.")
@click.option("--add", "adds", multiple=True, help="Add a free-form line: 'Name:Qty:Price'.")
@click.option("--add-menu-item", "menu_items", multiple=True, help="Add from the catalog: 'MenuItemId:Qty'.")
@click.option("--remove", "removes", multiple=True, help="Remove a line by item number.")
@click.option("--status", default=None, help="New order status.")
@click.option("--eta", default=None, help="ETA to use if the new status needs one.")
@click.option("--total", default=None, help="New order total.")
@click.option("--recalculate-total", is_flag=True, default=False, help="Set the total to the item subtotal.")
@click.option("--instructions", default=None, help="Replace special instructions.")
@click.pass_obj
def order_edit(settings: Settings, order_id: str, **options) -> None:
    """Edit an order's items, status and pickup time, then save it."""
    try:
        asyncio.run(_run_edit(settings, order_id, options))
    except DomainException as exc:
        raise click.ClickException(str(exc))
