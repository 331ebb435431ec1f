import click

from orderedit.domain.exceptions import DomainException
from orderedit.infrastructure.cli.order_commands import order_edit, order_eta, order_show
from orderedit.infrastructure.config import load_settings
from orderedit.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override ORDEREDIT_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """orderedit — admin order editing"""
    try:
        settings = load_settings()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    configure_logging(log_level or settings.log_level)
    ctx.obj = settings


@cli.group()
def order() -> None:
    """Edit placed orders."""


# Register subcommands
order.add_command(order_edit)
order.add_command(order_eta)
order.add_command(order_show)
