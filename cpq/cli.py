# cpq/cli.py
"""Maintenance commands, available as ``flask cpq ...``."""

import json
import logging

import click
from flask.cli import with_appcontext

from cpq import db
from cpq.errors import ApiError
from cpq.pricing import price_quote
from cpq.quotes import store
from cpq.validation import Rejected, number

_non_negative = number(minimum=0)
_positive = number(minimum=0, exclusive=True)


@click.group('cpq')
def cpq_cli() -> None:
    """CPQ maintenance commands."""


@cpq_cli.command('init-db')
@with_appcontext
def init_db_command() -> None:
    """Create any missing tables."""
    from cpq import models  # noqa
    db.create_all()
    logging.info('Tables ready: %s', ', '.join(sorted(db.metadata.tables)))
    click.echo('Database initialised.')


@cpq_cli.command('show-quote')
@with_appcontext
@click.argument('quote_id')
def show_quote_command(quote_id: str) -> None:
    """Print a quote and its line items as JSON."""
    try:
        found = store.get_quote(quote_id)
    except ApiError as e:
        raise click.ClickException(e.message)
    click.echo(json.dumps(found, indent=2))


def _parse_item(value: str) -> dict:
    sell, _, qty = value.partition(':')
    try:
        return {'sell': _non_negative(sell), 'qty': _positive(qty or '1')}
    except Rejected:
        raise click.BadParameter(f'expected SELL[:QTY] with SELL >= 0 and QTY > 0, got {value!r}')


def _check_amount(ctx, param, value):
    try:
        return _non_negative(value)
    except Rejected as e:
        raise click.BadParameter(str(e))


@cpq_cli.command('price')
@click.option('--tax-rate', type=float, default=0.0, show_default=True, callback=_check_amount)
@click.option('--discount', type=float, default=0.0, show_default=True, callback=_check_amount)
@click.argument('items', nargs=-1, required=True)
def price_command(tax_rate: float, discount: float, items) -> None:
    """Price SELL[:QTY] pairs without touching the database."""
    pricing = price_quote([_parse_item(i) for i in items], tax_rate, discount)
    click.echo(f'subtotal {pricing.subtotal:.2f}')
    click.echo(f'taxed    {pricing.taxed:.2f}')
    click.echo(f'total    {pricing.total:.2f}')
