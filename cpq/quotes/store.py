# cpq/quotes/store.py
"""Persistence for customers, quotes and their line items.

Every function takes an optional SQLAlchemy ``session``; views pass nothing
and get the application's scoped ``db.session``, tests may hand in their own.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from cpq import db
from cpq.errors import ApiError, Internal, InvalidInput, NotFound
from cpq.models import Customer, Quote, QuoteLineItem
from cpq.validation import Rejected, integer

logger = logging.getLogger(__name__)

_parse_id = integer()


@contextmanager
def unit_of_work(session=None):
    """Yield a session whose statements commit or roll back together.

    The transaction begins with the first statement.  ``ApiError`` raised
    inside the block is re-raised after rollback; anything else is logged and
    surfaced as ``Internal``.  The session is closed on every path, returning
    its connection to the pool.
    """
    if session is None:
        session = db.session
    try:
        yield session
        session.commit()
    except ApiError:
        session.rollback()
        raise
    except Exception as exc:
        session.rollback()
        logger.exception('Transaction rolled back')
        raise Internal(str(exc)) from exc
    finally:
        session.close()


@contextmanager
def storage_errors():
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception('Storage query failed')
        raise Internal(str(exc)) from exc


def parse_id(value, label: str = 'id') -> int:
    try:
        return _parse_id(value)
    except Rejected as exc:
        raise InvalidInput(f'{label} {exc}') from None


def create_customer(name: str, session=None) -> dict:
    with unit_of_work(session) as s:
        customer = Customer(name=name)
        s.add(customer)
        s.flush()
        created = customer.to_dict()
    logger.info('Created customer %s', created['id'])
    return created


def _insert_line_item(session, quote: Quote, item: dict) -> QuoteLineItem:
    line = QuoteLineItem(
        quote_id    = quote.id,
        type        = item['type'],
        uom         = item['uom'],
        description = item['description'],
        qty         = item['qty'],
        cost        = item['cost'],
        sell        = item['sell'],
    )
    session.add(line)
    session.flush()  # obtain line.id in submission order
    return line


def create_quote(request: dict, total: float, session=None) -> dict:
    """Persist a validated quote request and its line items atomically.

    ``request`` is the output of ``validate_quote``; ``total`` comes from the
    pricing calculator.  Returns ``{'quote': ..., 'line_items': [...]}``.
    Raises ``NotFound`` if the customer does not exist and ``Internal`` on
    storage failure; in both cases nothing is persisted.
    """
    with unit_of_work(session) as s:
        if s.get(Customer, request['customer_id']) is None:
            raise NotFound('customer_id not found')

        quote = Quote(
            customer_id = request['customer_id'],
            job_name    = request['job_name'],
            currency    = request['currency'],
            tax_rate    = request['tax_rate'],
            discount    = request['discount'],
            total       = total,
        )
        s.add(quote)
        s.flush()  # obtain quote.id

        lines = [_insert_line_item(s, quote, item) for item in request['line_items']]
        created = {
            'quote': quote.to_dict(),
            'line_items': [line.to_dict() for line in lines],
        }
    logger.info(
        'Created quote %s for customer %s with %d line items, total %.2f',
        created['quote']['id'], request['customer_id'], len(lines), total,
    )
    return created


def get_quote(quote_id, session=None) -> dict:
    """Return ``{'quote': ..., 'line_items': [...]}`` with items in id order."""
    qid = parse_id(quote_id)
    if session is None:
        session = db.session
    with storage_errors():
        quote = session.get(Quote, qid)
        if quote is None:
            raise NotFound('quote not found')
        items = (
            session.query(QuoteLineItem)
            .filter_by(quote_id=qid)
            .order_by(QuoteLineItem.id.asc())
            .all()
        )
        return {
            'quote': quote.to_dict(),
            'line_items': [i.to_dict() for i in items],
        }


def list_customer_quotes(customer_id, session=None) -> list[dict]:
    """Most recent first.  Unknown customers simply have no quotes."""
    cid = parse_id(customer_id)
    if session is None:
        session = db.session
    with storage_errors():
        quotes = (
            session.query(Quote)
            .filter_by(customer_id=cid)
            .order_by(Quote.created_at.desc(), Quote.id.desc())
            .all()
        )
        return [q.to_dict() for q in quotes]
