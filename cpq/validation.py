# cpq/validation.py
"""Request payload validation and normalisation.

Payloads are checked against declarative field specs (``Field``) so that
customers, quotes and line items share the same coercion rules.  Validation
never raises for bad input: callers get a ``Validation`` result carrying either
the normalised record or a message naming the offending field.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable

LINE_ITEM_TYPES = ('labor', 'equipment', 'material')
DEFAULT_CURRENCY = 'USD'
CURRENCY_LENGTH = 8
UOM_LENGTH = 32

_MISSING = object()
_INT_RE = re.compile(r'^[+-]?\d+$')

# Signed 64-bit, the widest integer column the database offers
MAX_ID = 2 ** 63 - 1


@dataclass(frozen=True)
class Validation:
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Rejected(ValueError):
    """Raised by a field parser; the message completes ``"<field> ..."``."""


@dataclass(frozen=True)
class Field:
    name: str
    parse: Callable[[Any], Any]
    default: Any = _MISSING


# -- field parsers ----------------------------------------------------------

def text(case: str | None = None, allow_blank: bool = False, max_length: int | None = None):
    def parse(value):
        if not isinstance(value, str):
            raise Rejected('must be a string')
        value = value.strip()
        if not value and not allow_blank:
            raise Rejected('must be a non-empty string')
        if max_length is not None and len(value) > max_length:
            raise Rejected(f'must be at most {max_length} characters')
        if case == 'upper':
            value = value.upper()
        elif case == 'lower':
            value = value.lower()
        return value
    return parse


def choice(options):
    as_text = text(case='lower')

    def parse(value):
        try:
            value = as_text(value)
        except Rejected:
            value = None
        if value not in options:
            raise Rejected(f"must be one of {', '.join(options)}")
        return value
    return parse


def number(minimum: float = 0, exclusive: bool = False):
    bound = f"{'>' if exclusive else '>='} {minimum:g}"

    def parse(value):
        if isinstance(value, bool):
            raise Rejected(f'must be a number {bound}')
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise Rejected(f'must be a number {bound}') from None
        elif isinstance(value, int):
            try:
                value = float(value)
            except OverflowError:
                raise Rejected(f'must be a number {bound}') from None
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise Rejected(f'must be a number {bound}')
        if value < minimum or (exclusive and value == minimum):
            raise Rejected(f'must be a number {bound}')
        return float(value)
    return parse


def integer():
    def parse(value):
        if isinstance(value, bool):
            raise Rejected('must be an integer')
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        elif isinstance(value, str) and _INT_RE.match(value.strip()):
            value = int(value.strip())
        if not isinstance(value, int) or not -MAX_ID - 1 <= value <= MAX_ID:
            raise Rejected('must be an integer')
        return value
    return parse


def currency_code(value):
    return text(case='upper', allow_blank=True, max_length=CURRENCY_LENGTH)(value) or DEFAULT_CURRENCY


def non_empty_list(value):
    if not isinstance(value, list) or not value:
        raise Rejected('must be a non-empty array')
    return value


# -- schemas ----------------------------------------------------------------

CUSTOMER_FIELDS = (
    Field('name', text()),
)

QUOTE_FIELDS = (
    Field('customer_id', integer()),
    Field('job_name', text()),
    Field('currency', currency_code, default=DEFAULT_CURRENCY),
    Field('tax_rate', number(minimum=0), default=0.0),
    Field('discount', number(minimum=0), default=0.0),
    Field('line_items', non_empty_list),
)

LINE_ITEM_FIELDS = (
    Field('type', choice(LINE_ITEM_TYPES)),
    Field('uom', text(case='upper', max_length=UOM_LENGTH)),
    Field('description', text(allow_blank=True), default=''),
    Field('qty', number(minimum=0, exclusive=True), default=1.0),
    Field('cost', number(minimum=0), default=0.0),
    Field('sell', number(minimum=0), default=0.0),
)


def validate(payload, fields, prefix: str = '') -> Validation:
    """Apply ``fields`` to ``payload``, stopping at the first failure.

    Keys that are absent or ``null`` take the field default; a field without
    a default is required.
    """
    if not isinstance(payload, dict):
        label = prefix.rstrip('.') or 'request body'
        return Validation(error=f'{label} must be a JSON object')

    out = {}
    for field in fields:
        label = f'{prefix}{field.name}'
        raw = payload.get(field.name)
        if raw is None:
            if field.default is _MISSING:
                return Validation(error=f'{label} is required')
            out[field.name] = field.default
            continue
        try:
            out[field.name] = field.parse(raw)
        except Rejected as exc:
            return Validation(error=f'{label} {exc}')
    return Validation(out)


def validate_customer(payload) -> Validation:
    return validate(payload, CUSTOMER_FIELDS)


def validate_line_items(items) -> Validation:
    """Validate each item in order; the first failure names its index."""
    normalized = []
    for index, item in enumerate(items):
        result = validate(item, LINE_ITEM_FIELDS, prefix=f'line_items[{index}].')
        if not result.ok:
            return result
        normalized.append(result.value)
    return Validation(normalized)


def validate_quote(payload) -> Validation:
    result = validate(payload, QUOTE_FIELDS)
    if not result.ok:
        return result
    items = validate_line_items(result.value['line_items'])
    if not items.ok:
        return items
    return Validation({**result.value, 'line_items': items.value})
