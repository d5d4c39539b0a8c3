# cpq/pricing.py
"""Quote pricing.

Totals are driven by the customer-facing ``sell`` price only; ``cost`` is
stored for margin reporting and never contributes.  Discounts larger than the
taxed subtotal produce a negative total, which is returned unchanged.
"""

import math
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Pricing:
    subtotal: float
    taxed: float
    total: float


def round2(value: float) -> float:
    """Round half-up on the cents boundary."""
    return math.floor(value * 100 + 0.5) / 100


def subtotal(items: Iterable[dict]) -> float:
    return sum(item['sell'] * item['qty'] for item in items)


def price_quote(items: Iterable[dict], tax_rate: float = 0.0, discount: float = 0.0) -> Pricing:
    sub = subtotal(items)
    taxed = sub * (1 + tax_rate)
    return Pricing(subtotal=sub, taxed=taxed, total=round2(taxed - discount))


def quote_total(items: Iterable[dict], tax_rate: float = 0.0, discount: float = 0.0) -> float:
    return price_quote(items, tax_rate, discount).total
