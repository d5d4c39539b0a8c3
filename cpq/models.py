from datetime import datetime, timezone

from cpq import db
from cpq.validation import CURRENCY_LENGTH, UOM_LENGTH


def utcnow():
    return datetime.now(timezone.utc)


def isoformat(value):
    """Render a stored timestamp as ISO-8601 UTC.

    SQLite hands back naive datetimes even for timezone-aware columns, so
    naive values are assumed to already be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat().replace('+00:00', 'Z')


class Customer(db.Model):
    __tablename__ = 'customers'
    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    quotes = db.relationship('Quote', back_populates='customer', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'created_at': isoformat(self.created_at),
        }


class Quote(db.Model):
    __tablename__ = 'quotes'
    id          = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False, index=True)
    job_name    = db.Column(db.Text, nullable=False)
    currency    = db.Column(db.String(CURRENCY_LENGTH), nullable=False, default='USD')
    tax_rate    = db.Column(db.Float, nullable=False, default=0.0)
    discount    = db.Column(db.Float, nullable=False, default=0.0)
    total       = db.Column(db.Float, nullable=False)
    created_at  = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    customer = db.relationship('Customer', back_populates='quotes')
    line_items = db.relationship(
        'QuoteLineItem',
        back_populates='quote',
        order_by='QuoteLineItem.id',
        cascade='all, delete-orphan'
    )

    def to_dict(self):
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'job_name': self.job_name,
            'currency': self.currency,
            'tax_rate': self.tax_rate,
            'discount': self.discount,
            'total': self.total,
            'created_at': isoformat(self.created_at),
        }


class QuoteLineItem(db.Model):
    __tablename__ = 'quote_line_items'
    id          = db.Column(db.Integer, primary_key=True)
    quote_id    = db.Column(
        db.Integer,
        db.ForeignKey('quotes.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    # 'labor', 'equipment' or 'material'
    type        = db.Column(db.String(16), nullable=False)
    uom         = db.Column(db.String(UOM_LENGTH), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    qty         = db.Column(db.Float, nullable=False)
    cost        = db.Column(db.Float, nullable=False, default=0.0)
    sell        = db.Column(db.Float, nullable=False, default=0.0)

    quote = db.relationship('Quote', back_populates='line_items')

    def to_dict(self):
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'type': self.type,
            'uom': self.uom,
            'description': self.description,
            'qty': self.qty,
            'cost': self.cost,
            'sell': self.sell,
        }
