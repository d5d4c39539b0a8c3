# cpq/quotes/routes.py

from flask import Blueprint, request, jsonify

from cpq.errors import InvalidInput
from cpq.pricing import quote_total
from cpq.quotes import store
from cpq.validation import validate_quote

bp = Blueprint('quotes', __name__)


@bp.route('', methods=['POST'])
def create_quote():
    """
    Create a quote with its line items.
    Returns 201 { ok, quote: {..., total}, line_items: [ … ] }.
    """
    result = validate_quote(request.get_json(silent=True))
    if not result.ok:
        raise InvalidInput(result.error)
    data  = result.value
    total = quote_total(data['line_items'], data['tax_rate'], data['discount'])
    created = store.create_quote(data, total)
    return jsonify(ok=True, **created), 201


@bp.route('/<quote_id>')
def view_quote(quote_id):
    found = store.get_quote(quote_id)
    return jsonify(ok=True, **found)
