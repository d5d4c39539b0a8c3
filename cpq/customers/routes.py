# cpq/customers/routes.py

from flask import Blueprint, request, jsonify

from cpq.errors import InvalidInput
from cpq.quotes import store
from cpq.validation import validate_customer

bp = Blueprint('customers', __name__)


@bp.route('', methods=['POST'])
def create_customer():
    result = validate_customer(request.get_json(silent=True))
    if not result.ok:
        raise InvalidInput(result.error)
    customer = store.create_customer(result.value['name'])
    return jsonify(ok=True, customer=customer), 201


@bp.route('/<customer_id>/quotes')
def customer_quotes(customer_id):
    """
    Quotes for one customer, newest first.
    Returns { ok, customer_id, quotes: [ … ] }; unknown customers get [].
    """
    cid = store.parse_id(customer_id, 'customer_id')
    quotes = store.list_customer_quotes(cid)
    return jsonify(ok=True, customer_id=cid, quotes=quotes)
