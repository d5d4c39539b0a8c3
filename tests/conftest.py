import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from cpq import create_app, db


@pytest.fixture
def app(tmp_path):
    app = create_app(
        'testing',
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'cpq.db'}",
    )
    with app.app_context():
        db.drop_all()
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customer(client):
    resp = client.post('/customers', json={'name': 'Acme Builders'})
    assert resp.status_code == 201
    return resp.get_json()['customer']


def quote_payload(customer_id, **overrides):
    payload = {
        'customer_id': customer_id,
        'job_name': 'Warehouse retrofit',
        'currency': 'usd',
        'tax_rate': 0.1,
        'discount': 5,
        'line_items': [
            {'type': 'Labor', 'uom': 'hr', 'description': 'Install', 'qty': 2, 'cost': 60, 'sell': 100},
            {'type': 'material', 'uom': 'ea', 'qty': 1, 'cost': 20, 'sell': 50},
        ],
    }
    payload.update(overrides)
    return payload
