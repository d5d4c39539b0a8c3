import pytest

from cpq.errors import Internal, InvalidInput, NotFound
from cpq.quotes import store


class RecordingSession:
    """Stands in for a SQLAlchemy session and records transaction calls."""

    def __init__(self):
        self.calls = []

    def commit(self):
        self.calls.append('commit')

    def rollback(self):
        self.calls.append('rollback')

    def close(self):
        self.calls.append('close')


def test_unit_of_work_commits_and_releases():
    session = RecordingSession()
    with store.unit_of_work(session) as s:
        assert s is session
    assert session.calls == ['commit', 'close']


def test_unit_of_work_keeps_api_errors():
    session = RecordingSession()
    with pytest.raises(NotFound):
        with store.unit_of_work(session):
            raise NotFound('customer_id not found')
    assert session.calls == ['rollback', 'close']


def test_unit_of_work_wraps_unexpected_errors():
    session = RecordingSession()
    with pytest.raises(Internal) as exc:
        with store.unit_of_work(session):
            raise RuntimeError('connection reset')
    assert exc.value.message == 'connection reset'
    assert exc.value.status_code == 500
    assert session.calls == ['rollback', 'close']


def test_failed_commit_is_rolled_back():
    class FailingCommit(RecordingSession):
        def commit(self):
            super().commit()
            raise RuntimeError('deadlock detected')

    session = FailingCommit()
    with pytest.raises(Internal):
        with store.unit_of_work(session):
            pass
    assert session.calls == ['commit', 'rollback', 'close']


def test_parse_id():
    assert store.parse_id('12') == 12
    with pytest.raises(InvalidInput) as exc:
        store.parse_id('12abc', 'customer_id')
    assert exc.value.message == 'customer_id must be an integer'


def test_create_and_read_back(app):
    with app.app_context():
        customer = store.create_customer('Northwind')
        request = {
            'customer_id': customer['id'],
            'job_name': 'Fit-out',
            'currency': 'EUR',
            'tax_rate': 0.2,
            'discount': 0.0,
            'line_items': [
                {'type': 'labor', 'uom': 'HR', 'description': '', 'qty': 4.0, 'cost': 30.0, 'sell': 55.0},
                {'type': 'equipment', 'uom': 'DAY', 'description': 'Lift', 'qty': 1.0, 'cost': 80.0, 'sell': 120.0},
            ],
        }
        created = store.create_quote(request, total=408.0)
        found = store.get_quote(created['quote']['id'])
        assert found == created
        assert found['quote']['currency'] == 'EUR'
        assert [i['uom'] for i in found['line_items']] == ['HR', 'DAY']
        assert store.list_customer_quotes(customer['id']) == [created['quote']]


def test_create_quote_unknown_customer(app):
    with app.app_context():
        with pytest.raises(NotFound):
            store.create_quote(
                {'customer_id': 5, 'job_name': 'x', 'currency': 'USD', 'tax_rate': 0.0,
                 'discount': 0.0, 'line_items': []},
                total=0.0,
            )
