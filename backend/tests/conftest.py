"""
Pytest fixtures for SPOS backend tests.

Provides the test app on in-memory SQLite, a per-test wipe of the store,
the test client, and the service objects built on the store.
"""

import pytest
from spos import create_app
from spos.extensions import db
from spos.models import StorageEntry
from spos.services.storage_service import KeyValueStore
from spos.services.inventory_service import InventoryLedger
from spos.services.auth_service import SessionManager
from spos.services.cart_service import CartSession


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test',
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'STORAGE_KEY_PREFIX': 'spos_',
}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty store for each test."""
    with app.app_context():
        db.session.query(StorageEntry).delete()
        db.session.commit()

        yield db.session

        db.session.rollback()


@pytest.fixture(scope='function')
def store(db_session):
    return KeyValueStore(db_session, prefix='spos_')


@pytest.fixture(scope='function')
def ledger(store):
    return InventoryLedger(store)


@pytest.fixture(scope='function')
def sessions(store):
    return SessionManager(store)


@pytest.fixture(scope='function')
def cart(ledger):
    return CartSession(ledger)


@pytest.fixture(scope='function')
def pen(ledger):
    """Pen: 5 on hand at 1.50, barcode 111."""
    return ledger.create({"name": "Pen", "quantity": 5, "price": 1.50, "barcode": "111"})


@pytest.fixture(scope='function')
def notebook(ledger):
    """Notebook: 1 on hand at 3.25, barcode 222."""
    return ledger.create({"name": "Notebook", "quantity": 1, "price": 3.25, "barcode": "222", "weight": "200g"})


@pytest.fixture(scope='function')
def logged_in_client(client, db_session):
    """Client with an operator registered (and therefore logged in)."""
    response = client.post('/api/auth/register', json={
        'name': 'Operator',
        'email': 'op@shop.local',
        'password': 'secret',
    })
    assert response.status_code == 201
    return client
