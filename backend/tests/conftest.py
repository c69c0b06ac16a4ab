"""
Pytest fixtures for garments backend tests.

Provides test database setup, seeded accounts and products, and test client.
"""

import pytest
from garments import create_app
from garments.extensions import db
from garments.models import Account, Product
from garments.services import credential_service
from garments.services.inventory_service import get_engine


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'ORDER_RETRY_BACKOFF': 0,
    })

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
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def engine(db_session):
    """The inventory engine wired by the app factory."""
    return get_engine()


def make_account(db_session, email, role, status="approved", name=None):
    account = Account(email=email, name=name or email.split("@")[0], role=role, status=status)
    db_session.add(account)
    db_session.commit()
    return account


@pytest.fixture(scope='function')
def admin(db_session):
    return make_account(db_session, "admin@garments.test", "admin")


@pytest.fixture(scope='function')
def manager(db_session):
    return make_account(db_session, "manager@garments.test", "manager")


@pytest.fixture(scope='function')
def suspended_manager(db_session):
    return make_account(db_session, "suspended@garments.test", "manager", status="suspended")


@pytest.fixture(scope='function')
def buyer(db_session):
    return make_account(db_session, "buyer@garments.test", "buyer")


@pytest.fixture(scope='function')
def other_buyer(db_session):
    return make_account(db_session, "other@garments.test", "buyer")


@pytest.fixture(scope='function')
def product(db_session, manager):
    """Ten units of a shirt at 12.50."""
    product = Product(
        name="Denim Shirt",
        description="Washed denim, regular fit",
        category="Shirt",
        price=12.5,
        quantity=10,
        minimum_order=1,
        images=["https://img.example/denim.jpg"],
        payment_options="Cash on Delivery",
        show_on_home=True,
        created_by=manager.email,
    )
    db_session.add(product)
    db_session.commit()
    return product


def auth_headers(email: str) -> dict:
    """Helper to create Authorization headers for an email."""
    return {'Authorization': f'Bearer {credential_service.issue_token(email)}'}


@pytest.fixture(scope='function')
def admin_headers(admin):
    return auth_headers(admin.email)


@pytest.fixture(scope='function')
def manager_headers(manager):
    return auth_headers(manager.email)


@pytest.fixture(scope='function')
def suspended_headers(suspended_manager):
    return auth_headers(suspended_manager.email)


@pytest.fixture(scope='function')
def buyer_headers(buyer):
    return auth_headers(buyer.email)


@pytest.fixture(scope='function')
def other_buyer_headers(other_buyer):
    return auth_headers(other_buyer.email)
