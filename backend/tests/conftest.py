"""
Pytest fixtures for FleetLedger backend tests.

Provides test database setup, admin/manager users, auth headers and a
trip factory.
"""

import pytest
from fleetledger import create_app
from fleetledger.extensions import db
from fleetledger.models import User, ROLE_ADMIN, ROLE_MANAGER
from fleetledger.services import session_service
from fleetledger.services.auth_service import hash_password


PASSWORD = "secret123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'PASSWORD_KDF_ROUNDS': 1,
        'BOOTSTRAP_DEFAULT_ADMIN': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


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
def client(app, db_session):
    """Create test client."""
    return app.test_client()


def _make_user(db_session, username: str, role: str) -> User:
    user = User(
        username=username,
        password_hash=hash_password(PASSWORD),
        name=username.title(),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def admin_user(db_session):
    return _make_user(db_session, "admin_user", ROLE_ADMIN)


@pytest.fixture(scope='function')
def manager_user(db_session):
    return _make_user(db_session, "manager_user", ROLE_MANAGER)


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(admin_user):
    _, token = session_service.create_session(admin_user.id)
    return auth_headers(token)


@pytest.fixture(scope='function')
def manager_headers(manager_user):
    _, token = session_service.create_session(manager_user.id)
    return auth_headers(token)


def trip_payload(**overrides) -> dict:
    payload = {
        "vehicle_number": "MH12AB1234",
        "vehicle_type": "MARKET",
        "loading_date": "2026-03-01",
        "party_name": "Sharma Traders",
        "party_freight": "1000",
        "party_advance": "200",
        "motor_owner_name": "Ramesh",
        "motor_owner_bhada": "800",
        "motor_owner_advance": "300",
    }
    payload.update(overrides)
    return payload


@pytest.fixture(scope='function')
def make_trip(client, admin_headers):
    """Create a trip through the API (as admin) and return its JSON."""
    def _make(**overrides):
        resp = client.post("/api/trips", json=trip_payload(**overrides), headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["trip"]
    return _make
