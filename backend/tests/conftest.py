"""
Pytest fixtures for storefront backend tests.

Provides the Flask app on an in-memory SQLite database, a test client,
in-memory service containers for service-level tests, and auth helpers.
"""

import httpx
import pytest

from storefront import create_app
from storefront.extensions import db
from storefront.repository import RecordStore
from storefront.services import build_services
from storefront.services.ai_service import TextGenerator
from storefront.services.identity_service import hash_password


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'STORE_BACKEND': 'sql',
    'SEED_ON_STARTUP': False,
    'BCRYPT_ROUNDS': 4,
    'GEMINI_API_KEY': '',
    'ADMIN_EMAIL': 'admin@davpro.com',
    'ADMIN_PASSWORD': 'admin123',
    'INVITE_CODES': ['DEMO-INVITE-2024', 'DAV-PRO-PUBLIC-INVITE'],
    'ALLOW_DEMO_LOGIN': True,
}

ADMIN_ACTOR = {"id": "admin-1", "name": "Super Admin", "role": "ADMIN", "email": "admin@davpro.com"}

SIGNUP_FORM = {
    "username": "john@biz.com",
    "password": "x",
    "fullName": "John",
    "businessName": "Acme",
    "description": "Widgets and gadgets",
    "whatsappNumber": "15551234567",
}


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def store():
    """Fresh in-memory record store."""
    return RecordStore.in_memory()


@pytest.fixture(scope='function')
def services(store):
    """Service container bound to one client session, like a logged-in browser tab."""
    return build_services(store, TEST_CONFIG)


def make_user(store, user_id, username, *, name=None, status="ACTIVE", role="USER", password="password", created_at=1000):
    """Insert a stored account directly."""
    return store.users.put(user_id, {
        "id": user_id,
        "username": username,
        "email": username,
        "name": name or username.split("@")[0].title(),
        "passwordHash": hash_password(password, rounds=4),
        "role": role,
        "status": status,
        "createdAt": created_at,
    })


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def mock_generator(handler) -> TextGenerator:
    """TextGenerator whose HTTP calls are answered by ``handler(request)``."""
    return TextGenerator(api_key="test-key", transport=httpx.MockTransport(handler))


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client):
    return auth_headers(get_auth_token(client, 'admin@davpro.com', 'admin123'))


@pytest.fixture(scope='function')
def owner(client):
    """Owner provisioned through the invitation endpoint. Returns the signup payload."""
    resp = client.post('/api/invitations/DEMO-INVITE-2024/signup', json=SIGNUP_FORM)
    assert resp.status_code == 201, resp.json
    return resp.json


@pytest.fixture(scope='function')
def owner_headers(owner):
    return auth_headers(owner["token"])
