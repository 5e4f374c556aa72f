import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from config import TestingConfig
from models import db
from repositories import UserRepository

DEFAULT_EMAIL = "jana@example.com"
DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def app():
    """Application on a fresh in-memory SQLite database.

    No app context is left pushed: every request must get its own so the
    logged-in user cached on ``g`` does not leak between requests.
    """
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Insert a user and return its id."""

    def _make_user(email=DEFAULT_EMAIL, password=DEFAULT_PASSWORD, first_name="Jana", last_name="Novak"):
        with app.app_context():
            user = UserRepository().create(first_name, last_name, email, generate_password_hash(password))
            return user.id

    return _make_user


@pytest.fixture
def user_id(make_user):
    return make_user()


@pytest.fixture
def login():
    def _login(client, email=DEFAULT_EMAIL, password=DEFAULT_PASSWORD):
        response = client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.get_json()
        return response

    return _login


@pytest.fixture
def auth_client(client, user_id, login):
    """Test client logged in as the default user."""
    login(client)
    return client


@pytest.fixture
def other_client(app, make_user, login):
    """Second client logged in as a different user."""
    make_user(email="peter@example.com", first_name="Peter", last_name="Kral")
    other = app.test_client()
    login(other, email="peter@example.com")
    return other
