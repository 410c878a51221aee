# tests/conftest.py
import os
import sys
from types import SimpleNamespace
from uuid import uuid4

import pytest

# so that `from app import create_app` works when running from the repo root
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app  # noqa: E402
from config import TestConfig  # noqa: E402
from extensions import db  # noqa: E402
from models import Role, RoleName, User, assign_role  # noqa: E402
from security import create_access_token, hash_password  # noqa: E402
from seed_reference import seed_all  # noqa: E402

DEFAULT_PASSWORD = "Passw0rd!"


@pytest.fixture()
def app():
    # Each request gets its own app context (and so its own `g` and session);
    # tests open one explicitly when they touch the database.
    app = create_app(TestConfig)
    with app.app_context():
        seed_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Factory creating a committed user holding ``roles``; returns a plain record."""

    def _make(email=None, password=DEFAULT_PASSWORD, roles=(RoleName.USER,),
              first_name="Test", last_name="User"):
        with app.app_context():
            user = User(
                email=email or f"user-{uuid4().hex[:8]}@example.com",
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
            )
            db.session.add(user)
            db.session.flush()
            for role in roles:
                assign_role(user, Role.query.filter_by(name=role.value).one())
            db.session.commit()
            return SimpleNamespace(id=user.id, email=user.email, password=password)

    return _make


@pytest.fixture()
def auth_headers(app):
    def _headers(user):
        with app.app_context():
            return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture()
def admin(make_user):
    return make_user(email="admin@example.com", roles=(RoleName.ADMIN, RoleName.USER),
                     first_name="Ada", last_name="Admin")


@pytest.fixture()
def practitioner(make_user):
    return make_user(email="doc@example.com", roles=(RoleName.PRACTITIONER, RoleName.USER),
                     first_name="Paul", last_name="Praticien")
