"""Shared fixtures: app on in-memory SQLite, test client, employee helpers."""
from __future__ import annotations

from datetime import datetime

import pytest

from app import create_app
from config import TestConfig
from extensions import db
from models import AdminFlag, DeleteFlag, Employee, hash_password, pwd_context


# bcrypt 最低成本，測試才不會慢
pwd_context.update(bcrypt__default_rounds=4)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_employee(app):
    def _make(code="E001", name="Alice", password="secret", admin=False, deleted=False):
        now = datetime.now()
        emp = Employee(
            code=code,
            name=name,
            password=hash_password(password),
            admin_flag=AdminFlag.ADMIN if admin else AdminFlag.GENERAL,
            delete_flag=DeleteFlag.DELETED if deleted else DeleteFlag.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        db.session.add(emp)
        db.session.commit()
        return emp

    return _make


def session_token(client) -> str:
    """Fetch the login page so the session holds a token, then read it back."""
    client.get("/?action=Auth&command=show_login")
    with client.session_transaction() as sess:
        return sess["_csrf_token"]


@pytest.fixture
def login(client):
    def _login(code="E001", password="secret"):
        token = session_token(client)
        client.post(
            "/?action=Auth&command=login",
            data={"code": code, "password": password, "token": token},
        )
        return token

    return _login


@pytest.fixture
def admin_client(client, make_employee, login):
    """Client logged in as an administrator; returns (client, token)."""
    make_employee(code="A001", name="Admin", password="adminpw", admin=True)
    token = login("A001", "adminpw")
    return client, token
