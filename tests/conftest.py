"""Pytest configuration and fixtures."""

import datetime

import pytest

from config import TestConfig
from telehealth import bcrypt, create_app, db
from telehealth.models import User


@pytest.fixture
def app():
    """Application bound to a fresh in-memory database."""
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Insert a user directly, bypassing the registration endpoint."""
    def _make_user(email, role="patient", password="secret123", **fields):
        user = User(
            email=email,
            password=bcrypt.generate_password_hash(password).decode("utf-8"),
            role=role,
            **fields,
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def doctor(make_user):
    return make_user(
        "house@clinic.test",
        role="doctor",
        name="Dr. Gregory House",
        speciality="Diagnostics",
        experience=20,
        availability=[{"day": "Monday", "slots": [{"start": "09:00", "end": "12:00"}]}],
    )


@pytest.fixture
def patient(make_user):
    return make_user(
        "jane@mail.test",
        name="Jane Doe",
        age=34,
        gender="female",
        medical_history=["asthma"],
        last_visit=datetime.datetime(2024, 5, 2, 14, 30),
    )
