"""Tests for registration, login and token checks."""

import jwt

from telehealth import bcrypt
from telehealth.models import User


DOCTOR_PAYLOAD = {
    "email": "grey@clinic.test",
    "password": "secret123",
    "user": "doctor",
    "name": "Dr. Meredith Grey",
    "expertise": "Cardiology",
    "experience": "7",
    "availableDays": ["Wednesday", "Monday"],
    "timeSlots": {
        "Monday": [{"start": "09:00", "end": "11:00"}],
        "Wednesday": [{"start": "14:00", "end": "16:00"}],
    },
}


class TestRegister:
    """Test cases for POST /api/auth/register."""

    def test_register_patient(self, client):
        """Patients only need email, password and type."""
        resp = client.post("/api/auth/register", json={
            "email": "p@mail.test", "password": "pw123456", "user": "patient",
        })
        assert resp.status_code == 201
        assert resp.get_json()["user"] == {"email": "p@mail.test", "role": "patient"}

        user = User.query.filter_by(email="p@mail.test").one()
        assert user.password != "pw123456"
        assert bcrypt.check_password_hash(user.password, "pw123456")

    def test_register_doctor_orders_availability_by_weekday(self, client):
        """Doctor availability is stored Monday first."""
        resp = client.post("/api/auth/register", json=DOCTOR_PAYLOAD)
        assert resp.status_code == 201

        doctor = User.query.filter_by(email="grey@clinic.test").one()
        assert doctor.speciality == "Cardiology"
        assert doctor.experience == 7
        assert [a["day"] for a in doctor.availability] == ["Monday", "Wednesday"]
        assert doctor.availability[0]["slots"] == [{"start": "09:00", "end": "11:00"}]

    def test_register_doctor_requires_doctor_fields(self, client):
        payload = dict(DOCTOR_PAYLOAD)
        del payload["expertise"]
        resp = client.post("/api/auth/register", json=payload)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "All doctor fields are required"

    def test_register_rejects_unknown_day(self, client):
        payload = dict(DOCTOR_PAYLOAD, availableDays=["Funday"])
        resp = client.post("/api/auth/register", json=payload)
        assert resp.status_code == 400

    def test_email_is_unique_across_roles(self, client, patient):
        """A doctor cannot reuse a patient's email."""
        payload = dict(DOCTOR_PAYLOAD, email=patient.email)
        resp = client.post("/api/auth/register", json=payload)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "User already exists with this email"
        assert User.query.filter_by(email=patient.email).count() == 1

    def test_missing_fields(self, client):
        resp = client.post("/api/auth/register", json={"email": "x@mail.test"})
        assert resp.status_code == 400

    def test_non_string_password(self, client):
        resp = client.post("/api/auth/register", json={
            "email": "n@mail.test", "password": 123456, "user": "patient",
        })
        assert resp.status_code == 400
        assert User.query.filter_by(email="n@mail.test").count() == 0


class TestLogin:
    """Test cases for POST /api/auth/login and GET /api/auth/me."""

    def test_login_returns_token(self, app, client, patient):
        resp = client.post("/api/auth/login", json={
            "email": patient.email, "password": "secret123", "user": "patient",
        })
        assert resp.status_code == 200
        body = resp.get_json()
        claims = jwt.decode(body["token"], app.config["SECRET_KEY"], algorithms=["HS256"])
        assert claims["id"] == patient.id
        assert claims["role"] == "patient"
        assert body["user"]["name"] == "Jane Doe"

    def test_wrong_password(self, client, patient):
        resp = client.post("/api/auth/login", json={"email": patient.email, "password": "nope"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Invalid password"

    def test_unknown_email(self, client):
        resp = client.post("/api/auth/login", json={"email": "ghost@mail.test", "password": "x"})
        assert resp.status_code == 401

    def test_role_mismatch(self, client, doctor):
        """Logging into the patient side with a doctor account fails."""
        resp = client.post("/api/auth/login", json={
            "email": doctor.email, "password": "secret123", "user": "patient",
        })
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Please login as a doctor"

    def test_me_with_token(self, client, doctor):
        token = client.post("/api/auth/login", json={
            "email": doctor.email, "password": "secret123",
        }).get_json()["token"]
        resp = client.get("/api/auth/me", headers={"x-access-token": token})
        assert resp.status_code == 200
        user = resp.get_json()["user"]
        assert user["id"] == doctor.id
        assert user["speciality"] == "Diagnostics"
        assert "password" not in user

    def test_me_without_token(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401

    def test_me_with_bad_token(self, client):
        resp = client.get("/api/auth/me", headers={"x-access-token": "not-a-jwt"})
        assert resp.status_code == 401
