import datetime
import jwt
from flask import request, current_app
from flask_restx import Namespace, fields, Resource
from sqlalchemy.exc import SQLAlchemyError
from .models import User, ROLES, WEEKDAYS
from .errors import AuthenticationError, StoreError, ValidationError
from . import db, bcrypt, limiter
from functools import wraps

auth_ns = Namespace("auth", description="Registration and login")

register_model = auth_ns.model("Register", {
    "email": fields.String(required=True, description="Valid e-mail"),
    "password": fields.String(required=True, description="Password"),
    "user": fields.String(required=True, enum=list(ROLES), description="Account type"),
    "name": fields.String(description="Display name"),
    "expertise": fields.String(description="Speciality (doctors)"),
    "experience": fields.Raw(description="Years of experience (doctors)"),
    "availableDays": fields.List(fields.String, description="Working days (doctors)"),
    "timeSlots": fields.Raw(description="Mapping of day -> list of {start, end} (doctors)"),
})

login_model = auth_ns.model("Login", {
    "email": fields.String(required=True, description="Registered e-mail"),
    "password": fields.String(required=True, description="Password"),
    "user": fields.String(enum=list(ROLES), description="Account type being logged into"),
})


def token_required(f):
    """Decorator for protected routes, checks the JWT in x-access-token."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        token = request.headers.get("x-access-token")
        if not token:
            raise AuthenticationError("Token is missing")
        try:
            data = jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
        except jwt.PyJWTError as e:
            raise AuthenticationError("Invalid token", details=str(e))
        current_user = db.session.get(User, data.get("id"))
        if not current_user:
            raise AuthenticationError("Invalid token")
        return f(current_user, *args, **kwargs)
    return wrapper


def build_availability(available_days, time_slots):
    """Doctor availability ordered Monday..Sunday."""
    if not isinstance(available_days, list) or not all(isinstance(d, str) for d in available_days):
        raise ValidationError("availableDays must be a list of day names")
    time_slots = time_slots or {}
    if not isinstance(time_slots, dict):
        raise ValidationError("timeSlots must map days to slot lists")
    availability = []
    for day in sorted(set(available_days), key=lambda d: WEEKDAYS.index(d) if d in WEEKDAYS else -1):
        if day not in WEEKDAYS:
            raise ValidationError(f"Invalid day: {day}")
        slots = []
        for slot in time_slots.get(day) or []:
            if not isinstance(slot, dict) or not slot.get("start") or not slot.get("end"):
                raise ValidationError(f"Invalid time slot for {day}")
            slots.append({"start": slot["start"], "end": slot["end"]})
        availability.append({"day": day, "slots": slots})
    return availability


def issue_token(user):
    return jwt.encode({
        "id": user.id,
        "role": user.role,
        "exp": datetime.datetime.now(datetime.timezone.utc) + current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    }, current_app.config["SECRET_KEY"], algorithm="HS256")


@auth_ns.route("/register")
class Register(Resource):
    decorators = [limiter.limit("10/minute")]

    @auth_ns.expect(register_model)
    def post(self):
        data = request.get_json(silent=True) or {}
        email, password, role = data.get("email"), data.get("password"), data.get("user")
        if not email or not password or not role:
            raise ValidationError("Email, password, and user type are required")
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password must be strings")
        if role not in ROLES:
            raise ValidationError(f"Invalid user type: {role}")
        if User.query.filter_by(email=email).first():
            raise ValidationError("User already exists with this email")

        new_user = User(
            email=email,
            password=bcrypt.generate_password_hash(password).decode("utf-8"),
            role=role,
            name=data.get("name"),
        )

        if role == "doctor":
            expertise = data.get("expertise")
            experience = data.get("experience")
            available_days = data.get("availableDays")
            time_slots = data.get("timeSlots")
            if not expertise or not experience or not available_days or not time_slots:
                raise ValidationError("All doctor fields are required")
            try:
                new_user.experience = int(experience)
            except (TypeError, ValueError):
                raise ValidationError("experience must be a whole number of years")
            new_user.speciality = expertise
            new_user.availability = build_availability(available_days, time_slots)

        try:
            db.session.add(new_user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError("An error occurred during registration", details=str(e))

        return {
            "message": "User created successfully",
            "user": {"email": new_user.email, "role": new_user.role},
        }, 201


@auth_ns.route("/login")
class Login(Resource):
    decorators = [limiter.limit("20/minute")]

    @auth_ns.expect(login_model, validate=True)
    def post(self):
        data = request.get_json()
        user = User.query.filter_by(email=data["email"]).first()
        if not user:
            raise AuthenticationError("No user found with this email")
        if not bcrypt.check_password_hash(user.password, data["password"]):
            raise AuthenticationError("Invalid password")
        if data.get("user") and data["user"] != user.role:
            raise AuthenticationError(f"Please login as a {user.role}")

        return {
            "token": issue_token(user),
            "user": {
                "id": user.id,
                "email": user.email,
                "role": user.role,
                "name": user.name,
            }
        }, 200


@auth_ns.route("/me")
class CurrentUser(Resource):
    @token_required
    def get(current_user, self):
        """Profile of the user the token was issued to."""
        return {"user": current_user.to_dict()}, 200
