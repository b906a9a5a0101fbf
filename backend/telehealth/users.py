from flask_restx import Namespace, Resource
from sqlalchemy.exc import SQLAlchemyError
from .models import User
from .errors import NotFoundError, StoreError
from . import db

users_ns = Namespace("users", description="User directory")
doctors_ns = Namespace("doctors", description="Doctor listing")
patients_ns = Namespace("patients", description="Patient profiles")


@doctors_ns.route("")
class DoctorList(Resource):
    def get(self):
        """All registered doctors."""
        try:
            doctors = User.query.filter_by(role="doctor").order_by(User.created_at.asc()).all()
        except SQLAlchemyError as e:
            raise StoreError("Failed to fetch doctors", details=str(e))
        return {
            "message": "Doctors fetched successfully",
            "doctors": [d.to_dict() for d in doctors],
        }, 200


@users_ns.route("/<string:user_id>")
class UserDetail(Resource):
    def get(self, user_id):
        """Public profile of any user."""
        try:
            user = db.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise StoreError("Failed to fetch user", details=str(e))
        if not user:
            raise NotFoundError("User not found")
        return {
            "message": "User fetched successfully",
            "data": {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "image": user.image,
                "role": user.role,
                "speciality": user.speciality,
                "experience": user.experience,
            },
        }, 200


@patients_ns.route("/<string:patient_id>")
class PatientDetail(Resource):
    def get(self, patient_id):
        try:
            patient = User.query.filter_by(id=patient_id, role="patient").first()
        except SQLAlchemyError as e:
            raise StoreError("Internal Server Error", details=str(e))
        if not patient:
            raise NotFoundError("User not found")
        return {"patient": patient.to_dict()}, 200
