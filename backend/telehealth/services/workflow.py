"""Appointment request / acceptance workflow.

Patients create connection requests, doctors move them from ``pending`` to
``accepted`` or ``rejected``. Accepting a request does not open a chat
channel; that happens the first time either side reads the channel.
"""
import datetime
import logging

from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..errors import NotFoundError, StoreError, ValidationError
from ..models import REQUEST_STATUSES, ConnectionRequest, User, isoformat

logger = logging.getLogger(__name__)

STATUS_FILTERS = {
    "pending": ("pending",),
    "accepted": ("accepted",),
    "rejected": ("rejected",),
    # rejected requests are left out of "all"
    "all": ("pending", "accepted"),
}

PLACEHOLDER_IMAGE = "/placeholder.svg"


def create_request(doctor_id, patient_id, date, time):
    if not (doctor_id and patient_id and date and time):
        raise ValidationError("doctorId, patientId, date, and time are required")

    now = datetime.datetime.utcnow()
    connection = ConnectionRequest(
        doctor_id=doctor_id,
        patient_id=patient_id,
        date=date,
        time=time,
        status="pending",
        created_at=now,
        updated_at=now,
    )
    try:
        db.session.add(connection)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to create connection request", details=str(e))

    logger.info("Connection request %s created (doctor=%s, patient=%s)",
                connection.id, doctor_id, patient_id)
    return connection


def _patient_profile(patient):
    if patient is None:
        return {
            "id": None,
            "name": "Unknown Patient",
            "email": None,
            "image": PLACEHOLDER_IMAGE,
            "age": 0,
            "gender": "Not specified",
            "medicalHistory": [],
            "lastVisit": None,
            "joinedDate": None,
        }
    return {
        "id": patient.id,
        "name": patient.name or "Unknown Patient",
        "email": patient.email,
        "image": patient.image or PLACEHOLDER_IMAGE,
        "age": patient.age or 0,
        "gender": patient.gender or "Not specified",
        "medicalHistory": patient.medical_history or [],
        "lastVisit": isoformat(patient.last_visit),
        "joinedDate": isoformat(patient.created_at),
    }


def list_for_doctor(doctor_id, status="pending"):
    """Requests addressed to a doctor, newest first, with patient profiles embedded."""
    if not doctor_id:
        raise ValidationError("Missing doctorId")
    statuses = STATUS_FILTERS.get(status or "pending")
    if statuses is None:
        raise ValidationError(f"Invalid status filter: {status}")

    try:
        requests = (
            ConnectionRequest.query
            .filter(ConnectionRequest.doctor_id == doctor_id,
                    ConnectionRequest.status.in_(statuses))
            .order_by(ConnectionRequest.created_at.desc())
            .all()
        )
        patient_ids = {r.patient_id for r in requests}
        patients = {}
        if patient_ids:
            patients = {p.id: p for p in User.query.filter(User.id.in_(patient_ids)).all()}
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to fetch patients", details=str(e))

    output = []
    for r in requests:
        output.append({
            "id": r.id,
            "status": r.status,
            "date": r.date,
            "time": r.time,
            "createdAt": isoformat(r.created_at),
            "updatedAt": isoformat(r.updated_at),
            "patient": _patient_profile(patients.get(r.patient_id)),
        })
    return output


def list_for_patient(patient_id):
    """A patient's requests, soonest appointment first, with the doctor's name."""
    try:
        appointments = (
            ConnectionRequest.query
            .filter_by(patient_id=patient_id)
            .order_by(ConnectionRequest.date.asc(), ConnectionRequest.time.asc())
            .all()
        )
        doctor_ids = {a.doctor_id for a in appointments}
        doctors = {}
        if doctor_ids:
            doctors = {d.id: d for d in User.query.filter(User.id.in_(doctor_ids)).all()}
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to fetch appointments", details=str(e))

    output = []
    for a in appointments:
        item = a.to_dict()
        doctor = doctors.get(a.doctor_id)
        item["doctorName"] = (doctor.name if doctor else None) or "Doctor"
        output.append(item)
    return output


def update_status(request_id, status):
    if not request_id or not status:
        raise ValidationError("requestId and status are required")
    if status not in REQUEST_STATUSES:
        raise ValidationError(f"Invalid status: {status}")

    try:
        connection = db.session.get(ConnectionRequest, request_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to update request", details=str(e))
    if connection is None:
        raise NotFoundError("No request updated")
    if status == "pending" and connection.status != "pending":
        raise ValidationError(f"Request already {connection.status}")

    connection.status = status
    connection.updated_at = datetime.datetime.utcnow()
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to update request", details=str(e))

    logger.info("Connection request %s -> %s", request_id, status)
    return connection
