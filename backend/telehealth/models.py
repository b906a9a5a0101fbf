import uuid
import datetime
from . import db

ROLES = ("patient", "doctor")
REQUEST_STATUSES = ("pending", "accepted", "rejected")
SENDERS = ("doctor", "patient")
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def new_id():
    return uuid.uuid4().hex


def isoformat(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    role = db.Column(db.String(20), nullable=False)
    name = db.Column(db.String(100))
    image = db.Column(db.String(255))
    # Doctor-only
    speciality = db.Column(db.String(100))
    experience = db.Column(db.Integer)
    availability = db.Column(db.JSON, default=list)
    # Patient-only
    age = db.Column(db.Integer)
    gender = db.Column(db.String(30))
    medical_history = db.Column(db.JSON, default=list)
    last_visit = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    def to_dict(self):
        data = {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "name": self.name,
            "image": self.image,
            "createdAt": isoformat(self.created_at),
        }
        if self.role == "doctor":
            data.update({
                "speciality": self.speciality,
                "experience": self.experience,
                "availability": self.availability or [],
            })
        else:
            data.update({
                "age": self.age,
                "gender": self.gender,
                "medicalHistory": self.medical_history or [],
                "lastVisit": isoformat(self.last_visit),
            })
        return data


class ConnectionRequest(db.Model):
    __tablename__ = "connection_requests"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    doctor_id = db.Column(db.String(32), db.ForeignKey("users.id"), nullable=False, index=True)
    patient_id = db.Column(db.String(32), db.ForeignKey("users.id"), nullable=False, index=True)
    date = db.Column(db.String(20), nullable=False)
    time = db.Column(db.String(20), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending")
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "doctorId": self.doctor_id,
            "patientId": self.patient_id,
            "date": self.date,
            "time": self.time,
            "status": self.status,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


class ChatChannel(db.Model):
    __tablename__ = "chats"
    __table_args__ = (
        db.UniqueConstraint("doctor_id", "patient_id", name="uq_chats_doctor_patient"),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    doctor_id = db.Column(db.String(32), db.ForeignKey("users.id"), nullable=False)
    patient_id = db.Column(db.String(32), db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)
    last_updated = db.Column(db.DateTime, default=datetime.datetime.utcnow)
    messages = db.relationship(
        "ChatMessage",
        backref="chat",
        lazy=True,
        order_by="ChatMessage.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "doctorId": self.doctor_id,
            "patientId": self.patient_id,
            "messages": [m.to_dict() for m in self.messages],
            "createdAt": isoformat(self.created_at),
            "lastUpdated": isoformat(self.last_updated),
        }


class ChatMessage(db.Model):
    __tablename__ = "chat_messages"

    # Autoincrement id is the append order
    id = db.Column(db.Integer, primary_key=True)
    chat_id = db.Column(db.String(32), db.ForeignKey("chats.id"), nullable=False, index=True)
    sender = db.Column(db.String(20), nullable=False)
    text = db.Column(db.Text, nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    def to_dict(self):
        return {
            "sender": self.sender,
            "text": self.text,
            "timestamp": isoformat(self.timestamp),
        }
