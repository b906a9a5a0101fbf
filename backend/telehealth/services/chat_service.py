"""Doctor/patient chat channels, one per (doctor, patient) pair."""
import datetime
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .. import db
from ..errors import StoreError, ValidationError
from ..models import SENDERS, ChatChannel, ChatMessage

logger = logging.getLogger(__name__)


def _find_channel(doctor_id, patient_id):
    return ChatChannel.query.filter_by(doctor_id=doctor_id, patient_id=patient_id).first()


def get_or_create_channel(doctor_id, patient_id):
    if not doctor_id or not patient_id:
        raise ValidationError("Missing doctorId or patientId")

    try:
        chat = _find_channel(doctor_id, patient_id)
        if chat is not None:
            return chat

        chat = ChatChannel(doctor_id=doctor_id, patient_id=patient_id)
        db.session.add(chat)
        try:
            db.session.commit()
        except IntegrityError:
            # Another request created the channel first
            db.session.rollback()
            chat = _find_channel(doctor_id, patient_id)
            if chat is None:
                raise
            return chat
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to fetch chat", details=str(e))

    logger.info("Chat channel %s opened (doctor=%s, patient=%s)", chat.id, doctor_id, patient_id)
    return chat


def append_message(doctor_id, patient_id, sender, text):
    if not (doctor_id and patient_id and text and sender):
        raise ValidationError("Missing required fields")
    if sender not in SENDERS:
        raise ValidationError(f"Invalid sender: {sender}")

    chat = get_or_create_channel(doctor_id, patient_id)

    now = datetime.datetime.utcnow()
    message = ChatMessage(sender=sender, text=text, timestamp=now)
    try:
        chat.messages.append(message)
        chat.last_updated = now
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to send message", details=str(e))

    return message
