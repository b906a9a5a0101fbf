from flask import request
from flask_restx import Namespace, fields, Resource
from .models import SENDERS
from .services import chat_service

chat_ns = Namespace("chat", description="Doctor/patient chat")

message_model = chat_ns.model("ChatMessage", {
    "doctorId": fields.String(required=True),
    "patientId": fields.String(required=True),
    "message": fields.String(required=True, description="Message text"),
    "sender": fields.String(required=True, enum=list(SENDERS)),
})


@chat_ns.route("")
class Chat(Resource):
    @chat_ns.param("doctorId", "Doctor side of the channel", required=True)
    @chat_ns.param("patientId", "Patient side of the channel", required=True)
    def get(self):
        """Fetch the channel for a doctor/patient pair, creating it if needed."""
        chat = chat_service.get_or_create_channel(
            request.args.get("doctorId"), request.args.get("patientId")
        )
        return {"message": "Chat fetched successfully", "data": chat.to_dict()}, 200

    @chat_ns.expect(message_model)
    def post(self):
        data = request.get_json(silent=True) or {}
        message = chat_service.append_message(
            data.get("doctorId"), data.get("patientId"), data.get("sender"), data.get("message")
        )
        return {"message": "Message sent successfully", "data": message.to_dict()}, 201
