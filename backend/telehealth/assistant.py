import logging
from flask import request, current_app
from flask_restx import Namespace, fields, Resource
from .errors import ValidationError
from .services.agentforce import AgentForceClient, is_appointment_scheduled
from .services.slack import SlackNotifier

logger = logging.getLogger(__name__)

assistant_ns = Namespace("assistant", description="AgentForce medical assistant proxy")
notify_ns = Namespace("notify", description="Slack appointment notifications")

assistant_message_model = assistant_ns.model("AssistantMessage", {
    "sessionId": fields.String(required=True),
    "accessToken": fields.String(required=True),
    "message": fields.String(required=True, description="User's text turn"),
    "patientName": fields.String(description="Used in the Slack notice when an appointment is scheduled"),
    "doctorName": fields.String(description="Used in the Slack notice when an appointment is scheduled"),
    "appointmentTime": fields.String(),
})

notify_model = notify_ns.model("Notify", {
    "patientName": fields.String(),
    "doctorName": fields.String(),
    "appointmentTime": fields.String(),
})


def get_agentforce_client():
    return AgentForceClient.from_config(current_app.config)


def get_notifier():
    return SlackNotifier.from_config(current_app.config)


@assistant_ns.route("/session")
class AssistantSession(Resource):
    def post(self):
        """Open a new assistant conversation."""
        return get_agentforce_client().create_session(), 200


@assistant_ns.route("/message")
class AssistantMessage(Resource):
    @assistant_ns.expect(assistant_message_model)
    def post(self):
        """
        Forward one message to the assistant and return its reply as is.
        A reply reporting a scheduled appointment fires one Slack notification.
        """
        data = request.get_json(silent=True) or {}
        session_id = data.get("sessionId")
        message = data.get("message")
        access_token = data.get("accessToken")
        if not session_id or not message or not access_token:
            raise ValidationError("Missing required parameters")

        reply = get_agentforce_client().send_message(session_id, access_token, message)

        if is_appointment_scheduled(reply):
            logger.info("Appointment scheduled in assistant session %s", session_id)
            get_notifier().notify_quietly(
                data.get("patientName"), data.get("doctorName"), data.get("appointmentTime")
            )
        return reply, 200


@notify_ns.route("")
class Notify(Resource):
    @notify_ns.expect(notify_model)
    def post(self):
        data = request.get_json(silent=True) or {}
        get_notifier().notify(
            data.get("patientName"), data.get("doctorName"), data.get("appointmentTime")
        )
        return {"success": True}, 200
