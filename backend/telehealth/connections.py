from flask import request
from flask_restx import Namespace, fields, Resource
from .models import REQUEST_STATUSES
from .services import workflow

connections_ns = Namespace("connections", description="Patient to doctor connection requests")
appointments_ns = Namespace("appointments", description="A patient's appointment requests")

request_model = connections_ns.model("ConnectionRequest", {
    "doctorId": fields.String(required=True, description="Requested doctor"),
    "patientId": fields.String(required=True, description="Requesting patient"),
    "date": fields.String(required=True, description="Appointment date (YYYY-MM-DD)"),
    "time": fields.String(required=True, description="Appointment time (HH:mm)"),
})

status_model = connections_ns.model("ConnectionStatus", {
    "requestId": fields.String(required=True, description="Connection request id"),
    "status": fields.String(required=True, enum=list(REQUEST_STATUSES), description="New status"),
})


@connections_ns.route("")
class ConnectionList(Resource):
    @connections_ns.expect(request_model)
    def post(self):
        """
        A patient asks a doctor for an appointment. The request starts out pending.
        """
        data = request.get_json(silent=True) or {}
        connection = workflow.create_request(
            data.get("doctorId"), data.get("patientId"), data.get("date"), data.get("time")
        )
        return {"message": "Request sent successfully", "data": connection.to_dict()}, 201

    @connections_ns.param("doctorId", "Doctor whose requests are listed", required=True)
    @connections_ns.param("status", "pending, accepted, rejected or all (pending + accepted)")
    def get(self):
        """
        Requests addressed to a doctor, newest first, each with the patient's profile:
        /api/connections?doctorId=<id>&status=pending
        """
        doctor_id = request.args.get("doctorId")
        status = request.args.get("status", "pending")
        requests = workflow.list_for_doctor(doctor_id, status)
        return {"message": "Patients fetched successfully", "data": requests}, 200

    @connections_ns.expect(status_model)
    def put(self):
        """
        The doctor accepts or rejects a request.
        """
        data = request.get_json(silent=True) or {}
        connection = workflow.update_status(data.get("requestId"), data.get("status"))
        return {"message": f"Request {connection.status}"}, 200


@appointments_ns.route("/<string:patient_id>")
class PatientAppointments(Resource):
    def get(self, patient_id):
        """A patient's requests, soonest first, with the doctor's name."""
        return workflow.list_for_patient(patient_id), 200
