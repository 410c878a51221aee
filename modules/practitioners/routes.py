"""HTTP routes for practitioners: patient follow-up and notes."""

from flask import jsonify
from flask_login import current_user

from models import RoleName
from permissions import role_required
from utils import isoformat, parse_body

from . import bp
from .models import add_note, add_patient as link_patient, list_notes, list_patients
from .schemas import NotePayload, PatientPayload


@bp.before_request
@role_required({RoleName.PRACTITIONER})
def require_practitioner():
    """Protect the whole blueprint."""


@bp.route("/patients", methods=["GET"])
def get_patients():
    return jsonify(success=True, data=list_patients(current_user.id))


@bp.route("/patients", methods=["POST"])
def add_patient():
    payload = parse_body(PatientPayload)
    link_patient(current_user.id, payload.patientId)
    return jsonify(success=True, message="Patient ajouté au suivi"), 201


@bp.route("/patients/<int:patient_id>/notes", methods=["GET"])
def get_patient_notes(patient_id: int):
    notes = list_notes(current_user.id, patient_id)
    return jsonify(success=True, data=[note.to_dict() for note in notes])


@bp.route("/notes", methods=["POST"])
def add_follow_up_note():
    payload = parse_body(NotePayload)
    note = add_note(current_user.id, payload.patientId, payload.content, payload.category)
    return jsonify(success=True, data={"id": note.id, "created_at": isoformat(note.created_at)}), 201
