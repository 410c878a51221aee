"""HTTP routes for the emotion journal. Every route requires a bearer token."""

from flask import jsonify, request
from flask_login import current_user, login_required

from utils import parse_body, parse_query

from . import bp
from .models import (
    add_emotion as add_entry,
    delete_emotion as delete_entry,
    emotion_stats,
    list_categories,
    list_user_emotions,
    update_emotion as update_entry,
)
from .schemas import EmotionEntryPayload, EmotionUpdatePayload, JournalQuery


@bp.before_request
@login_required
def require_login():
    """Protect the whole blueprint."""


@bp.route("/categories", methods=["GET"])
def get_categories():
    return jsonify(success=True, data=[category.to_dict() for category in list_categories()])


@bp.route("/user", methods=["GET"])
def get_user_emotions():
    query = parse_query(JournalQuery)
    entries = list_user_emotions(current_user.id, query.startDate, query.endDate)
    return jsonify(success=True, data=[entry.to_dict() for entry in entries])


@bp.route("/stats", methods=["GET"])
def get_stats():
    return jsonify(success=True, data=emotion_stats(current_user.id, request.args.get("period")))


@bp.route("", methods=["POST"])
def add_emotion():
    payload = parse_body(EmotionEntryPayload)
    entry = add_entry(current_user.id, payload.emotionId, payload.intensity, payload.note)
    return jsonify(success=True, data=entry.to_ref()), 201


@bp.route("/<int:entry_id>", methods=["PUT"])
def update_emotion(entry_id: int):
    payload = parse_body(EmotionUpdatePayload)
    entry = update_entry(entry_id, current_user.id, payload.intensity, payload.note)
    return jsonify(success=True, data=entry.to_ref())


@bp.route("/<int:entry_id>", methods=["DELETE"])
def delete_emotion(entry_id: int):
    delete_entry(entry_id, current_user.id)
    return jsonify(success=True, message="Émotion supprimée avec succès")
