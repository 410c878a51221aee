# -*- coding: utf-8 -*-
"""
Practitioner follow-up: patient links and follow-up notes.

A practitioner sees and writes notes only for patients linked to them in
``practitioner_patients``.
"""
import enum
import logging

from markupsafe import escape
from sqlalchemy import UniqueConstraint

from errors import DomainError, Forbidden, NotFound
from extensions import db, transaction
from models import User
from utils import isoformat, utcnow

logger = logging.getLogger(__name__)


class NoteCategory(str, enum.Enum):
    CONSULTATION = "CONSULTATION"
    SUIVI = "SUIVI"
    PRESCRIPTION = "PRESCRIPTION"
    AUTRE = "AUTRE"


class PractitionerPatient(db.Model):
    __tablename__ = "practitioner_patients"

    id = db.Column(db.Integer, primary_key=True)
    practitioner_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    patient_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("practitioner_id", "patient_id", name="uq_practitioner_patient"),
    )


class FollowUpNote(db.Model):
    __tablename__ = "follow_up_notes"

    id = db.Column(db.Integer, primary_key=True)
    practitioner_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    patient_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(32), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "category": self.category,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }


# ---------- Domain operations ----------

def is_linked(practitioner_id: int, patient_id: int) -> bool:
    return db.session.query(
        PractitionerPatient.query
        .filter_by(practitioner_id=practitioner_id, patient_id=patient_id)
        .exists()
    ).scalar()


def list_patients(practitioner_id: int) -> list[dict]:
    rows = (db.session.query(User, PractitionerPatient.created_at)
            .join(PractitionerPatient, PractitionerPatient.patient_id == User.id)
            .filter(PractitionerPatient.practitioner_id == practitioner_id)
            .order_by(User.last_name, User.first_name)
            .all())
    return [{
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "patient_since": isoformat(linked_at),
    } for user, linked_at in rows]


def add_patient(practitioner_id: int, patient_id: int) -> PractitionerPatient:
    with transaction():
        if db.session.get(User, patient_id) is None:
            raise NotFound("Patient non trouvé")
        if is_linked(practitioner_id, patient_id):
            raise DomainError("Ce patient est déjà dans votre suivi")
        link = PractitionerPatient(practitioner_id=practitioner_id, patient_id=patient_id)
        db.session.add(link)

    logger.info("Practitioner %s now follows patient %s", practitioner_id, patient_id)
    return link


def list_notes(practitioner_id: int, patient_id: int) -> list[FollowUpNote]:
    if not is_linked(practitioner_id, patient_id):
        raise Forbidden("Accès non autorisé à ce patient")
    return (FollowUpNote.query
            .filter_by(practitioner_id=practitioner_id, patient_id=patient_id)
            .order_by(FollowUpNote.created_at.desc(), FollowUpNote.id.desc())
            .all())


def add_note(practitioner_id: int, patient_id: int, content: str, category: NoteCategory) -> FollowUpNote:
    with transaction():
        if not is_linked(practitioner_id, patient_id):
            raise Forbidden("Accès non autorisé à ce patient")
        note = FollowUpNote(
            practitioner_id=practitioner_id,
            patient_id=patient_id,
            content=str(escape(content.strip())),
            category=category.value,
        )
        db.session.add(note)
    return note
