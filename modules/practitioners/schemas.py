"""Request payloads of the practitioners module."""
from pydantic import BaseModel, field_validator

from .models import NoteCategory


class PatientPayload(BaseModel):
    patientId: int


class NotePayload(BaseModel):
    patientId: int
    content: str
    category: NoteCategory

    @field_validator("content")
    @classmethod
    def content_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le contenu est requis")
        return v
