"""Request payloads of the emotions module."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class EmotionEntryPayload(BaseModel):
    emotionId: int
    intensity: int = Field(ge=1, le=5)
    note: Optional[str] = None


class EmotionUpdatePayload(BaseModel):
    intensity: int = Field(ge=1, le=5)
    note: Optional[str] = None


class JournalQuery(BaseModel):
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None

    @field_validator("startDate", "endDate")
    @classmethod
    def as_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v
