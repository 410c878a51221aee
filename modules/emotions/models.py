# -*- coding: utf-8 -*-
"""
Emotion journal models.

Tables:
- EmotionCategory: reference taxonomy (Joie, Colère, Peur, ...).
- Emotion        : nameable emotion inside a category; read-only data.
- UserEmotion    : journal entry: one user, one emotion, intensity 1..5.

Journal entries are only ever read or written through their owner's id;
another user's entry behaves exactly like a missing one.
"""
from datetime import timedelta

from sqlalchemy import CheckConstraint, func

from errors import NotFound
from extensions import db, transaction
from utils import isoformat, utcnow

STATS_PERIODS = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}
DEFAULT_PERIOD = "week"
TOP_EMOTIONS_LIMIT = 10

ENTRY_NOT_FOUND = "Émotion non trouvée ou accès non autorisé"


class EmotionCategory(db.Model):
    __tablename__ = "emotion_categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text)

    emotions = db.relationship("Emotion", back_populates="category", order_by="Emotion.id")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "emotions": [{"id": e.id, "name": e.name} for e in self.emotions],
        }


class Emotion(db.Model):
    __tablename__ = "emotions"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey("emotion_categories.id"), nullable=False)

    category = db.relationship("EmotionCategory", back_populates="emotions")


class UserEmotion(db.Model):
    __tablename__ = "user_emotions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    emotion_id = db.Column(db.Integer, db.ForeignKey("emotions.id"), nullable=False)
    intensity = db.Column(db.Integer, nullable=False)
    note = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    emotion = db.relationship("Emotion")

    __table_args__ = (
        CheckConstraint("intensity BETWEEN 1 AND 5", name="ck_user_emotions_intensity"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "emotion_id": self.emotion_id,
            "intensity": self.intensity,
            "note": self.note,
            "created_at": isoformat(self.created_at),
            "emotion_name": self.emotion.name,
            "category_name": self.emotion.category.name,
        }

    def to_ref(self) -> dict:
        return {"id": self.id, "created_at": isoformat(self.created_at)}


# ---------- Journal operations ----------

def list_categories() -> list[EmotionCategory]:
    return EmotionCategory.query.order_by(EmotionCategory.name).all()


def list_user_emotions(user_id: int, start=None, end=None) -> list[UserEmotion]:
    query = UserEmotion.query.filter(UserEmotion.user_id == user_id)
    if start is not None and end is not None:
        query = query.filter(UserEmotion.created_at.between(start, end))
    return query.order_by(UserEmotion.created_at.desc(), UserEmotion.id.desc()).all()


def _owned_entry(entry_id: int, user_id: int) -> UserEmotion:
    entry = UserEmotion.query.filter_by(id=entry_id, user_id=user_id).first()
    if entry is None:
        raise NotFound(ENTRY_NOT_FOUND)
    return entry


def add_emotion(user_id: int, emotion_id: int, intensity: int, note: str | None) -> UserEmotion:
    if db.session.get(Emotion, emotion_id) is None:
        raise NotFound("Émotion inconnue")
    with transaction():
        entry = UserEmotion(user_id=user_id, emotion_id=emotion_id, intensity=intensity, note=note)
        db.session.add(entry)
    return entry


def update_emotion(entry_id: int, user_id: int, intensity: int, note: str | None) -> UserEmotion:
    with transaction():
        entry = _owned_entry(entry_id, user_id)
        entry.intensity = intensity
        entry.note = note
    return entry


def delete_emotion(entry_id: int, user_id: int) -> None:
    with transaction():
        db.session.delete(_owned_entry(entry_id, user_id))


# ---------- Statistics ----------

def _day(value):
    # SQLite returns 'YYYY-MM-DD' strings, PostgreSQL returns date objects
    return value.isoformat() if hasattr(value, "isoformat") else value


def emotion_stats(user_id: int, period: str | None) -> dict:
    """Aggregates over the trailing window: by category, top emotions, daily counts."""
    window = STATS_PERIODS.get(period or DEFAULT_PERIOD, STATS_PERIODS[DEFAULT_PERIOD])
    since = utcnow() - window
    count = func.count(UserEmotion.id).label("count")

    def scoped(*columns):
        return (db.session.query(*columns)
                .select_from(UserEmotion)
                .join(Emotion, Emotion.id == UserEmotion.emotion_id)
                .join(EmotionCategory, EmotionCategory.id == Emotion.category_id)
                .filter(UserEmotion.user_id == user_id, UserEmotion.created_at > since))

    category_rows = (scoped(EmotionCategory.name, count)
                     .group_by(EmotionCategory.name)
                     .order_by(count.desc(), EmotionCategory.name)
                     .all())

    top_rows = (scoped(Emotion.name, EmotionCategory.name, count)
                .group_by(Emotion.name, EmotionCategory.name)
                .order_by(count.desc(), Emotion.name)
                .limit(TOP_EMOTIONS_LIMIT)
                .all())

    day = func.date(UserEmotion.created_at)
    time_rows = (scoped(day.label("date"), EmotionCategory.name, count)
                 .group_by(day, EmotionCategory.name)
                 .order_by(day, EmotionCategory.name)
                 .all())

    return {
        "categoryStats": [{"name": name, "count": n} for name, n in category_rows],
        "topEmotions": [{"name": name, "category": category, "count": n} for name, category, n in top_rows],
        "timeData": [{"date": _day(d), "category": category, "count": n} for d, category, n in time_rows],
    }
