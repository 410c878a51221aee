# -*- coding: utf-8 -*-
"""
Users module: password-reset tokens and the account operations.

Reset token lifecycle:
    requested -> issued -> consumed | expired | superseded

- request_reset() marks every unused token of the user as used before
  issuing a new one, so at most one token per user is ever live.
- reset_password() verifies, re-hashes and consumes inside one transaction.
"""
import logging
import secrets
from datetime import timedelta

from flask import current_app
from sqlalchemy import or_

from errors import DomainError, EmailDeliveryError, InvalidOrExpiredToken, NotFound, Unauthorized
from extensions import db, transaction
from models import Role, RoleName, User, assign_role
from notifications import send_password_reset_email
from security import hash_password, verify_password
from utils import utcnow

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "Un utilisateur avec cet email existe déjà"
RESET_REQUESTED = "Si un compte existe avec cet email, vous recevrez les instructions de réinitialisation."


class PasswordResetToken(db.Model):
    __tablename__ = "password_reset_tokens"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = db.Column(db.String(64), unique=True, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship("User")

    @property
    def is_live(self) -> bool:
        return self.used_at is None and self.expires_at > utcnow()


# ---------- Account operations ----------

def _email_taken(email: str, exclude_user_id: int | None = None) -> bool:
    query = User.query.filter(db.func.lower(User.email) == email.lower())
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return db.session.query(query.exists()).scalar()


def register_user(email: str, password: str, first_name: str, last_name: str) -> User:
    """Create an account holding the USER role."""
    if _email_taken(email):
        raise DomainError(DUPLICATE_EMAIL)

    with transaction():
        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
        )
        db.session.add(user)
        db.session.flush()

        default_role = Role.query.filter_by(name=RoleName.USER.value).first()
        if default_role is not None:
            assign_role(user, default_role)

    logger.info("Registered user %s", user.id)
    return user


def authenticate(email: str, password: str) -> User:
    user = User.query.filter(db.func.lower(User.email) == email.lower()).first()
    if user is None or not verify_password(password, user.password_hash):
        raise Unauthorized("Email ou mot de passe incorrect")
    return user


def update_profile(user: User, first_name: str | None, last_name: str | None, email: str | None) -> User:
    """Partial update: only the provided fields change."""
    if email is not None and _email_taken(email, exclude_user_id=user.id):
        raise DomainError(DUPLICATE_EMAIL)

    with transaction():
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        if email is not None:
            user.email = email
        user.updated_at = utcnow()
    return user


def get_user_or_404(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("Utilisateur non trouvé")
    return user


def list_users(search: str | None, limit: int, offset: int) -> tuple[list[User], int]:
    """Page of users, newest first, and the total for the same filter."""
    query = User.query
    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            User.email.ilike(like),
            User.first_name.ilike(like),
            User.last_name.ilike(like),
        ))
    total = query.count()
    users = (query.order_by(User.created_at.desc(), User.id.desc())
             .limit(limit)
             .offset(offset)
             .all())
    return users, total


# ---------- Password reset ----------

def request_reset(email: str) -> str | None:
    """
    Issue a reset token for ``email`` and mail the link.
    Returns the token, or None when no account matches (callers must not
    reveal the difference).
    """
    user = User.query.filter(db.func.lower(User.email) == email.lower()).first()
    if user is None:
        return None

    now = utcnow()
    token = secrets.token_hex(32)
    ttl = timedelta(minutes=current_app.config.get("RESET_TOKEN_TTL_MINUTES", 60))

    with transaction():
        (PasswordResetToken.query
         .filter(PasswordResetToken.user_id == user.id, PasswordResetToken.used_at.is_(None))
         .update({PasswordResetToken.used_at: now}, synchronize_session=False))
        db.session.add(PasswordResetToken(user_id=user.id, token=token, expires_at=now + ttl))

    logger.info("Password reset token issued for user %s", user.id)

    if not send_password_reset_email(user.email, token, user.first_name):
        raise EmailDeliveryError()
    return token


def verify_reset_token(token: str) -> PasswordResetToken:
    matches = (PasswordResetToken.query
               .filter(PasswordResetToken.token == token,
                       PasswordResetToken.used_at.is_(None),
                       PasswordResetToken.expires_at > utcnow())
               .all())
    if len(matches) != 1:
        raise InvalidOrExpiredToken()
    return matches[0]


def reset_password(token: str, new_password: str) -> User:
    with transaction():
        reset = verify_reset_token(token)
        user = reset.user
        user.password_hash = hash_password(new_password)
        user.updated_at = utcnow()
        reset.used_at = utcnow()

    logger.info("Password reset completed for user %s", user.id)
    return user
