"""Password hashing and JWT helpers."""

from datetime import timedelta

import bcrypt
import jwt
from flask import current_app

from utils import utcnow


def hash_password(password: str) -> str:
    """Hash a password with bcrypt using the configured cost factor."""
    rounds = current_app.config.get("BCRYPT_ROUNDS", 10)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed hash stored for this user
        return False


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token carrying ``userId``."""
    cfg = current_app.config
    expire = utcnow() + (expires_delta or timedelta(hours=cfg["JWT_EXPIRES_HOURS"]))
    payload = {"userId": user_id, "exp": expire}
    return jwt.encode(payload, cfg["JWT_SECRET"], algorithm=cfg["JWT_ALGORITHM"])


def decode_access_token(token: str) -> int:
    """Return the user id of a valid token; raises ``jwt.InvalidTokenError`` otherwise."""
    cfg = current_app.config
    payload = jwt.decode(token, cfg["JWT_SECRET"], algorithms=[cfg["JWT_ALGORITHM"]])
    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise jwt.InvalidTokenError("missing userId")
    return user_id
