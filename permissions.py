# permissions.py
"""
Authentication and RBAC for the API.

- load_user_from_request: Flask-Login request loader resolving the caller
  from an ``Authorization: Bearer <JWT>`` header.
- role_required({...}): route decorator, 401 without a valid token,
  403 unless the caller holds at least one of the required roles.
  The caller's role names are left in ``g.user_roles`` for handlers.
- is_admin(): helper for ownership-or-admin checks.

Roles:
- USER         : journaling, profile
- PRACTITIONER : patients and follow-up notes
- ADMIN        : articles, role management, user listing
"""

import logging
from functools import wraps
from typing import Iterable

import jwt
from flask import g, jsonify, request
from flask_login import current_user, login_required

from errors import Forbidden
from extensions import db, login_manager
from models import RoleName, User, role_names_for
from security import decode_access_token

logger = logging.getLogger(__name__)


# ------------------------------ AUTH GUARD ------------------------------ #
@login_manager.request_loader
def load_user_from_request(req) -> User | None:
    """Resolve the bearer token of ``req`` to a ``User`` (or None)."""
    header = req.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    try:
        user_id = decode_access_token(token.strip())
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        return None
    return db.session.get(User, user_id)


@login_manager.user_loader
def load_user(user_id: str | None) -> None:
    # Bearer tokens are the only credential; a session cookie never identifies a caller.
    return None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify(success=False, message="Token invalide ou manquant"), 401


# ------------------------------ ROLE GATE ------------------------------- #
def role_required(allowed_roles: Iterable[RoleName] | RoleName):
    """
    Decorator restricting a route to callers holding one of ``allowed_roles``.
    Example:
        @role_required({RoleName.ADMIN})
        def view(): ...
    """
    if isinstance(allowed_roles, RoleName):
        allowed = {allowed_roles.value}
    else:
        allowed = {RoleName(role).value for role in allowed_roles}

    def decorator(view_func):
        @wraps(view_func)
        @login_required
        def wrapped(*args, **kwargs):
            user_roles = current_user_roles()
            if not allowed & user_roles:
                raise Forbidden("Accès non autorisé")
            return view_func(*args, **kwargs)

        return wrapped
    return decorator


def current_user_roles() -> set[str]:
    """Role names of the authenticated caller, cached on ``g`` for the request."""
    if "user_roles" not in g:
        g.user_roles = role_names_for(current_user.id)
    return g.user_roles


# --------------------------- OWNERSHIP HELPERS -------------------------- #
def is_admin() -> bool:
    return bool(current_user.is_authenticated and RoleName.ADMIN.value in current_user_roles())
