"""HTTP routes for role management (ADMIN only)."""

import logging

from flask import jsonify

from errors import NotFound
from extensions import db, transaction
from models import Role, RoleName, User, assign_role, remove_role
from permissions import role_required
from utils import parse_body

from . import bp
from .schemas import RoleChangePayload

logger = logging.getLogger(__name__)


@bp.route("/assign", methods=["POST"])
@role_required({RoleName.ADMIN})
def assign():
    payload = parse_body(RoleChangePayload)
    with transaction():
        user = db.session.get(User, payload.userId)
        if user is None:
            raise NotFound("Utilisateur non trouvé")
        role = Role.query.filter_by(name=payload.roleName.value).first()
        if role is None:
            raise NotFound("Rôle non trouvé")
        assign_role(user, role)

    logger.info("Role %s assigned to user %s", payload.roleName.value, payload.userId)
    return jsonify(
        success=True,
        message=f"Rôle {payload.roleName.value} assigné avec succès à l'utilisateur {payload.userId}",
    )


@bp.route("/remove", methods=["POST"])
@role_required({RoleName.ADMIN})
def remove():
    payload = parse_body(RoleChangePayload)
    with transaction():
        remove_role(payload.userId, payload.roleName)

    logger.info("Role %s removed from user %s", payload.roleName.value, payload.userId)
    return jsonify(
        success=True,
        message=f"Rôle {payload.roleName.value} retiré avec succès de l'utilisateur {payload.userId}",
    )


@bp.route("/user/<int:user_id>", methods=["GET"])
@role_required({RoleName.ADMIN})
def user_roles(user_id: int):
    user = db.session.get(User, user_id)
    roles = user.roles if user is not None else []
    return jsonify(success=True, data=[role.to_dict() for role in roles])


@bp.route("/all", methods=["GET"])
@role_required({RoleName.ADMIN})
def all_roles():
    roles = Role.query.order_by(Role.name).all()
    return jsonify(success=True, data=[role.to_dict() for role in roles])
