"""HTTP routes for accounts: registration, login, profile, password reset."""

from flask import jsonify, request
from flask_login import current_user, login_required

from models import RoleName
from permissions import role_required
from security import create_access_token
from utils import pagination_meta, parse_body, parse_pagination

from . import bp
from .models import (
    RESET_REQUESTED,
    authenticate,
    get_user_or_404,
    list_users,
    register_user,
    request_reset,
    reset_password as reset_user_password,
    update_profile as update_user_profile,
)
from .schemas import (
    ForgotPasswordPayload,
    LoginPayload,
    ProfileUpdatePayload,
    RegisterPayload,
    ResetPasswordPayload,
)


@bp.route("/register", methods=["POST"])
def register():
    payload = parse_body(RegisterPayload)
    user = register_user(payload.email, payload.password, payload.firstName, payload.lastName)
    return jsonify(success=True, data=user.to_dict()), 201


@bp.route("/login", methods=["POST"])
def login():
    payload = parse_body(LoginPayload)
    user = authenticate(payload.email, payload.password)
    return jsonify(success=True, message="Connexion réussie", token=create_access_token(user.id))


@bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    payload = parse_body(ForgotPasswordPayload)
    request_reset(payload.email)
    return jsonify(success=True, message=RESET_REQUESTED)


@bp.route("/reset-password", methods=["POST"])
def reset_password():
    payload = parse_body(ResetPasswordPayload)
    reset_user_password(payload.token, payload.newPassword)
    return jsonify(success=True, message="Votre mot de passe a été réinitialisé avec succès")


@bp.route("/profile", methods=["GET"])
@login_required
def get_profile():
    user = get_user_or_404(current_user.id)
    return jsonify(success=True, data=user.to_dict(with_updated=True))


@bp.route("/profile", methods=["PUT"])
@login_required
def update_profile():
    payload = parse_body(ProfileUpdatePayload)
    user = get_user_or_404(current_user.id)
    user = update_user_profile(user, payload.first_name, payload.last_name, payload.email)
    return jsonify(success=True, data=user.to_dict(with_updated=True))


@bp.route("/roles", methods=["GET"])
@login_required
def my_roles():
    user = get_user_or_404(current_user.id)
    return jsonify(success=True, data=[role.to_dict() for role in user.roles])


@bp.route("/admin/users", methods=["GET"])
@role_required({RoleName.ADMIN})
def admin_list_users():
    limit, offset = parse_pagination(default_limit=20)
    search = (request.args.get("search") or "").strip() or None
    users, total = list_users(search, limit, offset)
    data = []
    for user in users:
        row = user.to_dict()
        row["roles"] = sorted(user.role_names)
        data.append(row)
    return jsonify(success=True, data=data, pagination=pagination_meta(total, limit, offset))
