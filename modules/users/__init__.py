"""Users module package: registration, login, profile, password reset."""

from flask import Blueprint

bp = Blueprint("users", __name__, url_prefix="/api/users")

from . import models  # noqa: E402  pylint: disable=wrong-import-position
from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "models", "routes"]
