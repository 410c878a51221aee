"""Role management module package (admin only)."""

from flask import Blueprint

bp = Blueprint("roles", __name__, url_prefix="/api/roles")

from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "routes"]
