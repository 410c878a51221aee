"""Emotion journal module package."""

from flask import Blueprint

bp = Blueprint("emotions", __name__, url_prefix="/api/emotions")

from . import models  # noqa: E402  pylint: disable=wrong-import-position
from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "models", "routes"]
